"""
Dialog Manager - modal dialogs, message boxes and file pickers.
"""
from abc import ABC, abstractmethod
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Optional, Sequence
from PySide6.QtCore import Qt
from PySide6.QtWidgets import QDialog, QFileDialog, QMessageBox, QVBoxLayout, QWidget

from tinymvvm.ui.managers.base import ViewPresenter

_BUTTONS = {
    "ok": QMessageBox.StandardButton.Ok,
    "cancel": QMessageBox.StandardButton.Cancel,
    "yes": QMessageBox.StandardButton.Yes,
    "no": QMessageBox.StandardButton.No,
    "retry": QMessageBox.StandardButton.Retry,
    "abort": QMessageBox.StandardButton.Abort,
    "close": QMessageBox.StandardButton.Close,
}


class IDialogManager(ABC):
    """Shows dialogs bound to ViewModels plus a few stock dialogs."""

    @abstractmethod
    def show_dialog(self, view_model_cls: type, owner: Optional[QWidget] = None) -> int:
        """Show a modal dialog and block until it closes. Returns the QDialog result code."""

    @abstractmethod
    def show_dialog_async(self, view_model_cls: type, owner: Optional[QWidget] = None) -> Future:
        """Show a window-modal dialog; the future completes when it closes."""

    @abstractmethod
    def show_message_box(self, title: str, text: str, buttons: Sequence[str] = ("ok",),
                         owner: Optional[QWidget] = None) -> str:
        """Show a message box. Returns the name of the pressed button."""

    @abstractmethod
    def select_file(self, owner: Optional[QWidget] = None, title: str = "Select File",
                    filters: str = "All Files (*.*)", start_dir: Optional[Path] = None) -> Optional[Path]:
        """Pick an existing file, or None if cancelled."""

    @abstractmethod
    def select_folder(self, owner: Optional[QWidget] = None, title: str = "Select Folder",
                      start_dir: Optional[Path] = None) -> Optional[Path]:
        """Pick a folder, or None if cancelled."""


class DialogManager(ViewPresenter, IDialogManager):
    """
    Default IDialogManager.

    A view that is not a QDialog is wrapped in one. DialogViewModel.close(result)
    accepts the dialog; the async variant then completes with `result`, otherwise
    with the dialog's result code.
    """

    def show_dialog(self, view_model_cls: type, owner: Optional[QWidget] = None) -> int:
        view_model, dialog = self._create_dialog(view_model_cls, owner)
        code = dialog.exec()
        self.log.debug(f"Dialog for {view_model_cls.__name__} closed with {code}")
        return code

    def show_dialog_async(self, view_model_cls: type, owner: Optional[QWidget] = None) -> Future:
        view_model, dialog = self._create_dialog(view_model_cls, owner)
        future: Future = Future()

        def on_finished(code: int):
            if not future.done():
                future.set_result(getattr(dialog, "close_result", code))

        dialog.finished.connect(on_finished)
        dialog.open()
        return future

    def show_message_box(self, title: str, text: str, buttons: Sequence[str] = ("ok",),
                         owner: Optional[QWidget] = None) -> str:
        unknown = [b for b in buttons if b not in _BUTTONS]
        if unknown or not buttons:
            raise ValueError(f"Unsupported message box buttons: {unknown or buttons}")

        box = QMessageBox(owner)
        box.setWindowTitle(title)
        box.setText(text)
        standard = QMessageBox.StandardButton.NoButton
        for name in buttons:
            standard |= _BUTTONS[name]
        box.setStandardButtons(standard)
        box.exec()

        clicked = box.clickedButton()
        if clicked is not None:
            pressed = box.standardButton(clicked)
            for name, button in _BUTTONS.items():
                if button == pressed:
                    return name
        # Closed via Escape/title bar without a matching button
        return "cancel" if "cancel" in buttons else buttons[-1]

    def select_file(self, owner: Optional[QWidget] = None, title: str = "Select File",
                    filters: str = "All Files (*.*)", start_dir: Optional[Path] = None) -> Optional[Path]:
        start_path = str(start_dir) if start_dir else ""
        file_path, _ = QFileDialog.getOpenFileName(owner, title, start_path, filters)
        if file_path:
            return Path(file_path)
        return None

    def select_folder(self, owner: Optional[QWidget] = None, title: str = "Select Folder",
                      start_dir: Optional[Path] = None) -> Optional[Path]:
        start_path = str(start_dir) if start_dir else ""
        folder = QFileDialog.getExistingDirectory(
            owner,
            title,
            start_path,
            QFileDialog.Option.ShowDirsOnly | QFileDialog.Option.DontResolveSymlinks
        )
        if folder:
            return Path(folder)
        return None

    def _create_dialog(self, view_model_cls: type, owner: Optional[QWidget]):
        view_model, view = self.create_view(view_model_cls)

        if isinstance(view, QDialog):
            dialog = view
            if owner is not None:
                dialog.setParent(owner, dialog.windowFlags())
        else:
            dialog = QDialog(owner)
            layout = QVBoxLayout(dialog)
            layout.setContentsMargins(0, 0, 0, 0)
            layout.addWidget(view)
            dialog.data_context = view_model

        dialog.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose)
        if not dialog.windowTitle():
            dialog.setWindowTitle(getattr(view_model, "display_name", ""))

        close_requested = getattr(view_model, "closeRequested", None)
        if close_requested is not None:
            def on_close_requested(result: Any):
                dialog.close_result = result
                dialog.accept()
            close_requested.connect(on_close_requested)
            # ViewModels may outlive the dialog (single-instance registrations)
            dialog.finished.connect(lambda _code: close_requested.disconnect(on_close_requested))

        self.track(view_model, dialog)
        return view_model, dialog
