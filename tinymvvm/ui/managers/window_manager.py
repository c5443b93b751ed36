"""
Window Manager - shows top-level windows for ViewModels.
"""
from abc import ABC, abstractmethod
from typing import Any, Optional
from PySide6.QtCore import Qt
from PySide6.QtWidgets import QWidget

from tinymvvm.ui.managers.base import ViewPresenter


class IWindowManager(ABC):
    """Creates and shows windows bound to ViewModels."""

    @abstractmethod
    def show_window(self, view_model_cls: type, owner: Optional[QWidget] = None) -> QWidget:
        """Resolve `view_model_cls`, create its view and show it. Returns the window."""

    @abstractmethod
    def show_window_for(self, view_model: Any, owner: Optional[QWidget] = None) -> QWidget:
        """Show a window for an existing ViewModel instance."""


class WindowManager(ViewPresenter, IWindowManager):
    """
    Default IWindowManager.

    Windows get the configured default size unless the view already resized
    itself, and the ViewModel's display name as title unless the view set one.
    """

    def show_window(self, view_model_cls: type, owner: Optional[QWidget] = None) -> QWidget:
        view_model = self.resolve_view_model(view_model_cls)
        return self.show_window_for(view_model, owner)

    def show_window_for(self, view_model: Any, owner: Optional[QWidget] = None) -> QWidget:
        window = self._views.create_view(view_model)
        settings = self._config.data.window

        if owner is not None:
            window.setParent(owner, window.windowFlags() | Qt.WindowType.Window)
        if not window.testAttribute(Qt.WidgetAttribute.WA_Resized):
            window.resize(settings.width, settings.height)
        if not window.windowTitle():
            window.setWindowTitle(settings.title or getattr(view_model, "display_name", "")
                                  or self._config.data.general.app_name)

        window.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose)
        self.track(view_model, window)
        window.show()

        self.log.debug(f"Window shown for {type(view_model).__name__}")
        return window
