"""
Flyout Manager - slide-in panels docked to the edge of a host window.
"""
from abc import ABC, abstractmethod
from concurrent.futures import Future
from typing import Any, List, Optional
from PySide6.QtCore import QEvent, QObject, Qt, Signal
from PySide6.QtWidgets import (QApplication, QFrame, QHBoxLayout, QLabel,
                               QToolButton, QVBoxLayout, QWidget)

from tinymvvm.ui.managers.base import ViewPresenter


class Flyout(QFrame):
    """
    Panel overlaying the left or right edge of its host window, full height.
    Follows the host's size and emits `closed` once when closed.
    """

    closed = Signal()

    def __init__(self, content: QWidget, host: QWidget, title: str = "",
                 width: int = 320, position: str = "right"):
        super().__init__(host)
        self.setObjectName("Flyout")
        self.setFrameShape(QFrame.Shape.StyledPanel)
        self.setAutoFillBackground(True)
        self.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose)

        self.content = content
        self.position = position
        self._host = host
        self._width = width
        self._closed = False

        layout = QVBoxLayout(self)
        header = QHBoxLayout()
        self.title_label = QLabel(title)
        self.title_label.setObjectName("FlyoutTitle")
        header.addWidget(self.title_label)
        header.addStretch()
        self.close_button = QToolButton()
        self.close_button.setText("✕")
        self.close_button.clicked.connect(self.close)
        header.addWidget(self.close_button)
        layout.addLayout(header)
        layout.addWidget(content)

        host.installEventFilter(self)
        self.reposition()

    def reposition(self) -> None:
        host_rect = self._host.rect()
        width = min(self._width, host_rect.width()) if host_rect.width() > 0 else self._width
        x = 0 if self.position == "left" else host_rect.width() - width
        self.setGeometry(x, 0, width, host_rect.height())

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if watched is self._host and event.type() == QEvent.Type.Resize:
            self.reposition()
        return False

    def closeEvent(self, event) -> None:
        if not self._closed:
            self._closed = True
            self._host.removeEventFilter(self)
            self.closed.emit()
        super().closeEvent(event)


class IFlyoutManager(ABC):
    """Shows flyouts bound to ViewModels."""

    @abstractmethod
    def show_flyout(self, view_model_cls: type, host: Optional[QWidget] = None) -> Future:
        """
        Show a flyout over `host` (default: the active window). The future
        completes with the DialogViewModel.close() result, or None when the
        flyout is closed otherwise.
        """

    @abstractmethod
    def close_all(self) -> None:
        """Close every open flyout."""


class FlyoutManager(ViewPresenter, IFlyoutManager):
    """Default IFlyoutManager."""

    def show_flyout(self, view_model_cls: type, host: Optional[QWidget] = None) -> Future:
        host = host or self._default_host()
        if host is None:
            raise RuntimeError("No host window available for a flyout")

        view_model, view = self.create_view(view_model_cls)
        settings = self._config.data.flyout
        flyout = Flyout(view, host, getattr(view_model, "display_name", ""),
                        width=settings.width, position=settings.position)
        flyout.data_context = view_model

        future: Future = Future()
        result: List[Any] = [None]

        close_requested = getattr(view_model, "closeRequested", None)
        if close_requested is not None:
            def on_close_requested(value: Any):
                result[0] = value
                flyout.close()
            close_requested.connect(on_close_requested)

        def on_closed():
            if close_requested is not None:
                close_requested.disconnect(on_close_requested)
            if not future.done():
                future.set_result(result[0])

        flyout.closed.connect(on_closed)
        self.track(view_model, flyout)
        flyout.show()
        flyout.raise_()

        self.log.debug(f"Flyout shown for {view_model_cls.__name__} on {settings.position}")
        return future

    def close_all(self) -> None:
        for view in self.open_views:
            if isinstance(view, Flyout):
                view.close()

    def _default_host(self) -> Optional[QWidget]:
        active = QApplication.activeWindow()
        if active is not None:
            return active
        for widget in QApplication.topLevelWidgets():
            if widget.isVisible() and widget.isWindow():
                return widget
        return None
