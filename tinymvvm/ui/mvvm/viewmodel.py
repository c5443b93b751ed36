"""
MVVM ViewModel Infrastructure.

ViewModelBase adds activation hooks the managers call when a view opens and
closes; DialogViewModel lets a dialog or flyout close itself with a result.
"""
from typing import Any
from PySide6.QtCore import Signal

from tinymvvm.ui.mvvm.bindable import PropertyChangedBase


class ViewModelBase(PropertyChangedBase):
    """
    Base class for ViewModels.

    Example:
        class MainViewModel(ViewModelBase):
            def __init__(self, ui: IUiExecution):
                super().__init__()
                self._ui = ui
                self._status = "Ready"

            @property
            def status(self):
                return self._status

            @status.setter
            def status(self, value):
                self.set_property("status", value)
    """

    def __init__(self):
        super().__init__()
        self._display_name = type(self).__name__
        self._is_active = False

    @property
    def display_name(self) -> str:
        return self._display_name

    @display_name.setter
    def display_name(self, value: str) -> None:
        self.set_property("display_name", value)

    @property
    def is_active(self) -> bool:
        return self._is_active

    def activate(self) -> None:
        if not self._is_active:
            self._is_active = True
            self.on_activated()

    def deactivate(self) -> None:
        if self._is_active:
            self._is_active = False
            self.on_deactivated()

    def on_activated(self) -> None:
        """Called when the view showing this ViewModel is opened."""

    def on_deactivated(self) -> None:
        """Called when the view showing this ViewModel is closed."""


class DialogViewModel(ViewModelBase):
    """ViewModel for dialogs and flyouts that close themselves with a result."""

    closeRequested = Signal(object)

    def close(self, result: Any = None) -> None:
        self.closeRequested.emit(result)
