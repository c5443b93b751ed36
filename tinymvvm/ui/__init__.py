"""
TinyMvvm UI layer.

- mvvm: ViewModel base classes, commands and binding
- views: ViewModel -> view registry
- managers: window, dialog and flyout managers
"""
from tinymvvm.ui.views import ViewRegistry, ViewNotFoundError
from tinymvvm.ui.managers import (
    IWindowManager,
    WindowManager,
    IDialogManager,
    DialogManager,
    IFlyoutManager,
    FlyoutManager,
)

__all__ = [
    "ViewRegistry",
    "ViewNotFoundError",
    "IWindowManager",
    "WindowManager",
    "IDialogManager",
    "DialogManager",
    "IFlyoutManager",
    "FlyoutManager",
]
