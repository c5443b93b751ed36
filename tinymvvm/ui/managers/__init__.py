"""
Window, dialog and flyout managers.

The bootstrapper registers each as a single instance under its interface:
    wm = container.resolve(IWindowManager)
    wm.show_window(MainViewModel)
"""
from tinymvvm.ui.managers.base import ViewPresenter
from tinymvvm.ui.managers.window_manager import IWindowManager, WindowManager
from tinymvvm.ui.managers.dialog_manager import IDialogManager, DialogManager
from tinymvvm.ui.managers.flyout_manager import IFlyoutManager, FlyoutManager, Flyout

__all__ = [
    "ViewPresenter",
    "IWindowManager",
    "WindowManager",
    "IDialogManager",
    "DialogManager",
    "IFlyoutManager",
    "FlyoutManager",
    "Flyout",
]
