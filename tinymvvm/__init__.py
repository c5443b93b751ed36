"""
TinyMvvm - MVVM bootstrapping for PySide6 desktop applications.

Wires a dependency-injection container, shows the main window for a
ViewModel, manages windows/dialogs/flyouts and marshals work onto the UI
thread.
"""
from tinymvvm.core import (
    Application,
    Bootstrapper,
    BootstrapperBase,
    ConfigManager,
    Container,
    ContainerBuilder,
    Dispatcher,
    IUiExecution,
    setup_logging,
)
from tinymvvm.ui.mvvm import (
    PropertyChangedBase,
    BindableProperty,
    ViewModelBase,
    DialogViewModel,
    RelayCommand,
    AsyncCommand,
    bind,
    bind_command,
)
from tinymvvm.ui import (
    ViewRegistry,
    IWindowManager,
    IDialogManager,
    IFlyoutManager,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "Application",
    "Bootstrapper",
    "BootstrapperBase",
    "ConfigManager",
    "Container",
    "ContainerBuilder",
    "Dispatcher",
    "IUiExecution",
    "setup_logging",

    # MVVM
    "PropertyChangedBase",
    "BindableProperty",
    "ViewModelBase",
    "DialogViewModel",
    "RelayCommand",
    "AsyncCommand",
    "bind",
    "bind_command",

    # Managers
    "ViewRegistry",
    "IWindowManager",
    "IDialogManager",
    "IFlyoutManager",
]
