"""
TinyMvvm Core - Application Infrastructure.

Provides:
- Signal / Subscription: Synchronous events with one-time unsubscription
- ConfigManager: Configuration with persistence
- ContainerBuilder / Container: Dependency injection
- Dispatcher / IUiExecution: Running work on the UI thread
- Application: QApplication + qasync loop with lifecycle events
- Bootstrapper: Container wiring, exception logging and main window startup

Usage:
    from tinymvvm.core import Application, Bootstrapper

    class AppBootstrapper(Bootstrapper):
        main_view_model = MainViewModel

    app = Application(sys.argv)
    AppBootstrapper(app)
    sys.exit(app.run())
"""
from .events import Signal, Subscription, CompositeSubscription
from .logging import setup_logging, get_class_logger, ClassLogger
from .config import (
    ConfigManager,
    AppConfig,
    GeneralSettings,
    WindowSettings,
    FlyoutSettings,
)
from .container import (
    Container,
    ContainerBuilder,
    Registration,
    Lifetime,
    ContainerError,
    ResolutionError,
    ContainerDisposedError,
)
from .hooks import hook_unhandled_exceptions, hook_dispatcher_exceptions, hook_unobserved_task_exceptions
from .dispatcher import Dispatcher, IUiExecution, DispatcherUnhandledExceptionEventArgs
from .application import Application, StartupEventArgs, ExitEventArgs
from .bootstrapper import BootstrapperBase, Bootstrapper

__all__ = [
    # Events
    "Signal",
    "Subscription",
    "CompositeSubscription",

    # Logging
    "setup_logging",
    "get_class_logger",
    "ClassLogger",

    # Configuration
    "ConfigManager",
    "AppConfig",
    "GeneralSettings",
    "WindowSettings",
    "FlyoutSettings",

    # Container
    "Container",
    "ContainerBuilder",
    "Registration",
    "Lifetime",
    "ContainerError",
    "ResolutionError",
    "ContainerDisposedError",

    # Hooks
    "hook_unhandled_exceptions",
    "hook_dispatcher_exceptions",
    "hook_unobserved_task_exceptions",

    # UI execution
    "Dispatcher",
    "IUiExecution",
    "DispatcherUnhandledExceptionEventArgs",

    # Application
    "Application",
    "StartupEventArgs",
    "ExitEventArgs",
    "BootstrapperBase",
    "Bootstrapper",
]
