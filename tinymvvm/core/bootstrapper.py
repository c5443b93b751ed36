"""
Bootstrappers.

Wire the container, observe unhandled exceptions and show the main window.

Example:
    class AppBootstrapper(Bootstrapper):
        main_view_model = MainViewModel

        def configure_container(self, builder):
            super().configure_container(builder)
            builder.register_type(SearchService).as_implemented_interfaces().single_instance()

        def configure_views(self, views):
            views.register(MainViewModel, MainWindow)

    app = Application(sys.argv)
    AppBootstrapper(app)
    sys.exit(app.run())
"""
from concurrent.futures import Future
from typing import Any, Callable, Optional

from PySide6.QtWidgets import QWidget

from tinymvvm.core.application import Application, ExitEventArgs, StartupEventArgs
from tinymvvm.core.config import ConfigManager
from tinymvvm.core.container import Container, ContainerBuilder
from tinymvvm.core.dispatcher import Dispatcher, IUiExecution
from tinymvvm.core.events import CompositeSubscription
from tinymvvm.core.hooks import hook_unhandled_exceptions, hook_unobserved_task_exceptions
from tinymvvm.core.logging import ClassLogger, get_class_logger
from tinymvvm.ui.managers import DialogManager, FlyoutManager, IWindowManager, WindowManager
from tinymvvm.ui.views import ViewRegistry


class BootstrapperBase:
    """
    Base class for bootstrappers. Applications derive from Bootstrapper, not
    from this class.

    On construction:
    1. Logs process, dispatcher and unobserved-task exceptions through `log`
    2. Builds the container (configure_container() adds registrations)
    3. Subscribes on_startup/on_exit to the application's lifecycle events

    Every subscription is released once, on exit or dispose().
    """

    def __init__(self, application: Application, log: Optional[ClassLogger] = None,
                 views: Optional[ViewRegistry] = None):
        self.application = application
        self.log = log or get_class_logger(self)
        self.views = views or ViewRegistry()
        self._subscriptions = CompositeSubscription(type(self).__name__)

        self._subscriptions.add(hook_unhandled_exceptions(
            lambda exc: self.log.error_exception("UnhandledException", exc)))
        self._subscriptions.add(application.dispatcher_unhandled_exception.connect(
            lambda args: self.log.error_exception("DispatcherUnhandledException", args.exception)))
        self._subscriptions.add(hook_unobserved_task_exceptions(
            application.loop,
            lambda exc: self.log.error_exception("UnobservedTaskException", exc)))

        try:
            self._container = self._create_container()
        except Exception:
            self._subscriptions.dispose()
            raise

        self._subscriptions.add(application.startup.connect(self.on_startup))
        self._subscriptions.add(application.exit.connect(self.on_exit))

    @property
    def container(self) -> Container:
        """The container used by the application."""
        return self._container

    def _create_container(self) -> Container:
        self.configure_views(self.views)

        builder = ContainerBuilder()
        builder.register_instance(self.application).as_self().as_(Application)
        builder.register_instance(self.application.config).as_(ConfigManager)
        builder.register_instance(self.views).as_(ViewRegistry)

        builder.register_type(WindowManager).as_implemented_interfaces().single_instance()
        builder.register_type(DialogManager).as_implemented_interfaces().single_instance()
        builder.register_type(FlyoutManager).as_implemented_interfaces().single_instance()

        self.configure_container(builder)

        container = builder.build()
        self.log.debug(f"Container ready ({len(builder.registrations)} registrations)")
        return container

    def configure_container(self, builder: ContainerBuilder) -> None:
        """Override to register application services."""

    def configure_views(self, views: ViewRegistry) -> None:
        """Override to map ViewModel types to views."""

    def on_startup(self, args: StartupEventArgs) -> None:
        """Called once the application's event loop is running."""

    def on_exit(self, args: ExitEventArgs) -> None:
        """Called just before the application shuts down. Disposes the container."""
        self._container.dispose()
        self.dispose()

    def dispose(self) -> None:
        """Release exception hooks and lifecycle subscriptions. Safe to call repeatedly."""
        self._subscriptions.dispose()


class Bootstrapper(BootstrapperBase, IUiExecution):
    """
    Bootstrapper showing a main window for `main_view_model` and providing
    IUiExecution for it.
    """

    main_view_model: Optional[type] = None

    def __init__(self, application: Application, log: Optional[ClassLogger] = None,
                 views: Optional[ViewRegistry] = None):
        if self.main_view_model is None:
            raise TypeError(f"{type(self).__name__}.main_view_model is not set")
        self._window: Optional[QWidget] = None
        self._window_dispatcher: Optional[Dispatcher] = None
        super().__init__(application, log, views)

    @property
    def window(self) -> Optional[QWidget]:
        return self._window

    def configure_container(self, builder: ContainerBuilder) -> None:
        super().configure_container(builder)
        builder.register_instance(self).as_(IUiExecution)

    def on_startup(self, args: StartupEventArgs) -> None:
        self._window = self.container.resolve(IWindowManager).show_window(self.main_view_model)
        self._window_dispatcher = Dispatcher.for_object(self._window)
        self.log.info(f"Main window shown for {self.main_view_model.__name__}")

    def execute(self, action: Callable[[], Any]) -> Any:
        return self._dispatcher().invoke(action)

    def execute_async(self, action: Callable[[], Any]) -> Future:
        return self._dispatcher().invoke_async(action)

    def _dispatcher(self) -> Dispatcher:
        if self._window_dispatcher is not None:
            return self._window_dispatcher
        return Dispatcher.current()
