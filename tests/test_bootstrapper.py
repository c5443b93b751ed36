"""
Tests for BootstrapperBase and Bootstrapper, driven by a fake application.
"""
import sys
import threading

import pytest
from PySide6.QtCore import QCoreApplication
from PySide6.QtWidgets import QWidget

from tinymvvm.core.application import Application, ExitEventArgs, StartupEventArgs
from tinymvvm.core.bootstrapper import Bootstrapper, BootstrapperBase
from tinymvvm.core.config import ConfigManager
from tinymvvm.core.container import ContainerDisposedError
from tinymvvm.core.dispatcher import DispatcherUnhandledExceptionEventArgs, IUiExecution
from tinymvvm.ui.managers import IDialogManager, IFlyoutManager, IWindowManager
from tinymvvm.ui.mvvm import ViewModelBase
from tinymvvm.ui.views import ViewRegistry


class ShellViewModel(ViewModelBase):
    def __init__(self, ui: IUiExecution):
        super().__init__()
        self.ui = ui
        self.display_name = "Shell"


class ShellView(QWidget):
    def __init__(self, vm):
        super().__init__()


class Settings:
    pass


class ShellBootstrapper(Bootstrapper):
    main_view_model = ShellViewModel

    def configure_container(self, builder):
        super().configure_container(builder)
        builder.register_type(Settings).single_instance()

    def configure_views(self, views):
        views.register(ShellViewModel, ShellView)


@pytest.fixture
def make_bootstrapper(qapp, fake_app, mock_log, quiet_excepthook):
    """Factory installing quiet excepthooks, then a bootstrapper. Hook mocks land in `.hooks`."""
    created = []

    def make(cls=ShellBootstrapper):
        make.hooks = quiet_excepthook()
        instance = cls(fake_app, log=mock_log)
        created.append(instance)
        return instance

    yield make
    for instance in created:
        if getattr(instance, "window", None) is not None:
            instance.window.close()
        instance.dispose()



# =============================================================================
# Exception hooks
# =============================================================================

class TestExceptionLogging:
    def test_unhandled_exception_logged_once(self, make_bootstrapper, mock_log):
        make_bootstrapper()
        previous, _ = make_bootstrapper.hooks
        exc = ValueError("boom")

        sys.excepthook(ValueError, exc, None)

        mock_log.error_exception.assert_called_once_with("UnhandledException", exc)
        previous.assert_called_once_with(ValueError, exc, None)

    def test_thread_exception_logged(self, make_bootstrapper, mock_log):
        make_bootstrapper()

        def fail():
            raise RuntimeError("worker failed")

        worker = threading.Thread(target=fail)
        worker.start()
        worker.join()

        mock_log.error_exception.assert_called_once()
        name, exc = mock_log.error_exception.call_args.args
        assert name == "UnhandledException"
        assert isinstance(exc, RuntimeError)

    def test_dispatcher_exception_logged_once(self, make_bootstrapper, fake_app, mock_log):
        make_bootstrapper()
        exc = KeyError("dispatch")

        fake_app.dispatcher_unhandled_exception.emit(DispatcherUnhandledExceptionEventArgs(None, exc))

        mock_log.error_exception.assert_called_once_with("DispatcherUnhandledException", exc)

    def test_unobserved_task_exception_logged_once(self, make_bootstrapper, fake_app, mock_log):
        make_bootstrapper()
        exc = OSError("lost")

        fake_app.loop.call_exception_handler({"message": "Task exception was never retrieved",
                                              "exception": exc})

        mock_log.error_exception.assert_called_once_with("UnobservedTaskException", exc)

    def test_dispose_restores_hooks(self, make_bootstrapper, fake_app):
        bootstrapper = make_bootstrapper()
        previous, previous_thread = make_bootstrapper.hooks

        bootstrapper.dispose()
        bootstrapper.dispose()

        assert sys.excepthook is previous
        assert threading.excepthook is previous_thread
        assert fake_app.dispatcher_unhandled_exception.subscriber_count == 0


# =============================================================================
# Container
# =============================================================================

class TestContainer:
    def test_framework_services_registered(self, make_bootstrapper, fake_app):
        bootstrapper = make_bootstrapper()
        container = bootstrapper.container

        assert container.resolve(Application) is fake_app
        assert container.resolve(ConfigManager) is fake_app.config
        assert container.resolve(ViewRegistry) is bootstrapper.views
        assert container.resolve(IUiExecution) is bootstrapper

    @pytest.mark.parametrize("service", [IWindowManager, IDialogManager, IFlyoutManager])
    def test_managers_are_single_instance(self, make_bootstrapper, service):
        container = make_bootstrapper().container
        assert container.resolve(service) is container.resolve(service)

    def test_application_registrations_added(self, make_bootstrapper):
        container = make_bootstrapper().container
        assert container.resolve(Settings) is container.resolve(Settings)

    def test_missing_main_view_model(self, make_bootstrapper):
        class Incomplete(Bootstrapper):
            pass

        with pytest.raises(TypeError):
            make_bootstrapper(Incomplete)
        assert sys.excepthook is make_bootstrapper.hooks[0]

    def test_failed_build_releases_hooks(self, make_bootstrapper, fake_app):
        class Broken(BootstrapperBase):
            def configure_container(self, builder):
                raise RuntimeError("bad registration")

        with pytest.raises(RuntimeError, match="bad registration"):
            make_bootstrapper(Broken)

        previous, previous_thread = make_bootstrapper.hooks
        assert sys.excepthook is previous
        assert threading.excepthook is previous_thread
        assert fake_app.dispatcher_unhandled_exception.subscriber_count == 0

    def test_base_startup_is_noop(self, make_bootstrapper, fake_app):
        base = make_bootstrapper(BootstrapperBase)

        fake_app.startup.emit(StartupEventArgs([]))

        assert not base.container.is_registered(IUiExecution)


# =============================================================================
# Lifecycle
# =============================================================================

class TestLifecycle:
    def test_startup_shows_main_window(self, make_bootstrapper, fake_app):
        bootstrapper = make_bootstrapper()

        fake_app.startup.emit(StartupEventArgs([]))

        window = bootstrapper.window
        assert isinstance(window, ShellView)
        assert window.isVisible()
        assert window.windowTitle() == "Shell"
        assert window.data_context.ui is bootstrapper

    def test_execute_before_window_runs_inline(self, make_bootstrapper):
        bootstrapper = make_bootstrapper()

        assert bootstrapper.window is None
        assert bootstrapper.execute(lambda: 5) == 5

    def test_execute_async_before_window(self, make_bootstrapper):
        bootstrapper = make_bootstrapper()
        assert bootstrapper.window is None

        future = bootstrapper.execute_async(lambda: 7)
        for _ in range(100):
            if future.done():
                break
            QCoreApplication.processEvents()

        assert future.result(timeout=1) == 7

    def test_execute_async_completes_on_ui_thread(self, make_bootstrapper, fake_app):
        bootstrapper = make_bootstrapper()
        fake_app.startup.emit(StartupEventArgs([]))
        main_ident = threading.get_ident()

        future = bootstrapper.execute_async(threading.get_ident)
        for _ in range(100):
            if future.done():
                break
            QCoreApplication.processEvents()

        assert future.result(timeout=1) == main_ident

    def test_execute_from_worker_thread(self, make_bootstrapper, fake_app):
        bootstrapper = make_bootstrapper()
        fake_app.startup.emit(StartupEventArgs([]))
        result = {}

        def worker():
            result["ident"] = bootstrapper.execute(threading.get_ident)

        thread = threading.Thread(target=worker)
        thread.start()
        while thread.is_alive():
            QCoreApplication.processEvents()
        thread.join()

        assert result["ident"] == threading.get_ident()

    def test_exit_disposes_container(self, make_bootstrapper, fake_app):
        bootstrapper = make_bootstrapper()

        fake_app.exit.emit(ExitEventArgs(0))

        assert bootstrapper.container.disposed
        with pytest.raises(ContainerDisposedError):
            bootstrapper.container.resolve(IWindowManager)
        assert sys.excepthook is make_bootstrapper.hooks[0]
        assert fake_app.exit.subscriber_count == 0
