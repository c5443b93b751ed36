"""
Application host.

Owns the QApplication and the qasync event loop and publishes the lifecycle
events a bootstrapper subscribes to:

- startup(StartupEventArgs): once the event loop is running
- exit(ExitEventArgs): after the loop stopped, before it is closed
- dispatcher_unhandled_exception(DispatcherUnhandledExceptionEventArgs): exceptions
  escaping UI-thread slots or posted work while the loop runs

Example:
    app = Application(sys.argv, ConfigManager("config.json"))
    bootstrapper = MyBootstrapper(app)
    sys.exit(app.run())
"""
import asyncio
import sys
from typing import List, Optional, Sequence

from PySide6.QtWidgets import QApplication
from qasync import QEventLoop
from loguru import logger

from tinymvvm.core.config import ConfigManager
from tinymvvm.core.dispatcher import Dispatcher
from tinymvvm.core.events import CompositeSubscription, Signal
from tinymvvm.core.hooks import hook_dispatcher_exceptions


class StartupEventArgs:
    def __init__(self, args: List[str]):
        self.args = args


class ExitEventArgs:
    def __init__(self, exit_code: int):
        self.exit_code = exit_code


class Application:
    """
    Explicit application context: Qt application, asyncio loop, configuration
    and lifecycle events. Passed to the bootstrapper instead of being reached
    through a global.
    """

    def __init__(self, argv: Optional[Sequence[str]] = None, config: Optional[ConfigManager] = None):
        argv = list(argv) if argv is not None else list(sys.argv)
        self.args = argv[1:]
        self.config = config or ConfigManager(None)

        self.qt_app = QApplication.instance() or QApplication(argv)
        self.qt_app.setApplicationName(self.config.data.general.app_name)

        self.loop = QEventLoop(self.qt_app)
        asyncio.set_event_loop(self.loop)

        self.startup = Signal("Startup", propagate=True)
        self.exit = Signal("Exit")
        self.dispatcher_unhandled_exception = Signal("DispatcherUnhandledException")

        self._subscriptions = CompositeSubscription("Application")
        self._exit_code = 0
        self._ran = False

    @property
    def name(self) -> str:
        return self.config.data.general.app_name

    @property
    def exit_code(self) -> int:
        return self._exit_code

    def run(self) -> int:
        """
        Run the event loop until the last window closes or shutdown() is called.

        Returns:
            Process exit code
        """
        if self._ran:
            raise RuntimeError("Application.run() can only be called once")
        self._ran = True

        logger.info(f"Starting {self.name}")
        self._subscriptions.add(
            Dispatcher.unhandled_exception.connect(self.dispatcher_unhandled_exception.emit)
        )
        # Installed last so it sits in front of the bootstrapper's process hook
        self._subscriptions.add(hook_dispatcher_exceptions(Dispatcher.for_object(self.qt_app)))
        self.loop.call_soon(self._on_loop_started)

        with self.loop:
            try:
                self.loop.run_forever()
            except KeyboardInterrupt:
                logger.info("Application interrupted by user")
            finally:
                logger.info(f"{self.name} exiting with code {self._exit_code}")
                # Unhook before exit handlers release the hooks chained behind ours
                self._subscriptions.dispose()
                self.exit.emit(ExitEventArgs(self._exit_code))

        return self._exit_code

    def shutdown(self, exit_code: int = 0) -> None:
        """Stop the event loop; run() then emits `exit` and returns `exit_code`."""
        self._exit_code = exit_code
        if self.loop.is_running():
            self.loop.stop()

    def _on_loop_started(self) -> None:
        try:
            self.startup.emit(StartupEventArgs(self.args))
        except Exception as e:
            logger.opt(exception=e).critical("Application startup failed")
            self.shutdown(1)
