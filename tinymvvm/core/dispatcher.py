"""
UI-thread execution.

A Dispatcher wraps the Qt thread owning some QObject and runs callables on it
through queued signal connections. Ordering follows Qt's event queue; there
is no priority or cancellation.

Usage:
    dispatcher = Dispatcher.for_object(window)
    dispatcher.invoke(lambda: label.setText("done"))        # blocks
    future = dispatcher.invoke_async(lambda: window.title)  # concurrent.futures.Future
"""
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future
from functools import partial
from typing import Any, Callable, Optional

from PySide6.QtCore import QObject, QThread, Qt, Signal, Slot
from loguru import logger

from tinymvvm.core import events


class IUiExecution(ABC):
    """Runs work on the UI thread."""

    @abstractmethod
    def execute(self, action: Callable[[], Any]) -> Any:
        """Run `action` on the UI thread and block until it has finished."""

    @abstractmethod
    def execute_async(self, action: Callable[[], Any]) -> Future:
        """Queue `action` on the UI thread; the future completes when it has run."""


class DispatcherUnhandledExceptionEventArgs:
    """Passed to Dispatcher.unhandled_exception handlers. Set `handled` to stop propagation."""

    def __init__(self, dispatcher: "Dispatcher", exception: BaseException):
        self.dispatcher = dispatcher
        self.exception = exception
        self.handled = False


class _Invoker(QObject):
    """Receives jobs on the dispatcher thread."""

    queued = Signal(object)
    blocking = Signal(object)

    def __init__(self):
        super().__init__()
        self.queued.connect(self._run, Qt.ConnectionType.QueuedConnection)
        self.blocking.connect(self._run, Qt.ConnectionType.BlockingQueuedConnection)

    @Slot(object)
    def _run(self, job):
        job()


class Dispatcher:
    """
    Runs callables on the thread that owns a QObject.
    """

    # Exceptions escaping post()'ed actions, across all dispatchers
    unhandled_exception = events.Signal("DispatcherUnhandledException")

    _local = threading.local()

    def __init__(self, thread: QThread):
        self._thread = thread
        self._invoker = _Invoker()
        if self._invoker.thread() != thread:
            self._invoker.moveToThread(thread)

    @classmethod
    def for_object(cls, obj: QObject) -> "Dispatcher":
        """Dispatcher for the thread owning `obj`."""
        return cls(obj.thread())

    @classmethod
    def current(cls) -> "Dispatcher":
        """Dispatcher for the calling thread, created on first use."""
        dispatcher: Optional[Dispatcher] = getattr(cls._local, "dispatcher", None)
        if dispatcher is None:
            dispatcher = cls(QThread.currentThread())
            cls._local.dispatcher = dispatcher
        return dispatcher

    @property
    def thread(self) -> QThread:
        return self._thread

    def check_access(self) -> bool:
        """True when called from the dispatcher's thread."""
        return QThread.currentThread() == self._thread

    def invoke(self, action: Callable[[], Any]) -> Any:
        """
        Run `action` on the dispatcher thread and wait for it.

        Runs inline when already on that thread. Exceptions raised by the
        action propagate to the caller.
        """
        if self.check_access():
            return action()
        future: Future = Future()
        self._invoker.blocking.emit(partial(_complete, future, action))
        return future.result()

    def invoke_async(self, action: Callable[[], Any]) -> Future:
        """Queue `action` on the dispatcher thread. Always queued, even from that thread."""
        future: Future = Future()
        self._invoker.queued.emit(partial(_complete, future, action))
        return future

    def post(self, action: Callable[[], Any]) -> None:
        """
        Fire-and-forget. Exceptions are reported through `unhandled_exception`
        and re-raised into Qt when nobody observes that event.
        """
        self._invoker.queued.emit(partial(self._run_posted, action))

    def _run_posted(self, action: Callable[[], Any]) -> None:
        try:
            action()
        except Exception as e:
            if not self.report_unhandled_exception(e):
                raise

    def report_unhandled_exception(self, exc: Exception) -> bool:
        """
        Publish `exc` through `unhandled_exception`.

        Returns:
            True if a handler marked it handled or anyone is subscribed
        """
        args = DispatcherUnhandledExceptionEventArgs(self, exc)
        observed = Dispatcher.unhandled_exception.subscriber_count > 0
        Dispatcher.unhandled_exception.emit(args)
        if args.handled:
            logger.debug(f"Dispatcher exception handled: {exc!r}")
        return args.handled or observed


def _complete(future: Future, action: Callable[[], Any]) -> None:
    if not future.set_running_or_notify_cancel():
        return
    try:
        future.set_result(action())
    except BaseException as e:
        future.set_exception(e)
