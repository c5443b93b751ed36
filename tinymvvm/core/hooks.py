"""
Process-wide exception observation hooks.

Each hook chains in front of the existing handler, calls the observer once per
exception, then delegates so default behaviour (printing, termination) still
applies. Disposing the returned Subscription restores the previous handler.
"""
import asyncio
import sys
import threading
from typing import Callable, Optional
from loguru import logger

from tinymvvm.core.dispatcher import Dispatcher
from tinymvvm.core.events import Subscription

ExceptionHandler = Callable[[BaseException], None]


def hook_unhandled_exceptions(handler: ExceptionHandler) -> Subscription:
    """
    Observe uncaught exceptions on the main thread (sys.excepthook) and on
    worker threads (threading.excepthook).
    """
    previous_excepthook = sys.excepthook
    previous_threading_hook = threading.excepthook

    def excepthook(exc_type, exc_value, exc_tb):
        _notify(handler, _exception_from(exc_type, exc_value))
        previous_excepthook(exc_type, exc_value, exc_tb)

    def threading_hook(args):
        if args.exc_type is not SystemExit:
            _notify(handler, _exception_from(args.exc_type, args.exc_value))
        previous_threading_hook(args)

    sys.excepthook = excepthook
    threading.excepthook = threading_hook

    def restore():
        if sys.excepthook is excepthook:
            sys.excepthook = previous_excepthook
        if threading.excepthook is threading_hook:
            threading.excepthook = previous_threading_hook

    return Subscription(restore, "UnhandledException")


def hook_dispatcher_exceptions(dispatcher: Dispatcher) -> Subscription:
    """
    Report exceptions escaping Qt slots on the dispatcher's thread (e.g. a
    button click handler) through Dispatcher.unhandled_exception instead of
    the process-wide hook. Exceptions nobody observes, and those raised on
    other threads, go on to the previous sys.excepthook.
    """
    previous_excepthook = sys.excepthook

    def excepthook(exc_type, exc_value, exc_tb):
        if (isinstance(exc_value, Exception) and dispatcher.check_access()
                and dispatcher.report_unhandled_exception(exc_value)):
            return
        previous_excepthook(exc_type, exc_value, exc_tb)

    sys.excepthook = excepthook

    def restore():
        if sys.excepthook is excepthook:
            sys.excepthook = previous_excepthook

    return Subscription(restore, "DispatcherUnhandledException")


def hook_unobserved_task_exceptions(loop: asyncio.AbstractEventLoop,
                                    handler: ExceptionHandler) -> Subscription:
    """
    Observe exceptions reported to the asyncio loop's exception handler, e.g.
    "Task exception was never retrieved".
    """
    previous = loop.get_exception_handler()

    def exception_handler(event_loop, context):
        exc = context.get("exception")
        if exc is not None:
            _notify(handler, exc)
        if previous is not None:
            previous(event_loop, context)
        else:
            event_loop.default_exception_handler(context)

    loop.set_exception_handler(exception_handler)

    def restore():
        if loop.is_closed():
            return
        if loop.get_exception_handler() is exception_handler:
            loop.set_exception_handler(previous)

    return Subscription(restore, "UnobservedTaskException")


def _exception_from(exc_type: type, exc_value: Optional[BaseException]) -> BaseException:
    if exc_value is not None:
        return exc_value
    # Skip __init__, which may require arguments
    return exc_type.__new__(exc_type)


def _notify(handler: ExceptionHandler, exc: BaseException) -> None:
    # The handler must never replace the original exception being reported
    try:
        handler(exc)
    except Exception as e:
        logger.error(f"Exception hook handler failed: {e}")
