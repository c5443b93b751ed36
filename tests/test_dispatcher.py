"""
Dispatcher tests. Queued work only runs while Qt events are processed, so
tests pump the event loop explicitly.
"""
import threading
import time

import pytest
from unittest.mock import MagicMock
from PySide6.QtCore import QCoreApplication, QObject

from tinymvvm.core.dispatcher import Dispatcher


def pump_until(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            return False
        QCoreApplication.processEvents()
        time.sleep(0.005)
    return True


@pytest.fixture
def dispatcher(qapp):
    return Dispatcher.for_object(qapp)


def test_current_is_cached_per_thread(qapp):
    main = Dispatcher.current()
    assert Dispatcher.current() is main

    seen = []
    worker = threading.Thread(target=lambda: seen.append(Dispatcher.current()))
    worker.start()
    worker.join()

    assert seen[0] is not main


def test_check_access(dispatcher):
    assert dispatcher.check_access()

    result = []
    worker = threading.Thread(target=lambda: result.append(dispatcher.check_access()))
    worker.start()
    worker.join()

    assert result == [False]


def test_for_object_uses_owner_thread(qapp):
    obj = QObject()
    assert Dispatcher.for_object(obj).thread == qapp.thread()


def test_invoke_on_owner_thread_runs_inline(dispatcher):
    assert dispatcher.invoke(lambda: 42) == 42


def test_invoke_propagates_exception(dispatcher):
    def fail():
        raise ValueError("bad")

    with pytest.raises(ValueError, match="bad"):
        dispatcher.invoke(fail)


def test_invoke_from_worker_runs_on_owner_thread(dispatcher):
    main_ident = threading.get_ident()
    result = {}

    def worker():
        result["ident"] = dispatcher.invoke(threading.get_ident)

    thread = threading.Thread(target=worker)
    thread.start()
    assert pump_until(lambda: not thread.is_alive())
    thread.join()

    assert result["ident"] == main_ident


def test_invoke_async_is_queued(dispatcher):
    action = MagicMock(return_value="done")

    future = dispatcher.invoke_async(action)

    assert not future.done()
    action.assert_not_called()
    assert pump_until(future.done)
    assert future.result() == "done"
    action.assert_called_once()


def test_invoke_async_captures_exception(dispatcher):
    def fail():
        raise KeyError("missing")

    future = dispatcher.invoke_async(fail)

    assert pump_until(future.done)
    assert isinstance(future.exception(), KeyError)


def test_invoke_async_preserves_order(dispatcher):
    calls = []
    futures = [dispatcher.invoke_async(lambda i=i: calls.append(i)) for i in range(5)]

    assert pump_until(lambda: all(f.done() for f in futures))
    assert calls == [0, 1, 2, 3, 4]


def test_post_reports_unhandled_exception(dispatcher):
    exc = RuntimeError("posted failure")
    seen = []

    def on_unhandled(args):
        seen.append(args.exception)
        args.handled = True

    sub = Dispatcher.unhandled_exception.connect(on_unhandled)
    try:
        dispatcher.post(MagicMock(side_effect=exc))
        assert pump_until(lambda: bool(seen))
    finally:
        sub.dispose()

    assert seen == [exc]


def test_post_runs_action(dispatcher):
    action = MagicMock()
    dispatcher.post(action)
    assert pump_until(lambda: action.called)


def test_report_unhandled_exception_observed_only_with_subscribers(dispatcher):
    exc = ValueError("reported")
    assert dispatcher.report_unhandled_exception(exc) is False

    handler = MagicMock()
    sub = Dispatcher.unhandled_exception.connect(handler)
    try:
        assert dispatcher.report_unhandled_exception(exc) is True
    finally:
        sub.dispose()

    args = handler.call_args.args[0]
    assert args.exception is exc
    assert args.dispatcher is dispatcher
    assert not args.handled
