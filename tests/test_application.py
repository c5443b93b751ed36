"""
Tests for the Application host running a real qasync event loop.
"""
import asyncio
import sys

import pytest
from unittest.mock import MagicMock
from PySide6.QtWidgets import QPushButton

from tinymvvm.core.application import Application
from tinymvvm.core.bootstrapper import BootstrapperBase
from tinymvvm.core.config import ConfigManager


@pytest.fixture
def application(qapp):
    app = Application(["demo", "--flag"], ConfigManager(None))
    yield app
    if not app.loop.is_closed():
        app.loop.close()
    asyncio.set_event_loop(None)


def test_args_exclude_program_name(application):
    assert application.args == ["--flag"]
    assert application.name == "TinyMvvm App"


def test_run_returns_shutdown_code(application):
    exit_handler = MagicMock()
    application.startup.connect(lambda args: application.shutdown(3))
    application.exit.connect(exit_handler)

    assert application.run() == 3

    exit_handler.assert_called_once()
    assert exit_handler.call_args.args[0].exit_code == 3
    assert application.exit_code == 3


def test_startup_receives_args(application):
    received = []

    def on_startup(args):
        received.append(args.args)
        application.shutdown()

    application.startup.connect(on_startup)

    assert application.run() == 0
    assert received == [["--flag"]]


def test_startup_failure_exits_with_code_one(application):
    def on_startup(args):
        raise RuntimeError("cannot start")

    application.startup.connect(on_startup)

    assert application.run() == 1


def test_run_only_once(application):
    application.startup.connect(lambda args: application.shutdown())
    application.run()

    with pytest.raises(RuntimeError):
        application.run()


def test_asyncio_tasks_run_on_qt_loop(application):
    results = []

    async def work():
        await asyncio.sleep(0)
        results.append("done")
        application.shutdown()

    application.startup.connect(lambda args: asyncio.ensure_future(work()))

    application.run()

    assert results == ["done"]


def test_ui_thread_exception_is_dispatcher_exception(application, mock_log, quiet_excepthook):
    previous, _ = quiet_excepthook()
    bootstrapper = BootstrapperBase(application, log=mock_log)
    button = QPushButton()

    def on_clicked():
        raise ValueError("click failed")

    def on_startup(args):
        button.click()
        application.shutdown()

    button.clicked.connect(on_clicked)
    application.startup.connect(on_startup)

    application.run()

    names = [c.args[0] for c in mock_log.error_exception.call_args_list]
    assert names == ["DispatcherUnhandledException"]
    assert isinstance(mock_log.error_exception.call_args.args[1], ValueError)
    previous.assert_not_called()
    assert bootstrapper.container.disposed


def test_exit_restores_process_hook(application, mock_log, quiet_excepthook):
    previous, _ = quiet_excepthook()
    BootstrapperBase(application, log=mock_log)
    application.startup.connect(lambda args: application.shutdown())

    application.run()

    assert sys.excepthook is previous
