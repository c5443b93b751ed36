import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import asyncio
import pytest
from unittest.mock import MagicMock
from PySide6.QtWidgets import QApplication

from tinymvvm.core.config import ConfigManager
from tinymvvm.core.events import Signal


@pytest.fixture(scope="session")
def qapp():
    """Ensure QApplication exists for Qt tests."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


class FakeApplication:
    """Stands in for tinymvvm.core.application.Application without running Qt's loop."""

    def __init__(self):
        self.args = []
        self.config = ConfigManager(None)
        self.loop = asyncio.new_event_loop()
        self.startup = Signal("Startup", propagate=True)
        self.exit = Signal("Exit")
        self.dispatcher_unhandled_exception = Signal("DispatcherUnhandledException")


@pytest.fixture
def fake_app():
    app = FakeApplication()
    yield app
    app.loop.close()


@pytest.fixture
def mock_log():
    return MagicMock()


@pytest.fixture
def quiet_excepthook(monkeypatch):
    """
    Replace the interpreter's excepthooks with MagicMocks so tests can trigger
    them safely. Returns the installer; call it from the test body, since pytest
    swaps threading.excepthook around each test phase.
    """
    import sys
    import threading

    def install():
        hook = MagicMock()
        thread_hook = MagicMock()
        monkeypatch.setattr(sys, "excepthook", hook)
        monkeypatch.setattr(threading, "excepthook", thread_hook)
        return hook, thread_hook

    return install
