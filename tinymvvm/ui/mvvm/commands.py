"""
ViewModel commands.

RelayCommand wraps a plain callable; AsyncCommand wraps a coroutine function
and reports itself as not executable while it runs.
"""
import asyncio
import inspect
from typing import Any, Callable, Coroutine, Optional
from PySide6.QtCore import QObject, Signal
from loguru import logger


class RelayCommand(QObject):
    """
    Command delegating to callables.

    Example:
        self.save = RelayCommand(self._save, lambda: self.is_dirty)
        ...
        self.save.raise_can_execute_changed()
    """

    canExecuteChanged = Signal()

    def __init__(self, execute: Callable[..., Any], can_execute: Optional[Callable[[], bool]] = None):
        super().__init__()
        self._execute = execute
        self._can_execute = can_execute

    def can_execute(self) -> bool:
        return self._can_execute is None or bool(self._can_execute())

    def execute(self, *args: Any) -> Any:
        if not self.can_execute():
            logger.debug(f"Command {self._execute!r} skipped: cannot execute")
            return None
        return self._execute(*args)

    def raise_can_execute_changed(self) -> None:
        self.canExecuteChanged.emit()

    def __call__(self, *args: Any) -> Any:
        return self.execute(*args)


class AsyncCommand(RelayCommand):
    """
    Command running a coroutine function on the current event loop.
    """

    def __init__(self, execute: Callable[..., Coroutine], can_execute: Optional[Callable[[], bool]] = None):
        if not inspect.iscoroutinefunction(execute):
            raise TypeError(f"AsyncCommand requires a coroutine function, got {execute!r}")
        super().__init__(execute, can_execute)
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def can_execute(self) -> bool:
        return not self.is_running and super().can_execute()

    def execute(self, *args: Any) -> Optional[asyncio.Task]:
        """
        Schedule the coroutine on the running loop. Returns the task, or None
        when not executable.

        Raises:
            RuntimeError: no event loop is running in this thread
        """
        if not self.can_execute():
            return None
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._execute(*args))
        self._task.add_done_callback(self._on_done)
        self.raise_can_execute_changed()
        return self._task

    def _on_done(self, task: asyncio.Task) -> None:
        self.raise_can_execute_changed()
