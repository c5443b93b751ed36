import sys
import os
from typing import Any, Optional
from loguru import logger


def setup_logging(debug_mode: bool = True, log_dir: Optional[str] = "logs"):
    """
    Configures Loguru logger.
    """
    # Remove default handler
    logger.remove()

    # Console Handler
    level = "DEBUG" if debug_mode else "INFO"
    logger.add(sys.stderr, level=level, format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[classname]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>")

    # File Handler
    if log_dir:
        if not os.path.exists(log_dir):
            os.makedirs(log_dir)
        logger.add(os.path.join(log_dir, "app_{time}.log"), rotation="10 MB", retention="1 week", level="DEBUG")

    logger.info("Logging initialized.")


# Records logged straight through `logger` still format with {extra[classname]}
logger.configure(extra={"classname": "-"})


class ClassLogger:
    """
    Loguru logger bound to a class name.

    Bootstrappers and managers take one of these as an injectable logging
    facility; tests substitute a MagicMock with the same methods.
    """

    def __init__(self, classname: str):
        self.classname = classname
        self._logger = logger.bind(classname=classname)

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.opt(depth=1).debug(message, *args, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.opt(depth=1).info(message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.opt(depth=1).warning(message, *args, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.opt(depth=1).error(message, *args, **kwargs)

    def error_exception(self, message: str, exc: Optional[BaseException]) -> None:
        """Log `message` at ERROR level with the traceback of `exc` attached."""
        self._logger.opt(exception=exc, depth=1).error(message)


def get_class_logger(owner: Any) -> ClassLogger:
    """Return a logger named after `owner` (a class or an instance of one)."""
    cls = owner if isinstance(owner, type) else type(owner)
    return ClassLogger(f"{cls.__module__}.{cls.__qualname__}")
