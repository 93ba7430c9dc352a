"""Loguru setup for entropy-tree: the INDUCTION level and `enable_logging`.

Only `run_induction` and `load_samples` emit records. Importing this module
drops loguru's default stderr handler (ID 0) if it is still installed, so
package output appears only through `enable_logging()`.
"""

from __future__ import annotations

import contextlib
import sys
import threading
import warnings
from typing import TYPE_CHECKING, Final, Literal

from loguru import logger

if TYPE_CHECKING:
    from types import TracebackType

PACKAGE_NAME: Final[str] = __name__.split(".")[0]

with contextlib.suppress(ValueError):
    logger.remove(0)

# One record per induction run, between INFO (20) and WARNING (30)
INDUCTION_LEVEL: Final[str] = "INDUCTION"
INDUCTION_LEVEL_NUMBER: Final[int] = 25

type LogLevel = Literal["TRACE", "DEBUG", "INFO", "INDUCTION", "WARNING", "ERROR", "CRITICAL"]
type LogFormat = Literal["short", "full"]

_PREFIX: Final[str] = "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <9}</level> | "  # noqa: RUF027
_FORMATS: Final[dict[LogFormat, str]] = {
    "short": _PREFIX + "<cyan>{function}</cyan> - <level>{message}</level>",
    "full": _PREFIX + "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
}

# Handler IDs owned by live handles; the package is disabled when this empties.
_active_handler_ids: set[int] = set()
_registry_lock = threading.Lock()


def _register_induction_level() -> None:
    """Add the INDUCTION level, or warn if the name is taken with another number."""
    try:
        level = logger.level(INDUCTION_LEVEL)
    except ValueError:
        logger.level(INDUCTION_LEVEL, no=INDUCTION_LEVEL_NUMBER, icon="🌳")
        return
    if level.no != INDUCTION_LEVEL_NUMBER:
        warnings.warn(
            f"INDUCTION level already registered with numeric value {level.no}, expected {INDUCTION_LEVEL_NUMBER}",
            stacklevel=2,
        )


_register_induction_level()


class LoggingHandle:
    """Owns one stderr handler added by `enable_logging`.

    Usable as a context manager; leaving the block calls `disable()`.
    """

    def __init__(self, handler_id: int) -> None:
        """Track `handler_id` as active.

        Args:
            handler_id (int): ID returned by `logger.add`.
        """
        self.handler_id: int | None = handler_id
        with _registry_lock:
            _active_handler_ids.add(handler_id)

    def disable(self) -> None:
        """Remove the handler; the last handle out also disables the package. Safe to repeat."""
        with _registry_lock:
            if self.handler_id is None:
                return
            _active_handler_ids.discard(self.handler_id)
            with contextlib.suppress(ValueError):
                logger.remove(self.handler_id)
            self.handler_id = None
            if not _active_handler_ids:
                logger.disable(PACKAGE_NAME)

    def __enter__(self) -> LoggingHandle:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.disable()


def active_handle_count() -> int:
    """Return how many handles from `enable_logging` are still active."""
    with _registry_lock:
        return len(_active_handler_ids)


def enable_logging(*, level: LogLevel = INDUCTION_LEVEL, log_format: LogFormat = "short") -> LoggingHandle:
    """Send entropy-tree records at `level` and above to stderr.

    Args:
        level (LogLevel): Minimum level shown. The default shows the start of
            each induction run and any warnings; "INFO" adds the run summary
            and "DEBUG" adds split sizes and file loads.
        log_format (LogFormat): "short" names the function only; "full" adds
            the module and line number.

    Returns:
        LoggingHandle: Handle that removes this handler again.

    Note:
        When the last handle is disabled the whole package is disabled in
        loguru, which also silences handlers added elsewhere. Call
        ``logger.enable("entropy_tree")`` to undo that.

    Examples:
        >>> with enable_logging(level="INFO"):  # doctest: +SKIP
        ...     result = run_induction(samples, attributes)
    """
    logger.enable(PACKAGE_NAME)
    handler_id = logger.add(sys.stderr, level=level, filter=PACKAGE_NAME, format=_FORMATS[log_format])
    return LoggingHandle(handler_id)
