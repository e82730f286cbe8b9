"""Logger seam for the engine.

Every public operation takes an optional ``logger``. Anything with the
``debug/info/warning/error`` methods of :class:`logging.Logger` works; when
nothing is passed the module logger of the caller is used.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol


class SupportsLogging(Protocol):
    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None: ...


class NullLogger:
    """Logger that drops every message."""

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        pass

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        pass

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        pass

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        pass


def get_logger(logger: SupportsLogging | None, name: str = "repofit") -> SupportsLogging:
    """Return the injected logger, or the named module logger."""
    if logger is not None:
        return logger
    return logging.getLogger(name)
