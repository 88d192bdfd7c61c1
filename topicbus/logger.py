"""Logging interface used by the event bus and its default implementation."""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

_log = logging.getLogger("topicbus")


@runtime_checkable
class Logger(Protocol):
    """Anything that can record informational and error messages.

    Messages use %-style placeholders that are filled from ``args``.
    """

    def info(self, message: str, *args: Any) -> None:
        """Record an informational message."""

    def error(self, message: str, *args: Any) -> None:
        """Record an error message."""


class DefaultLogger:
    """Logger that writes through the standard ``logging`` module."""

    def info(self, message: str, *args: Any) -> None:
        """Log ``message`` at INFO level with an ``[INFO]`` prefix."""
        _log.info("[INFO] " + message, *args)

    def error(self, message: str, *args: Any) -> None:
        """Log ``message`` at ERROR level with an ``[ERROR]`` prefix."""
        _log.error("[ERROR] " + message, *args)