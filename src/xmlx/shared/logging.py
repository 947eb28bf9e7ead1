"""Structured logging utilities for xmlx.

Every record carries the component that emitted it and an optional
correlation ID, so several documents loaded by one program can be told apart
in the log stream.
"""

import logging
from typing import Any, Dict, Optional, Union

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(component)s] %(message)s"


class _ComponentDefaults(logging.Filter):
    """Fill in ``component`` for records that did not come through xmlx."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "component"):
            record.component = record.name.split(".")[-1]
        return True


class CorrelationLogger:
    """Logger that automatically includes correlation ID and component information."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for request tracking
            component: Component name for structured logging
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.split(".")[-1]

    def child(self, component: str) -> "CorrelationLogger":
        """Return a logger for a sub-component sharing this correlation ID."""
        return CorrelationLogger(self.logger.name, self.correlation_id, component)

    def is_enabled_for(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)

    def _log(
        self,
        level: int,
        message: str,
        extra: Optional[Dict[str, Any]],
        exc_info: bool
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        combined = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        if extra:
            combined.update(extra)
        self.logger.log(level, message, extra=combined, exc_info=exc_info)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, message, extra, False)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, message, extra, False)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.WARNING, message, extra, False)

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = True
    ) -> None:
        self._log(logging.ERROR, message, extra, exc_info)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for request tracking
        component: Component name for structured logging

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)


def configure_logging(
    level: Union[int, str] = logging.WARNING,
    fmt: str = DEFAULT_FORMAT
) -> logging.Handler:
    """Attach a stderr handler to the ``xmlx`` logger hierarchy.

    Calling this again replaces the handler installed by the previous call.

    Returns:
        The installed handler
    """
    root = logging.getLogger("xmlx")
    for handler in list(root.handlers):
        if getattr(handler, "_xmlx_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))
    handler.addFilter(_ComponentDefaults())
    handler._xmlx_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level)
    return handler
