"""Logging utilities for mutlollipop.

Provides a context-aware debug logger used to trace the plotting pipeline and
a helper that configures root logging for scripts.
"""

import logging
from contextlib import contextmanager
from typing import Any, Optional

# Third-party loggers that are noisy at DEBUG level while rendering
NOISY_LOGGERS = ("matplotlib", "PIL", "fontTools")


class DebugLogger:
    """Wrapper for logger with context-aware indentation.

    Example:
        >>> debug_log = DebugLogger(logger, debug=True)
        >>> with debug_log.section("Parsing protein changes"):
        ...     debug_log.field("Change column", "HGVSp_Short")
        ...     debug_log.field("Parsed rows", 42)
    """

    def __init__(self, logger: logging.Logger, debug: bool = False):
        """Initialize the debug logger.

        Args:
            logger: The underlying logger instance
            debug: Whether debug mode is enabled
        """
        self.logger = logger
        self._debug_enabled = debug
        self._indent_level = 0
        self._indent_str = "  "

    def _format_message(self, message: str) -> str:
        return f"{self._indent_str * self._indent_level}{message}"

    @contextmanager
    def section(self, title: str):
        """Create an indented section for related log messages.

        Args:
            title: Section title

        Yields:
            None
        """
        if self._debug_enabled:
            self.logger.debug(self._format_message(title))
        self._indent_level += 1
        try:
            yield
        finally:
            self._indent_level -= 1

    def field(self, name: str, value: Any):
        """Log a field/value pair at debug level.

        Args:
            name: Field name
            value: Field value
        """
        if self._debug_enabled:
            self.logger.debug(self._format_message(f"{name}: {value}"))


def configure_logging(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    include_timestamp: bool = True,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Configure root logging for mutlollipop scripts.

    Args:
        level: Logging level (e.g., logging.DEBUG, logging.INFO)
        format_string: Custom format string (if None, uses default)
        include_timestamp: Whether to include timestamps in logs
        handler: Handler to install instead of the default stream handler
    """
    if format_string is None:
        if include_timestamp:
            format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_string = "%(name)s - %(levelname)s - %(message)s"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if handler is None:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=format_string, datefmt="%H:%M:%S"))
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
