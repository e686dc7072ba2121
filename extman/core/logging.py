"""Structured logging for the extension manager.

Provides JSON-formatted logs with file and console output.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence
from logging.handlers import RotatingFileHandler

from colorama import Fore, Style


class JSONFormatter(logging.Formatter):
    """Format log records as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add extra fields if present
        if hasattr(record, "component"):
            log_data["component"] = record.component
        if hasattr(record, "extension"):
            log_data["extension"] = record.extension
        if hasattr(record, "duration_ms"):
            log_data["duration_ms"] = record.duration_ms
        if hasattr(record, "success"):
            log_data["success"] = record.success

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        return json.dumps(log_data, default=str)


class ColoredFormatter(logging.Formatter):
    """Colored console formatter for human-readable output."""

    COLORS = {
        "DEBUG": Fore.CYAN,
        "INFO": Fore.GREEN,
        "WARNING": Fore.YELLOW,
        "ERROR": Fore.RED,
        "CRITICAL": Fore.MAGENTA,
    }
    RESET = Style.RESET_ALL

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        timestamp = datetime.now().strftime("%H:%M:%S")

        prefix = f"{color}[{timestamp}] {record.levelname:8}{self.RESET}"

        if hasattr(record, "component"):
            prefix += f" [{record.component}]"

        message = record.getMessage()

        # Add extra context on same line if brief
        extras = []
        if hasattr(record, "extension"):
            extras.append(f"ext={record.extension}")
        if hasattr(record, "duration_ms"):
            extras.append(f"time={record.duration_ms:.2f}ms")

        if extras:
            message += f" ({', '.join(extras)})"

        return f"{prefix} {message}"


class ExtManLogger:
    """Logger wrapper with convenience methods for extension lifecycle logging."""

    def __init__(self, name: str, logger: logging.Logger):
        self._name = name
        self._logger = logger

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, **kwargs)

    def critical(self, message: str, **kwargs):
        self._log(logging.CRITICAL, message, **kwargs)

    def _log(self, level: int, message: str, **kwargs):
        """Log with extra context fields."""
        extra = {}

        # Known fields become record attributes
        for key in ["component", "extension", "duration_ms", "success"]:
            if key in kwargs:
                extra[key] = kwargs.pop(key)

        # Remaining fields go into extra_data
        if kwargs:
            extra["extra_data"] = kwargs

        self._logger.log(level, message, extra=extra)

    # Convenience methods for common lifecycle operations

    def extension_registered(self, name: str, version: str):
        self.info(f"Extension registered: {name} v{version}", component="registry", extension=name)

    def extension_loaded(self, name: str, mode: str):
        self.info(f"Extension loaded: {name} [{mode}]", component="manager", extension=name)

    def extension_unloaded(self, name: str):
        self.info(f"Extension unloaded: {name}", component="manager", extension=name)

    def plan_resolved(self, kind: str, order: Sequence[str], duration_ms: float):
        self.debug(
            f"{kind.capitalize()} order resolved: {', '.join(order) or '(empty)'}",
            component="resolver",
            duration_ms=duration_ms,
            success=True
        )

    def requirement_failed(self, message: str, chain: Sequence[str]):
        """Log a resolution failure followed by its requirement chain."""
        self.error(message, component="resolver", chain=list(chain))
        for item in chain:
            self.error(f"    required by {item}", component="resolver")


# Global logger registry
_loggers: dict[str, ExtManLogger] = {}
_initialized = False


def setup_logging(
    level: str = "INFO",
    format_type: str = "text",
    log_dir: Optional[Path] = None,
    file_enabled: bool = False,
    console_enabled: bool = True
) -> None:
    """Initialize the logging system.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: "json" or "text"
        log_dir: Directory for log files
        file_enabled: Write logs to file
        console_enabled: Write logs to console
    """
    global _initialized

    if _initialized:
        return

    root = logging.getLogger("extman")
    root.setLevel(getattr(logging, level.upper()))
    root.handlers.clear()

    if console_enabled:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(logging.DEBUG)

        if format_type == "json":
            console.setFormatter(JSONFormatter())
        else:
            console.setFormatter(ColoredFormatter())

        root.addHandler(console)

    if file_enabled and log_dir:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / "extman.log"

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JSONFormatter())
        root.addHandler(file_handler)

    if not root.handlers:
        root.addHandler(logging.NullHandler())

    _initialized = True


def reset_logging() -> None:
    """Drop installed handlers so setup_logging can run again."""
    global _initialized
    logging.getLogger("extman").handlers.clear()
    _initialized = False


def get_logger(name: str = "extman") -> ExtManLogger:
    """Get an extman logger instance."""
    if name not in _loggers:
        logger = logging.getLogger(f"extman.{name}")
        _loggers[name] = ExtManLogger(name, logger)
    return _loggers[name]
