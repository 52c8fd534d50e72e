"""
Logging configuration for the release executor.
"""

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional, Dict, Any

LOGGER_NAME = "release_executor"

# ANSI color codes for console output
COLORS = {
    "DEBUG": "\033[36m",  # Cyan
    "INFO": "\033[32m",  # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[35m",  # Magenta
    "RESET": "\033[0m",
}


class ColoredFormatter(logging.Formatter):
    """Formatter adding colors to the level name on console output."""

    def format(self, record: logging.LogRecord) -> str:
        orig_levelname = record.levelname
        if record.levelname in COLORS:
            record.levelname = (
                f"{COLORS[record.levelname]}{record.levelname}{COLORS['RESET']}"
            )
        try:
            return super().format(record)
        finally:
            record.levelname = orig_levelname


class ContextFormatter(logging.Formatter):
    """File formatter that tolerates records logged without context."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "extra"):
            record.extra = ""
        return super().format(record)


class ReleaseLogger:
    """Logger for the release executor."""

    def __init__(self):
        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(logging.DEBUG)

    @property
    def is_setup(self) -> bool:
        return getattr(self.logger, "_release_setup_done", False)

    def setup(self, debug: bool = False, log_dir: Optional[str] = None) -> None:
        """Set up logging handlers.

        Only the first call installs handlers; later calls are no-ops so
        that every command can construct its own ``ReleaseLogger``.

        Args:
            debug: Enable debug logging on the console
            log_dir: Directory for log files
        """
        if self.is_setup:
            return

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
        console_handler.setFormatter(
            ColoredFormatter(
                "%(asctime)s %(levelname)-8s %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        self.logger.addHandler(console_handler)

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
            log_file = os.path.join(log_dir, f"release-{timestamp}.log")

            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(
                ContextFormatter(
                    "%(asctime)s [%(levelname)s] %(message)s\n%(extra)s\n",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            self.logger.addHandler(file_handler)
            self.logger.debug("Log file created at: %s", log_file)

        self.logger._release_setup_done = True

    def reset(self) -> None:
        """Remove installed handlers so ``setup`` can run again."""
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()
        self.logger._release_setup_done = False

    def get_context_logger(self, **context) -> "ContextLogger":
        """Get a logger with context.

        Args:
            **context: Context key-value pairs

        Returns:
            ContextLogger instance
        """
        return ContextLogger(self.logger, context)


class ContextLogger:
    """Logger that includes context with each log message."""

    def __init__(self, logger: logging.Logger, context: Dict[str, Any]):
        self.logger = logger
        self.context = context

    def bind(self, **context) -> "ContextLogger":
        """Return a new ContextLogger with additional context."""
        merged = self.context.copy()
        merged.update(context)
        return ContextLogger(self.logger, merged)

    def _format_context(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        context = self.context.copy()
        if extra:
            extra = dict(extra)
            # 'args' collides with LogRecord.args
            if "args" in extra:
                extra["cli_args"] = extra.pop("args")
            context.update(extra)
        context_str = "\n".join(f"{k}: {v}" for k, v in context.items())
        return {"extra": f"Context:\n{context_str}" if context_str else ""}

    def debug(self, msg: str, *args, extra: Optional[Dict[str, Any]] = None, **kwargs):
        self.logger.debug(msg, *args, extra=self._format_context(extra), **kwargs)

    def info(self, msg: str, *args, extra: Optional[Dict[str, Any]] = None, **kwargs):
        self.logger.info(msg, *args, extra=self._format_context(extra), **kwargs)

    def warning(
        self, msg: str, *args, extra: Optional[Dict[str, Any]] = None, **kwargs
    ):
        self.logger.warning(msg, *args, extra=self._format_context(extra), **kwargs)

    def error(self, msg: str, *args, extra: Optional[Dict[str, Any]] = None, **kwargs):
        self.logger.error(msg, *args, extra=self._format_context(extra), **kwargs)

    def critical(
        self, msg: str, *args, extra: Optional[Dict[str, Any]] = None, **kwargs
    ):
        self.logger.critical(msg, *args, extra=self._format_context(extra), **kwargs)
