#!/usr/bin/env python3
"""
logging_manager.py
--------------------
Centralized logging for curator operations.

Every component (taxonomy loading, tag review, rename propagation) logs
through a CuratorLogger: a DEBUG-level operations log and an ERROR-only
log, both rotated on disk, plus WARNING-level console output.

Components receive the logger as an optional constructor argument and
always call it through ``safe_logger`` so that library use without a
log directory stays silent.

Usage:
    from curator.core.logging_manager import CuratorLogger, safe_logger

    logger = CuratorLogger(Path("logs"), component_name="rename")
    safe_logger(logger).log_operation("rename_tag", {"old": "todo"})
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
import logging
import traceback
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

# --- Third party imports ---
import click


_FILE_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s"
)
_CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class CuratorLogger:
    """
    Rotating-file logger pair for one curator component.

    Attributes:
        log_dir: Directory for log files
        component_name: Name of the component using this logger
        main_logger: ``<component>.operations`` logger (DEBUG and up)
        error_logger: ``<component>.errors`` logger (ERROR only)
    """

    def __init__(
        self,
        log_dir: Path,
        component_name: str = "curator",
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5,
    ) -> None:
        """
        Args:
            log_dir: Directory for log files (created if missing)
            component_name: Name for the component logger
                (e.g. 'taxonomy', 'rename')
            max_bytes: Maximum log file size before rotation (default: 10MB)
            backup_count: Number of rotated files to keep (default: 5)
        """
        self.log_dir = Path(log_dir)
        self.component_name = component_name
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self._setup_loggers()

    def _setup_loggers(self) -> None:
        """Attach file and console handlers to the component loggers."""
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.main_logger = logging.getLogger(f"{self.component_name}.operations")
        self.main_logger.setLevel(logging.DEBUG)
        # Reset only this logger's handlers (not global logger state)
        self.main_logger.handlers = []

        self.error_logger = logging.getLogger(f"{self.component_name}.errors")
        self.error_logger.setLevel(logging.ERROR)
        self.error_logger.handlers = []

        self._add_file_handler(
            self.main_logger,
            self.log_dir / f"{self.component_name}.log",
            logging.DEBUG,
        )
        self._add_file_handler(
            self.error_logger, self.log_dir / "errors.log", logging.ERROR
        )

        console = logging.StreamHandler()
        console.setLevel(logging.WARNING)
        console.setFormatter(logging.Formatter(_CONSOLE_FORMAT, datefmt="%H:%M:%S"))
        self.main_logger.addHandler(console)

    def _add_file_handler(
        self, logger: logging.Logger, file_path: Path, level: int
    ) -> None:
        handler = RotatingFileHandler(
            file_path,
            maxBytes=self.max_bytes,
            backupCount=self.backup_count,
            encoding="utf-8",
        )
        handler.setLevel(level)
        handler.setFormatter(
            logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        )
        logger.addHandler(handler)

    def close(self) -> None:
        """Flush, close and detach every handler (releases the log files)."""
        for logger in (self.main_logger, self.error_logger):
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)

    def _emit(
        self,
        level: int,
        label: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        if details:
            message = f"{message}: {json.dumps(details, default=str)}"
        self.main_logger.log(level, f"{label} - {message}", stacklevel=3)

    def log_operation(
        self, operation: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Record a completed operation with its JSON-serialised details.

        Args:
            operation: Name of the operation (e.g. 'rename_tag')
            details: Optional operation details dictionary
        """
        self._emit(logging.INFO, "OPERATION", operation, details or {})

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Log debug information."""
        self._emit(logging.DEBUG, "DEBUG", message, details)

    def log_info(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Log general information."""
        self._emit(logging.INFO, "INFO", message, details)

    def log_warning(
        self, message: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log a recoverable problem (e.g. taxonomy fallback)."""
        self._emit(logging.WARNING, "WARNING", message, details)

    def log_error(
        self, error: Exception, context: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Write an error, its context and the current traceback to errors.log.

        Args:
            error: Exception that occurred
            context: Optional context (document path, tag, operation)
        """
        self.error_logger.error(f"ERROR - {type(error).__name__}: {error}")

        if context:
            context_str = ", ".join(f"{k}={v}" for k, v in context.items())
            self.error_logger.error(f"Context: {context_str}")

        self.error_logger.error(f"Traceback:\n{traceback.format_exc()}")

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        """
        Log full error details and return a one-line message for the terminal.

        Args:
            error: Exception to log
            context: Optional context about where the error occurred
            show_traceback: If True, append the traceback to the message

        Returns:
            Formatted error message suitable for CLI display

        Examples:
            >>> logger.log_cli_error(InvalidRenameError("Old and new tags are the same"))
            '❌ InvalidRenameError: Old and new tags are the same'
        """
        self.log_error(error, context or {"source": "cli"})
        message = f"❌ {type(error).__name__}: {error}"
        if show_traceback:
            return f"{message}\n\n{traceback.format_exc()}"
        return message


def handle_cli_error(
    ctx: "click.Context",
    error: Exception,
    operation: str,
    additional_context: Optional[Dict[str, Any]] = None,
    exit_code: int = 1,
) -> None:
    """
    Standardized error exit for all CLI commands.

    Args:
        ctx: Click context whose ``obj`` may hold 'logger' and 'verbose'
        error: Exception that occurred
        operation: Name of the operation that failed (e.g. 'rename_tag')
        additional_context: Optional extra context (tag, file path, etc.)
        exit_code: Exit code for sys.exit() (default: 1)

    Note:
        This function never returns - it always calls sys.exit()
    """
    obj = ctx.obj or {}
    logger: Optional[CuratorLogger] = obj.get("logger")
    verbose: bool = obj.get("verbose", False)

    context = {"operation": operation}
    if additional_context:
        context.update(additional_context)

    message = safe_logger(logger).log_cli_error(error, context, show_traceback=verbose)
    click.echo(message, err=True)
    sys.exit(exit_code)


class NullLogger:
    """
    CuratorLogger stand-in that discards everything.

    Returned by ``safe_logger(None)`` so components never branch on
    whether a logger was configured.
    """

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_error(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_info(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_warning(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        return f"❌ {type(error).__name__}: {error}"


_null_logger = NullLogger()


def safe_logger(logger: Optional[CuratorLogger]) -> CuratorLogger:
    """
    Return the provided logger, or the shared NullLogger if None.

    Args:
        logger: CuratorLogger instance or None

    Returns:
        The provided logger or the NullLogger singleton
    """
    return logger if logger is not None else _null_logger  # type: ignore[return-value]
