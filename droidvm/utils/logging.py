"""Unified logging for droidvm.

This module provides:
1. Centralized logging configuration
2. Debug mode via DROIDVM_DEBUG env var or the --debug flag
3. Log levels via DROIDVM_LOG_LEVEL env var
4. Dual output: Rich console for the user, setup.log for everything else

Usage:
    from droidvm.utils.logging import get_logger, configure_logging

    # In CLI entry point:
    configure_logging(debug=debug)

    # In any module:
    logger = get_logger(__name__)
    logger.info("Installing packages")
    logger.success("Core packages installed")
    logger.error("Something failed", exc=exception)

Environment Variables:
    DROIDVM_DEBUG=1          Enable debug mode (verbose output)
    DROIDVM_LOG_LEVEL=DEBUG  Set log level (DEBUG, INFO, WARNING, ERROR)
    DROIDVM_LOG_FILE=/path   Override log file location
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from droidvm.paths import TermuxPaths

# Global state
_configured = False
_debug_mode = False
_log_file: Optional[Path] = None

# Shared Rich console instance
console = Console()

# Custom log level for success messages
SUCCESS_LEVEL = 25
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_log_file() -> Path:
    """Get the log file path (setup.log in the install dir unless overridden)."""
    global _log_file
    if _log_file:
        return _log_file

    env_log_file = os.environ.get("DROIDVM_LOG_FILE")
    if env_log_file:
        _log_file = Path(env_log_file)
    else:
        _log_file = TermuxPaths.log_file()

    return _log_file


def is_debug_mode() -> bool:
    """Check if debug mode is enabled."""
    return _debug_mode or os.environ.get("DROIDVM_DEBUG", "").lower() in ("1", "true", "yes")


def configure_logging(
    debug: bool = False,
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
    force: bool = False,
) -> None:
    """Configure the logging system.

    Should be called once at application startup (CLI entry point).

    Args:
        debug: Enable debug mode (debug messages also go to the console)
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Override log file path
        force: Reconfigure even if logging was already set up
    """
    global _configured, _debug_mode, _log_file

    if _configured and not force:
        return

    _debug_mode = debug or is_debug_mode()

    if log_file:
        _log_file = log_file

    if log_level:
        level_name = log_level.upper()
    else:
        level_name = os.environ.get("DROIDVM_LOG_LEVEL", "DEBUG" if _debug_mode else "INFO").upper()

    level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger("droidvm")
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        handler.close()
        root_logger.removeHandler(handler)

    # File handler with rotation (always enabled, captures all logs)
    try:
        path = get_log_file()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path,
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        root_logger.addHandler(file_handler)
    except OSError:
        # Can't write log file, continue without it
        pass

    _configured = True

    root_logger.debug(f"Logging configured: level={level_name}, debug={_debug_mode}")
    root_logger.debug(f"Log file: {get_log_file()}")


def reset_logging() -> None:
    """Forget the current configuration so configure_logging() runs again."""
    global _configured, _debug_mode, _log_file

    root_logger = logging.getLogger("droidvm")
    for handler in list(root_logger.handlers):
        handler.close()
        root_logger.removeHandler(handler)

    _configured = False
    _debug_mode = False
    _log_file = None


class DroidLogger:
    """Unified logging with Rich console output.

    Provides:
    - Standard log levels (debug, info, warning, error)
    - Success level for green checkmark messages
    - File logging of everything shown to the user
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(name)
        self.console = console

    def debug(self, message: str, console_output: bool = False) -> None:
        """Log debug message.

        By default, debug only goes to the log file. Set console_output=True
        or enable DROIDVM_DEBUG to see it in the console.
        """
        self.logger.debug(message)
        if console_output or is_debug_mode():
            self.console.print(f"[dim][DEBUG] {escape(message)}[/dim]")

    def info(self, message: str, console_output: bool = True) -> None:
        """Log info message (cyan ℹ output)."""
        self.logger.info(message)
        if console_output:
            self.console.print(f"[cyan]ℹ[/cyan]  {escape(message)}")

    def success(self, message: str, console_output: bool = True) -> None:
        """Log success message (green output)."""
        self.logger.log(SUCCESS_LEVEL, message)
        if console_output:
            self.console.print(f"[green]✓[/green] {escape(message)}")

    def warning(self, message: str, console_output: bool = True) -> None:
        """Log warning message (yellow output)."""
        self.logger.warning(message)
        if console_output:
            self.console.print(f"[yellow]⚠[/yellow]  {escape(message)}")

    def error(
        self,
        message: str,
        exc: Optional[Exception] = None,
        console_output: bool = True,
    ) -> None:
        """Log error message (red output).

        Args:
            message: Error message
            exc: Optional exception to include in log
            console_output: Output to console
        """
        if exc:
            self.logger.error(f"{message}: {exc}", exc_info=exc)
            error_msg = f"{message}: {exc}"
        else:
            self.logger.error(message)
            error_msg = message

        if console_output:
            self.console.print(f"[red]✗[/red] {escape(error_msg)}")

    def exception(self, message: str, console_output: bool = True) -> None:
        """Log exception with full traceback.

        Call this from within an except block.
        """
        self.logger.exception(message)
        if console_output:
            self.console.print(f"[red]✗ {escape(message)}[/red]")
            if is_debug_mode():
                self.console.print_exception()

    def print(self, message: str, style: Optional[str] = None) -> None:
        """Print to console without logging.

        Use for user-facing output that shouldn't be in logs.
        """
        if style:
            self.console.print(f"[{style}]{message}[/{style}]")
        else:
            self.console.print(message)


def get_logger(name: str) -> DroidLogger:
    """Get or create a logger for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        DroidLogger instance
    """
    if not _configured:
        configure_logging()

    if not name.startswith("droidvm"):
        name = f"droidvm.{name}"

    return DroidLogger(name)


def log_startup_info() -> None:
    """Log startup diagnostic information (call from main entry points)."""
    logger = get_logger("droidvm.startup")
    logger.debug(f"Python: {sys.version}")
    logger.debug(f"Platform: {sys.platform}")
    logger.debug(f"CWD: {os.getcwd()}")
    logger.debug(f"Debug mode: {is_debug_mode()}")
    logger.debug(f"Log file: {get_log_file()}")

    for var in ["DROIDVM_DEBUG", "DROIDVM_LOG_LEVEL", "DROIDVM_HOME"]:
        value = os.environ.get(var)
        if value:
            logger.debug(f"ENV {var}={value}")
