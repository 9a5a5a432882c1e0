"""Logging infrastructure with Rich console output and optional rotating file logs."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

MEMSEARCH_THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "red bold",
        "critical": "red bold reverse",
        "success": "green bold",
        "highlight": "magenta",
    }
)


class MemSearchLogger:
    """Logger wrapper with Rich console and file output."""

    _instance: Optional["MemSearchLogger"] = None
    _initialized: bool = False

    def __new__(cls):
        """Singleton pattern to ensure only one logger instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize logger (only once)."""
        if not self._initialized:
            # Logs go to stderr so JSON written to stdout stays clean for the host.
            self.console = Console(theme=MEMSEARCH_THEME, stderr=True)
            self.logger = logging.getLogger("memsearch")
            self._initialized = True

    def setup(
        self,
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5,
        console_enabled: bool = True,
        file_enabled: bool = False,
    ):
        """
        Configure logging handlers and formatters.

        Args:
            level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files
            max_bytes: Maximum size of each log file before rotation
            backup_count: Number of rotated log files to keep
            console_enabled: Enable console (Rich) logging
            file_enabled: Enable file logging
        """
        for handler in self.logger.handlers:
            handler.close()
        self.logger.handlers.clear()

        log_level = getattr(logging, level.upper(), logging.INFO)
        self.logger.setLevel(log_level)

        # Keep the host application's root logger untouched
        self.logger.propagate = False

        if console_enabled:
            console_handler = RichHandler(
                console=self.console,
                rich_tracebacks=True,
                show_time=True,
                show_path=False,
                markup=False,
            )
            console_handler.setLevel(log_level)
            self.logger.addHandler(console_handler)

        if file_enabled:
            if log_dir is None:
                log_dir = Path("logs")

            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)

            file_handler = RotatingFileHandler(
                log_dir / "memsearch.log",
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            file_handler.setFormatter(
                logging.Formatter(
                    fmt="%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            file_handler.setLevel(log_level)
            self.logger.addHandler(file_handler)

        if not self.logger.handlers:
            # Keeps logging's last-resort stderr handler quiet
            self.logger.addHandler(logging.NullHandler())

    def get_logger(self, name: Optional[str] = None) -> logging.Logger:
        """
        Get a logger instance.

        Args:
            name: Optional logger name (creates child logger)

        Returns:
            Logger instance
        """
        if name:
            # Module names arrive as "memsearch.index.manager"; avoid "memsearch.memsearch.*"
            if name.startswith("memsearch."):
                name = name[len("memsearch."):]
            return self.logger.getChild(name)
        return self.logger


_logger_instance: Optional[MemSearchLogger] = None


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Optional logger name for component-specific logging

    Returns:
        Configured logger instance
    """
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = MemSearchLogger()
        _logger_instance.setup()
    return _logger_instance.get_logger(name)


def setup_logging(
    level: str = "INFO",
    log_dir: Optional[Path] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    console_enabled: bool = True,
    file_enabled: bool = False,
):
    """
    Configure global logging settings.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for log files
        max_bytes: Maximum size of each log file before rotation
        backup_count: Number of rotated log files to keep
        console_enabled: Enable console (Rich) logging
        file_enabled: Enable file logging
    """
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = MemSearchLogger()
    _logger_instance.setup(level, log_dir, max_bytes, backup_count, console_enabled, file_enabled)


def get_console() -> Console:
    """Get the Rich console instance used for log output."""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = MemSearchLogger()
    return _logger_instance.console
