"""Logging infrastructure with session context."""
import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from .paths import app_data_dir


class SessionContextFilter(logging.Filter):
    """Add dashboard session context to log records."""

    def __init__(self):
        super().__init__()
        self.session_id: Optional[str] = None

    def filter(self, record):
        """Add session_id to record."""
        record.session_id = self.session_id or "system"
        return True


class BrokeAgainLogger:
    """Centralized logging manager."""

    def __init__(self, log_level: str = "INFO", max_file_size_mb: int = 5, backup_count: int = 10):
        self.log_dir = app_data_dir() / "logs"
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.log_file = self.log_dir / "brokeagain.log"
        self.session_filter = SessionContextFilter()

        self.logger = logging.getLogger("brokeagain")
        self.logger.setLevel(getattr(logging, log_level.upper()))
        self.logger.handlers.clear()

        file_handler = RotatingFileHandler(
            self.log_file,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.WARNING)

        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] [session:%(session_id)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

        file_handler.setFormatter(formatter)
        console_handler.setFormatter(formatter)

        file_handler.addFilter(self.session_filter)
        console_handler.addFilter(self.session_filter)

        self.logger.addHandler(file_handler)
        self.logger.addHandler(console_handler)

    def set_session_context(self, session_id: Optional[str]):
        """Set current session context for logging."""
        self.session_filter.session_id = session_id

    def get_logger(self) -> logging.Logger:
        """Get the configured logger."""
        return self.logger


# Global logger instance
_logger_instance: Optional[BrokeAgainLogger] = None


def get_logger(log_level: str = "INFO") -> logging.Logger:
    """Get or create global logger instance."""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = BrokeAgainLogger(log_level)
    return _logger_instance.get_logger()


def configure_logging(log_level: str, max_file_size_mb: int, backup_count: int) -> logging.Logger:
    """Rebuild the global logger from application settings."""
    global _logger_instance
    session_id = _logger_instance.session_filter.session_id if _logger_instance else None
    _logger_instance = BrokeAgainLogger(log_level, max_file_size_mb, backup_count)
    _logger_instance.set_session_context(session_id)
    return _logger_instance.get_logger()


def set_session_context(session_id: Optional[str]):
    """Set session context for logging."""
    if _logger_instance:
        _logger_instance.set_session_context(session_id)
