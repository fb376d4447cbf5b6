"""Logging infrastructure with dataset context."""
import logging
import os
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional


class DatasetContextFilter(logging.Filter):
    """Add dataset context to log records."""

    def __init__(self):
        super().__init__()
        self.dataset: Optional[str] = None

    def filter(self, record):
        """Add dataset name to record."""
        record.dataset = self.dataset or "none"
        return True


class RpeeLogger:
    """Centralized logging manager."""

    def __init__(self, log_level: str = "INFO", max_file_size_mb: int = 10, backup_count: int = 30):
        self.log_dir = self._resolve_log_dir()
        self.log_file = self.log_dir / "rpee.log"
        self.dataset_filter = DatasetContextFilter()

        self.logger = logging.getLogger("rpee")
        self.logger.setLevel(getattr(logging, log_level.upper()))
        for handler in self.logger.handlers:
            handler.close()
        self.logger.handlers.clear()
        self.logger.propagate = False

        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] [dataset:%(dataset)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(self.dataset_filter)
        self.logger.addHandler(console_handler)

        # File handler with rotation
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                self.log_file,
                maxBytes=max_file_size_mb * 1024 * 1024,
                backupCount=backup_count,
                encoding="utf-8"
            )
        except OSError as e:
            self.logger.warning(f"File logging disabled ({self.log_dir}): {e}")
            return

        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(self.dataset_filter)
        self.logger.addHandler(file_handler)

    @staticmethod
    def _resolve_log_dir() -> Path:
        env_dir = os.getenv("RPEE_LOG_DIR")
        if env_dir:
            return Path(env_dir)
        return Path.home() / ".rpee" / "logs"

    def set_dataset_context(self, dataset: Optional[str]):
        """Set current dataset context for logging."""
        self.dataset_filter.dataset = dataset

    def get_logger(self) -> logging.Logger:
        """Get the configured logger."""
        return self.logger


# Global logger instance
_logger_instance: Optional[RpeeLogger] = None


def get_logger(log_level: str = "INFO") -> logging.Logger:
    """Get or create global logger instance."""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = RpeeLogger(log_level)
    return _logger_instance.get_logger()


def configure_logging(
    log_level: str = "INFO",
    max_file_size_mb: int = 10,
    backup_count: int = 30
) -> logging.Logger:
    """
    Rebuild the global logger from loaded settings.

    Modules keep their `get_logger()` reference; only its level and handlers
    change.

    Args:
        log_level: Level name such as "DEBUG"
        max_file_size_mb: Rotation size of the log file
        backup_count: Number of rotated files kept

    Returns:
        The reconfigured logger
    """
    global _logger_instance
    _logger_instance = RpeeLogger(log_level, max_file_size_mb, backup_count)
    return _logger_instance.get_logger()


def set_dataset_context(dataset: Optional[str]):
    """Set dataset context for logging."""
    global _logger_instance
    if _logger_instance:
        _logger_instance.set_dataset_context(dataset)
