"""Utility modules."""
from .logger import get_logger, configure_logging, set_dataset_context
from .exceptions import (
    RpeeError,
    ConfigError,
    ValidationError,
    ExternalServiceError,
    IngestionError,
    EmptyOrHeaderOnlyError,
    MissingRequiredColumnsError,
    CsvFormatError,
    NotAnArrayError,
    JsonSyntaxError,
    UnsupportedFormatError,
    FileReadError
)

__all__ = [
    "get_logger",
    "configure_logging",
    "set_dataset_context",
    "RpeeError",
    "ConfigError",
    "ValidationError",
    "ExternalServiceError",
    "IngestionError",
    "EmptyOrHeaderOnlyError",
    "MissingRequiredColumnsError",
    "CsvFormatError",
    "NotAnArrayError",
    "JsonSyntaxError",
    "UnsupportedFormatError",
    "FileReadError"
]
