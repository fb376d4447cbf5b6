"""Gemini narrative report module."""
from .reporter import NarrativeReporter, is_error_report, build_digest, ERROR_MARKER

__all__ = ["NarrativeReporter", "is_error_report", "build_digest", "ERROR_MARKER"]
