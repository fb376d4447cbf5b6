"""Dataset ingestion module."""
from .models import Transaction, ParseResult, Coordinates
from .parser import parse_csv, parse_json
from .loader import load_file, load_text, detect_format

__all__ = [
    "Transaction",
    "ParseResult",
    "Coordinates",
    "parse_csv",
    "parse_json",
    "load_file",
    "load_text",
    "detect_format"
]
