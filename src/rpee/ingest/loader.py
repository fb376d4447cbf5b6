"""Load a dataset from a file or in-memory text by format."""
from datetime import date
from pathlib import Path
from typing import Optional, Union

from ..geo.resolver import CoordinateResolver
from ..utils.exceptions import UnsupportedFormatError, FileReadError
from ..utils.logger import get_logger, set_dataset_context
from .models import ParseResult
from .parser import parse_csv, parse_json

logger = get_logger()

PARSERS = {
    "csv": parse_csv,
    "json": parse_json,
}


def detect_format(path: Union[str, Path]) -> Optional[str]:
    """Return 'csv' or 'json' from the file extension, else None."""
    suffix = Path(path).suffix.lower().lstrip(".")
    return suffix if suffix in PARSERS else None


def load_text(
    text: str,
    fmt: str,
    resolver: Optional[CoordinateResolver] = None,
    today: Optional[date] = None
) -> ParseResult:
    """Parse in-memory text with the parser for ``fmt`` ('csv' or 'json')."""
    parser = PARSERS.get((fmt or "").strip().lower().lstrip("."))
    if parser is None:
        error = UnsupportedFormatError()
        logger.warning(f"Unsupported format: {fmt!r}")
        return ParseResult.failure(str(error), error.code)
    return parser(text, resolver=resolver, today=today)


def load_file(
    path: Union[str, Path],
    resolver: Optional[CoordinateResolver] = None,
    today: Optional[date] = None
) -> ParseResult:
    """
    Read a .csv or .json file and parse it.

    Args:
        path: File to load
        resolver: Coordinate resolver passed to the parser
        today: Date used for records without a date

    Returns:
        ParseResult; unreadable files and unknown extensions are failures
    """
    path = Path(path)
    set_dataset_context(path.name)

    fmt = detect_format(path)
    if fmt is None:
        error = UnsupportedFormatError()
        logger.warning(f"Unsupported file extension: {path.name}")
        return ParseResult.failure(str(error), error.code)

    try:
        text = path.read_bytes().decode("utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        error = FileReadError()
        logger.error(f"Failed to read {path}: {e}")
        return ParseResult.failure(str(error), error.code)

    logger.info(f"Loading {fmt.upper()} dataset: {path.name}")
    return load_text(text, fmt, resolver=resolver, today=today)
