"""Render transaction sets as CSV or JSON downloads."""
import json
from datetime import date
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from ..ingest.models import Transaction
from ..utils.exceptions import ValidationError
from ..utils.logger import get_logger

logger = get_logger()

CSV_HEADER = ["ID", "Fecha", "Municipio", "Zona", "Monto", "Tipo", "Lat(Rel)", "Lng(Rel)"]
FORMATS = ("csv", "json")
DEFAULT_PREFIX = "rpee-reporte"


def _format_number(value: float) -> str:
    """Integral floats without a trailing '.0'."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _csv_line(txn: Transaction) -> str:
    # Fields are joined without quoting; a comma inside a field shifts columns.
    return ",".join([
        txn.id,
        txn.date,
        txn.municipality,
        txn.zone,
        _format_number(txn.amount),
        txn.type,
        _format_number(txn.coordinates.y),
        _format_number(txn.coordinates.x),
    ])


def serialize(transactions: Iterable[Transaction], fmt: str) -> str:
    """
    Serialize transactions for export.

    Args:
        transactions: Records to export
        fmt: "csv" or "json"

    Returns:
        File content as text
    """
    fmt = (fmt or "").lower()
    if fmt == "json":
        return json.dumps([txn.to_dict() for txn in transactions], ensure_ascii=False, indent=2)
    if fmt == "csv":
        lines = [",".join(CSV_HEADER)]
        lines.extend(_csv_line(txn) for txn in transactions)
        return "\n".join(lines)
    raise ValidationError(f"Unsupported export format: {fmt!r}")


def export_filename(fmt: str, today: Optional[date] = None, prefix: str = DEFAULT_PREFIX) -> str:
    """Download name such as 'rpee-reporte-2024-06-30.csv'."""
    return f"{prefix}-{(today or date.today()).isoformat()}.{fmt.lower()}"


def write_export(
    transactions: Sequence[Transaction],
    fmt: str,
    directory: Union[str, Path] = ".",
    today: Optional[date] = None,
    prefix: str = DEFAULT_PREFIX
) -> Path:
    """Write the export file into ``directory`` and return its path."""
    content = serialize(transactions, fmt)
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    path = directory / export_filename(fmt, today, prefix)
    path.write_text(content, encoding="utf-8")

    logger.info(f"Exported {len(transactions)} transactions to {path}")
    return path
