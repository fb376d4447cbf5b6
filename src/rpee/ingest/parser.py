"""CSV and JSON ingestion into normalized Transaction records.

Both entry points return a :class:`ParseResult`. Structural problems (empty
file, missing required columns, wrong top-level JSON shape, bad syntax) fail
the whole load; defects inside a single row are replaced by defaults and the
row is kept.
"""
import json
import math
import re
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ValidationError, field_validator, model_validator

from ..geo.resolver import Coordinates, CoordinateResolver
from ..utils.exceptions import (
    IngestionError,
    EmptyOrHeaderOnlyError,
    MissingRequiredColumnsError,
    CsvFormatError,
    NotAnArrayError,
    JsonSyntaxError
)
from ..utils.logger import get_logger
from .models import Transaction, ParseResult, UNKNOWN, DEFAULT_ZONE

logger = get_logger()

# (keyword, field) rules for tolerant CSV headers, e.g. "monto_mxn" -> amount.
HEADER_RULES: List[Tuple[str, str]] = [
    ("id", "id"),
    ("fecha", "date"),
    ("date", "date"),
    ("municipio", "municipality"),
    ("municipality", "municipality"),
    ("zona", "zone"),
    ("colonia", "zone"),
    ("zone", "zone"),
    ("tipo", "type"),
    ("type", "type"),
    ("monto", "amount"),
    ("amount", "amount"),
    ("latitud", "latitude"),
    ("longitud", "longitude"),
]
REQUIRED_COLUMNS = ("amount", "municipality")

# Candidate JSON keys per field, English first, then the Spanish source system.
JSON_FIELD_CANDIDATES: Dict[str, Tuple[str, ...]] = {
    "id": ("id", "id_transaccion"),
    "date": ("date", "fecha_registro"),
    "municipality": ("municipality", "municipio"),
    "zone": ("zone", "zona_colonia"),
    "amount": ("amount", "monto_mxn"),
    "type": ("type", "tipo_propiedad"),
    "coordinates": ("coordinates",),
}

_NUMBER_PREFIX = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def parse_number(raw: Any) -> Optional[float]:
    """Parse the leading number of a value, or None when there is none."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        match = _NUMBER_PREFIX.match(str(raw))
        if not match:
            return None
        value = float(match.group(0))
    return value if math.isfinite(value) else None


def parse_amount(raw: Any) -> float:
    """Parse an amount; missing, unparsable or negative values become 0."""
    value = parse_number(raw)
    if value is None or value < 0:
        return 0.0
    return value


def match_columns(headers: List[str]) -> Dict[str, int]:
    """Map logical fields to the first column whose header contains a keyword."""
    columns: Dict[str, int] = {}
    for index, header in enumerate(headers):
        name = header.strip().lower()
        for keyword, field in HEADER_RULES:
            if field not in columns and keyword in name:
                columns[field] = index
    return columns


def _today_iso(today: Optional[date]) -> str:
    return (today or date.today()).isoformat()


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------


def parse_csv(
    text: str,
    resolver: Optional[CoordinateResolver] = None,
    today: Optional[date] = None
) -> ParseResult:
    """
    Parse CSV text into transactions.

    Fields are split on bare commas; quoted fields with embedded commas are
    not supported.

    Args:
        text: Raw CSV content, header row first
        resolver: Coordinate resolver (a fresh unseeded one when omitted)
        today: Date used for rows without a date

    Returns:
        ParseResult with every data line as a record, or a failure
    """
    try:
        transactions = _read_csv(text, resolver or CoordinateResolver(), _today_iso(today))
    except IngestionError as e:
        logger.warning(f"CSV rejected ({e.code}): {e}")
        return ParseResult.failure(str(e), e.code)
    except Exception as e:
        logger.error(f"Unexpected error while parsing CSV: {e}")
        error = CsvFormatError()
        return ParseResult.failure(str(error), error.code)

    logger.info(f"Parsed {len(transactions)} transactions from CSV")
    return ParseResult.success(transactions)


def _read_csv(text: str, resolver: CoordinateResolver, today: str) -> List[Transaction]:
    lines = [line for line in text.lstrip("\ufeff").split("\n") if line.strip()]
    if len(lines) < 2:
        raise EmptyOrHeaderOnlyError()

    columns = match_columns(lines[0].split(","))
    missing = [field for field in REQUIRED_COLUMNS if field not in columns]
    if missing:
        logger.debug(f"Header {lines[0].strip()!r} lacks columns for {missing}")
        raise MissingRequiredColumnsError()

    return [
        _csv_row_to_transaction(line, index, columns, resolver, today)
        for index, line in enumerate(lines[1:])
    ]


def _csv_row_to_transaction(
    line: str,
    index: int,
    columns: Dict[str, int],
    resolver: CoordinateResolver,
    today: str
) -> Transaction:
    cells = [cell.strip() for cell in line.split(",")]

    def cell(field: str) -> str:
        position = columns.get(field)
        if position is None or position >= len(cells):
            return ""
        return cells[position]

    municipality = cell("municipality") or UNKNOWN

    lat = parse_number(cell("latitude"))
    lon = parse_number(cell("longitude"))
    if lat is not None and lon is not None:
        coordinates = resolver.normalize(lat, lon)
    else:
        coordinates = resolver.resolve(municipality)

    return Transaction(
        id=cell("id") or f"csv-{index}",
        date=cell("date") or today,
        municipality=municipality,
        zone=cell("zone") or DEFAULT_ZONE,
        amount=parse_amount(cell("amount")),
        type=cell("type") or UNKNOWN,
        coordinates=coordinates
    )


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


class CoordinatesSchema(BaseModel):
    """Coordinates supplied by the input, accepted without range checks."""
    x: float
    y: float

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return {"x": value[0], "y": value[1]}
        return value


class JsonRecordSchema(BaseModel):
    """Pydantic schema for one reconciled JSON element."""
    id: Optional[str] = None
    date: Optional[str] = None
    municipality: str = UNKNOWN
    zone: str = DEFAULT_ZONE
    amount: float = 0.0
    type: str = UNKNOWN
    coordinates: Optional[CoordinatesSchema] = None

    @field_validator("coordinates", mode="before")
    @classmethod
    def _usable_coordinates(cls, value: Any) -> Any:
        # Malformed coordinates count as absent
        if value is None:
            return None
        try:
            return CoordinatesSchema.model_validate(value)
        except ValidationError:
            logger.debug(f"Ignoring unusable coordinates {value!r}")
            return None

    @field_validator("id", "date", "municipality", "zone", "type", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Any:
        if value is None:
            return value
        return value.strip() if isinstance(value, str) else str(value)

    @field_validator("amount", mode="before")
    @classmethod
    def _as_amount(cls, value: Any) -> float:
        return parse_amount(value)


def _pick(item: Mapping[str, Any], keys: Tuple[str, ...]) -> Any:
    """Return the first present value among candidate keys."""
    for key in keys:
        value = item.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def reconcile_fields(item: Mapping[str, Any]) -> Dict[str, Any]:
    """Collapse English/Spanish key variants into logical field names."""
    reconciled = {}
    for field, keys in JSON_FIELD_CANDIDATES.items():
        value = _pick(item, keys)
        if value is not None:
            reconciled[field] = value
    return reconciled


def parse_json(
    text: str,
    resolver: Optional[CoordinateResolver] = None,
    today: Optional[date] = None
) -> ParseResult:
    """
    Parse a JSON array of objects into transactions.

    Args:
        text: Raw JSON content
        resolver: Coordinate resolver (a fresh unseeded one when omitted)
        today: Date used for elements without a date

    Returns:
        ParseResult with one record per element, in order, or a failure
    """
    try:
        transactions = _read_json(text, resolver or CoordinateResolver(), _today_iso(today))
    except IngestionError as e:
        logger.warning(f"JSON rejected ({e.code}): {e}")
        return ParseResult.failure(str(e), e.code)
    except Exception as e:
        logger.error(f"Unexpected error while parsing JSON: {e}")
        error = JsonSyntaxError()
        return ParseResult.failure(str(error), error.code)

    logger.info(f"Parsed {len(transactions)} transactions from JSON")
    return ParseResult.success(transactions)


def _read_json(text: str, resolver: CoordinateResolver, today: str) -> List[Transaction]:
    try:
        data = json.loads(text.lstrip("\ufeff"))
    except json.JSONDecodeError as e:
        logger.debug(f"JSON decode failed: {e}")
        raise JsonSyntaxError()

    if not isinstance(data, list):
        raise NotAnArrayError()

    return [
        _json_item_to_transaction(item, index, resolver, today)
        for index, item in enumerate(data)
    ]


def _json_item_to_transaction(
    item: Any,
    index: int,
    resolver: CoordinateResolver,
    today: str
) -> Transaction:
    if not isinstance(item, dict):
        logger.debug(f"JSON element {index} is {type(item).__name__}, not an object")
        raise JsonSyntaxError()

    try:
        record = JsonRecordSchema(**reconcile_fields(item))
    except ValidationError as e:
        logger.debug(f"JSON element {index} failed validation: {e}")
        raise JsonSyntaxError()

    if record.coordinates is not None:
        coordinates = Coordinates(x=record.coordinates.x, y=record.coordinates.y)
    else:
        coordinates = resolver.resolve(record.municipality)

    return Transaction(
        id=record.id or f"json-{index}",
        date=record.date or today,
        municipality=record.municipality,
        zone=record.zone,
        amount=record.amount,
        type=record.type,
        coordinates=coordinates
    )
