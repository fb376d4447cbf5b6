"""Data models for dataset ingestion."""
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Tuple

from ..geo.resolver import Coordinates

UNKNOWN = "Desconocido"
DEFAULT_ZONE = "General"


@dataclass(frozen=True)
class Transaction:
    """A normalized real-estate transaction."""
    id: str
    date: str  # YYYY-MM-DD
    municipality: str
    zone: str
    amount: float
    type: str
    coordinates: Coordinates

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict form used by the JSON export."""
        return asdict(self)


@dataclass(frozen=True)
class ParseResult:
    """Outcome of one ingestion call: a full batch or a diagnostic."""
    is_valid: bool
    data: Tuple[Transaction, ...] = ()
    error: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def success(cls, transactions) -> "ParseResult":
        return cls(is_valid=True, data=tuple(transactions))

    @classmethod
    def failure(cls, error: str, error_code: str) -> "ParseResult":
        return cls(is_valid=False, error=error, error_code=error_code)
