"""Chart-ready series derived from a transaction set."""
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List

from ..ingest.models import Transaction
from ..utils.exceptions import ValidationError

GRANULARITIES = ("month", "day")


@dataclass(frozen=True)
class ScatterPoint:
    """One hotspot point on the relative map."""
    x: float
    y: float
    amount: float
    municipality: str
    zone: str
    type: str
    label: str


def format_millions(amount: float, decimals: int = 2) -> str:
    """Render an amount as '$1.25M'."""
    return f"${amount / 1_000_000:.{decimals}f}M"


def volume_by_municipality(transactions: Iterable[Transaction]) -> List[Dict]:
    """Transaction counts per municipality, busiest first."""
    counts = Counter(txn.municipality for txn in transactions)
    return [
        {"name": name, "transactions": count}
        for name, count in counts.most_common()
    ]


def time_series(transactions: Iterable[Transaction], granularity: str = "month") -> List[Dict]:
    """
    Amount totals per period in ascending period order.

    Args:
        transactions: Transactions to group
        granularity: "month" groups by YYYY-MM, "day" by the full date

    Returns:
        List of {"date": period, "amount": total}
    """
    if granularity not in GRANULARITIES:
        raise ValidationError(f"Unknown granularity: {granularity!r}")

    totals: Dict[str, float] = defaultdict(float)
    for txn in transactions:
        key = txn.date[:7] if granularity == "month" else txn.date
        totals[key] += txn.amount

    return [{"date": key, "amount": totals[key]} for key in sorted(totals)]


def scatter_points(transactions: Iterable[Transaction], sensitivity: float = 0) -> List[ScatterPoint]:
    """Hotspot points for transactions with amount at or above ``sensitivity``."""
    return [
        ScatterPoint(
            x=txn.coordinates.x,
            y=txn.coordinates.y,
            amount=txn.amount,
            municipality=txn.municipality,
            zone=txn.zone,
            type=txn.type,
            label=format_millions(txn.amount)
        )
        for txn in transactions
        if txn.amount >= sensitivity
    ]
