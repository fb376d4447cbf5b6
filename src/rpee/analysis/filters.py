"""Filtering of transaction sets by municipality, category, type and date."""
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from ..ingest.models import Transaction
from .categories import CATEGORIES, classify

ALL = "all"
_ALL_ALIASES = {"all", "todos"}


def is_all(value: Optional[str]) -> bool:
    """True when a selector is unset or one of the 'all' sentinels."""
    return value is None or value.strip().lower() in _ALL_ALIASES


@dataclass(frozen=True)
class DateRange:
    """Inclusive ISO date bounds; either side may be open."""
    start: Optional[str] = None
    end: Optional[str] = None

    def contains(self, iso_date: str) -> bool:
        if self.start and iso_date < self.start:
            return False
        if self.end and iso_date > self.end:
            return False
        return True


@dataclass(frozen=True)
class FilterCriteria:
    """Current filter selection."""
    municipality: Optional[str] = ALL
    category: Optional[str] = ALL
    type: Optional[str] = ALL
    date_range: DateRange = field(default_factory=DateRange)

    def matches(self, txn: Transaction) -> bool:
        if not is_all(self.municipality) and txn.municipality != self.municipality:
            return False
        if not is_all(self.category) and classify(txn.type) != self.category:
            return False
        if not is_all(self.type) and txn.type != self.type:
            return False
        return self.date_range.contains(txn.date)


def filter_transactions(
    transactions: Iterable[Transaction],
    criteria: Optional[FilterCriteria] = None
) -> Tuple[Transaction, ...]:
    """Return the transactions matching ``criteria``, in input order."""
    criteria = criteria or FilterCriteria()
    return tuple(txn for txn in transactions if criteria.matches(txn))


def municipality_options(transactions: Iterable[Transaction]) -> List[str]:
    """Distinct municipalities in first-seen order."""
    return list(dict.fromkeys(txn.municipality for txn in transactions))


def category_options() -> List[str]:
    return list(CATEGORIES)


def type_options(
    transactions: Iterable[Transaction],
    category: Optional[str] = ALL
) -> List[str]:
    """Distinct property types available within the selected category."""
    return list(dict.fromkeys(
        txn.type for txn in transactions
        if is_all(category) or classify(txn.type) == category
    ))
