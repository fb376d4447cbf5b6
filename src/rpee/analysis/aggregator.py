"""Summary metrics over a transaction set."""
from collections import Counter
from dataclasses import dataclass
from typing import Sequence

from ..ingest.models import Transaction
from ..utils.logger import get_logger

logger = get_logger()

NO_ZONE = "N/A"


@dataclass(frozen=True)
class DashboardMetrics:
    """Headline figures for the current selection."""
    total_volume: float
    transaction_count: int
    top_zone: str
    average_amount: float


class Aggregator:
    """Computes dashboard metrics for a set of transactions."""

    def aggregate(self, transactions: Sequence[Transaction]) -> DashboardMetrics:
        """
        Aggregate transactions into headline metrics.

        Args:
            transactions: Filtered transactions

        Returns:
            DashboardMetrics; all zeros and top zone "N/A" when empty
        """
        if not transactions:
            return DashboardMetrics(
                total_volume=0.0,
                transaction_count=0,
                top_zone=NO_ZONE,
                average_amount=0.0
            )

        total = sum(txn.amount for txn in transactions)
        count = len(transactions)

        metrics = DashboardMetrics(
            total_volume=total,
            transaction_count=count,
            top_zone=self._top_zone(transactions),
            average_amount=total / count
        )

        logger.info(
            f"Aggregated {count} transactions: volume {total:,.2f}, "
            f"top zone {metrics.top_zone}"
        )
        return metrics

    def _top_zone(self, transactions: Sequence[Transaction]) -> str:
        """
        Zone with the most transactions.

        Counter keeps insertion order among equal counts, so ties go to the
        zone encountered first.
        """
        zone_counts = Counter(txn.zone for txn in transactions)
        top_zone = zone_counts.most_common(1)[0][0]
        logger.debug(f"Zone counts: {dict(zone_counts)}")
        return top_zone
