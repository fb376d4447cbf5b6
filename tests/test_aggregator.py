"""Tests for transaction aggregator."""
import unittest

from rpee.analysis.aggregator import Aggregator
from rpee.geo.resolver import Coordinates
from rpee.ingest.models import Transaction


def make_txn(txn_id, zone, amount):
    return Transaction(txn_id, "2024-05-01", "Mérida", zone, amount, "Casa", Coordinates(50, 50))


class TestAggregator(unittest.TestCase):
    """Test Aggregator functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.aggregator = Aggregator()

    def test_aggregate_transactions(self):
        """Test basic aggregation."""
        transactions = [
            make_txn("1", "Temozón Norte", 1_000_000),
            make_txn("2", "Centro", 500_000),
            make_txn("3", "Temozón Norte", 1_500_000),
        ]

        result = self.aggregator.aggregate(transactions)

        self.assertEqual(result.total_volume, 3_000_000)
        self.assertEqual(result.transaction_count, 3)
        self.assertEqual(result.top_zone, "Temozón Norte")
        self.assertEqual(result.average_amount, 1_000_000)

    def test_top_zone_tie_goes_to_first_seen(self):
        """Test tie-breaking by iteration order."""
        transactions = [
            make_txn("1", "Centro", 10),
            make_txn("2", "Norte", 10),
            make_txn("3", "Norte", 10),
            make_txn("4", "Centro", 10),
        ]

        result = self.aggregator.aggregate(transactions)
        self.assertEqual(result.top_zone, "Centro")

    def test_empty_transactions(self):
        """Test that an empty set gives zeros instead of dividing by zero."""
        result = self.aggregator.aggregate([])

        self.assertEqual(result.transaction_count, 0)
        self.assertEqual(result.total_volume, 0)
        self.assertEqual(result.average_amount, 0)
        self.assertEqual(result.top_zone, "N/A")


if __name__ == "__main__":
    unittest.main()
