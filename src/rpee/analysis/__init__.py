"""Filtering, aggregation and chart series."""
from .categories import CATEGORIES, classify
from .filters import (
    ALL,
    DateRange,
    FilterCriteria,
    filter_transactions,
    municipality_options,
    category_options,
    type_options
)
from .aggregator import Aggregator, DashboardMetrics
from .charts import ScatterPoint, volume_by_municipality, time_series, scatter_points

__all__ = [
    "CATEGORIES",
    "classify",
    "ALL",
    "DateRange",
    "FilterCriteria",
    "filter_transactions",
    "municipality_options",
    "category_options",
    "type_options",
    "Aggregator",
    "DashboardMetrics",
    "ScatterPoint",
    "volume_by_municipality",
    "time_series",
    "scatter_points"
]
