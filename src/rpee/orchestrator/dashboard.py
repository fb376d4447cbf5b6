"""Dashboard session: loaded batch, filter state and narrative analysis.

The session holds one immutable batch at a time. Derived views (filtered
subset, metrics, chart series) are recomputed from the batch and the current
filters on every access; nothing is patched in place.
"""
from dataclasses import replace
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..analysis.aggregator import Aggregator, DashboardMetrics
from ..analysis.charts import ScatterPoint, scatter_points, time_series, volume_by_municipality
from ..analysis.filters import (
    ALL,
    DateRange,
    FilterCriteria,
    category_options,
    filter_transactions,
    municipality_options,
    type_options
)
from ..config.manager import Config, ConfigManager
from ..export.serializer import write_export
from ..gemini.reporter import NarrativeReporter, is_error_report
from ..geo.resolver import CoordinateResolver
from ..ingest.loader import load_file, load_text
from ..ingest.models import ParseResult, Transaction
from ..utils.logger import get_logger, set_dataset_context

logger = get_logger()


class AnalysisStatus(Enum):
    IDLE = "IDLE"
    LOADING = "LOADING"
    COMPLETE = "COMPLETE"
    ERROR = "ERROR"


class Dashboard:
    """Orchestrates the flow: load -> filter -> metrics/charts -> export/report."""

    def __init__(
        self,
        config: Optional[Config] = None,
        resolver: Optional[CoordinateResolver] = None,
        reporter: Optional[NarrativeReporter] = None
    ):
        self.config = config
        self.resolver = resolver or CoordinateResolver()
        self.reporter = reporter
        self.aggregator = Aggregator()
        self.transactions: Tuple[Transaction, ...] = ()
        self.criteria = FilterCriteria()
        self.status = AnalysisStatus.IDLE
        self.report = ""

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_file(self, path: Union[str, Path], today: Optional[date] = None) -> ParseResult:
        """Load a .csv/.json file; the current batch is kept on failure."""
        result = load_file(path, resolver=self.resolver, today=today)
        return self._apply(result)

    def load_text(self, text: str, fmt: str, today: Optional[date] = None) -> ParseResult:
        """Load in-memory CSV/JSON text; the current batch is kept on failure."""
        result = load_text(text, fmt, resolver=self.resolver, today=today)
        return self._apply(result)

    def load_records(self, transactions: Sequence[Transaction]) -> None:
        """Replace the batch with already-normalized records."""
        self._replace_batch(tuple(transactions))

    def reset(self) -> None:
        """Discard the batch, filters and any report."""
        self.transactions = ()
        self.criteria = FilterCriteria()
        self.status = AnalysisStatus.IDLE
        self.report = ""
        set_dataset_context(None)
        logger.info("Dashboard reset")

    def _apply(self, result: ParseResult) -> ParseResult:
        if result.is_valid:
            self._replace_batch(result.data)
        else:
            logger.warning(f"Load failed ({result.error_code}): {result.error}")
        return result

    def _replace_batch(self, transactions: Tuple[Transaction, ...]) -> None:
        self.transactions = transactions
        self.criteria = FilterCriteria()
        self.status = AnalysisStatus.IDLE
        self.report = ""
        logger.info(f"Loaded batch of {len(transactions)} transactions")

    # ------------------------------------------------------------------
    # Filters and derived views
    # ------------------------------------------------------------------

    def set_filters(
        self,
        municipality: Optional[str] = None,
        category: Optional[str] = None,
        type: Optional[str] = None,
        start: Optional[str] = None,
        end: Optional[str] = None
    ) -> FilterCriteria:
        """
        Update the selection; arguments left as None keep their value.

        Changing the category clears the type selection, since the available
        types depend on the category.
        """
        criteria = self.criteria
        if municipality is not None:
            criteria = replace(criteria, municipality=municipality)
        if category is not None and category != criteria.category:
            criteria = replace(criteria, category=category, type=ALL)
        if type is not None:
            criteria = replace(criteria, type=type)
        if start is not None or end is not None:
            criteria = replace(criteria, date_range=DateRange(
                start=criteria.date_range.start if start is None else (start or None),
                end=criteria.date_range.end if end is None else (end or None)
            ))

        if criteria != self.criteria:
            self.criteria = criteria
            self.status = AnalysisStatus.IDLE
            self.report = ""
        return self.criteria

    @property
    def filtered(self) -> Tuple[Transaction, ...]:
        return filter_transactions(self.transactions, self.criteria)

    def metrics(self) -> DashboardMetrics:
        return self.aggregator.aggregate(self.filtered)

    def filter_options(self) -> Dict[str, List[str]]:
        """Selectable values, each list headed by the 'all' sentinel."""
        return {
            "municipality": [ALL] + municipality_options(self.transactions),
            "category": [ALL] + category_options(),
            "type": [ALL] + type_options(self.transactions, self.criteria.category),
        }

    def volume_by_municipality(self) -> List[Dict]:
        return volume_by_municipality(self.filtered)

    def time_series(self, granularity: str = "month") -> List[Dict]:
        return time_series(self.filtered, granularity)

    def scatter_points(self, sensitivity: float = 0) -> List[ScatterPoint]:
        return scatter_points(self.filtered, sensitivity)

    # ------------------------------------------------------------------
    # Export and narrative report
    # ------------------------------------------------------------------

    def export(self, fmt: str, directory: Union[str, Path, None] = None) -> Path:
        """Write the filtered subset to a dated export file."""
        config = self._get_config()
        return write_export(
            self.filtered,
            fmt,
            directory if directory is not None else config.export_directory,
            prefix=config.export_filename_prefix
        )

    @property
    def can_request_report(self) -> bool:
        """A report may be requested when data is selected and none is pending or done."""
        return bool(self.filtered) and self.status not in (
            AnalysisStatus.LOADING,
            AnalysisStatus.COMPLETE
        )

    def run_analysis(self) -> Optional[str]:
        """
        Request the narrative report for the filtered subset.

        Returns:
            Report text, or None when a request is not allowed right now
        """
        if not self.can_request_report:
            logger.info(f"Analysis request ignored (status {self.status.value})")
            return None

        subset = self.filtered
        reporter = self._get_reporter()
        self.status = AnalysisStatus.LOADING
        report = reporter.request(subset)

        self.status = AnalysisStatus.ERROR if is_error_report(report) else AnalysisStatus.COMPLETE
        self.report = report
        logger.info(f"Analysis finished with status {self.status.value}")
        return report

    def _get_config(self) -> Config:
        if self.config is None:
            self.config = ConfigManager().load_config()
        return self.config

    def _get_reporter(self) -> NarrativeReporter:
        if self.reporter is None:
            self.reporter = NarrativeReporter(self._get_config())
        return self.reporter
