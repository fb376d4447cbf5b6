"""RPEE dashboard core: ingestion, filtering, export and narrative reports."""

__version__ = "1.0.0"
