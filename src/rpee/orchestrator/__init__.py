"""Dashboard orchestration module."""
from .dashboard import Dashboard, AnalysisStatus

__all__ = ["Dashboard", "AnalysisStatus"]
