"""Export module."""
from .serializer import serialize, export_filename, write_export, CSV_HEADER

__all__ = ["serialize", "export_filename", "write_export", "CSV_HEADER"]
