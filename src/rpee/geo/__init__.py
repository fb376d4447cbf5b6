"""Coordinate resolution module."""
from .resolver import Coordinates, CoordinateResolver, fold_name

__all__ = ["Coordinates", "CoordinateResolver", "fold_name"]
