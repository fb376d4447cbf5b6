"""Coordinate resolution onto the [0,100] x [0,100] plotting grid."""
import random
import unicodedata
from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Coordinates:
    """Relative plotting position (x: longitude axis, y: latitude axis)."""
    x: float
    y: float


# Anchor points for known municipalities, checked in order.
MUNICIPALITY_ANCHORS: List[Tuple[str, Tuple[float, float]]] = [
    ("merida", (50.0, 70.0)),
    ("kanasin", (65.0, 45.0)),
    ("hunucma", (15.0, 55.0)),
    ("uman", (35.0, 25.0)),
    ("progreso", (50.0, 90.0)),
    ("motul", (75.0, 65.0)),
]
DEFAULT_ANCHOR = (50.0, 50.0)

# Geographic bounding box mapped onto the grid
MIN_LAT, MAX_LAT = 20.5, 21.5
MIN_LON, MAX_LON = -90.2, -89.0

GRID_MARGIN = 5.0
GRID_SIZE = 100.0


def fold_name(name: str) -> str:
    """Lowercase and strip accents so 'Mérida' and 'MERIDA' compare equal."""
    decomposed = unicodedata.normalize("NFKD", name or "")
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold().strip()


def _clamp(value: float) -> float:
    return max(GRID_MARGIN, min(GRID_SIZE - GRID_MARGIN, value))


class CoordinateResolver:
    """Maps municipalities or lat/lon pairs to plotting coordinates.

    Resolution by name adds uniform jitter so records of the same
    municipality cluster without overlapping. The random source is passed in;
    give a seeded ``random.Random`` for reproducible output.
    """

    def __init__(self, rng: Optional[random.Random] = None, jitter: float = 5.0):
        self.rng = rng if rng is not None else random.Random()
        self.jitter = jitter

    def anchor_for(self, municipality: str) -> Tuple[float, float]:
        """Return the un-jittered anchor for a municipality name."""
        folded = fold_name(municipality)
        for key, anchor in MUNICIPALITY_ANCHORS:
            if key in folded:
                return anchor
        return DEFAULT_ANCHOR

    def resolve(self, municipality: str) -> Coordinates:
        """Resolve a municipality name to a jittered grid point."""
        x, y = self.anchor_for(municipality)
        return Coordinates(x=x + self._offset(), y=y + self._offset())

    def normalize(self, lat: float, lon: float) -> Coordinates:
        """Project lat/lon from the fixed bounding box, clamped to [5, 95]."""
        y = (lat - MIN_LAT) / (MAX_LAT - MIN_LAT) * GRID_SIZE
        x = (lon - MIN_LON) / (MAX_LON - MIN_LON) * GRID_SIZE
        return Coordinates(x=_clamp(x), y=_clamp(y))

    def _offset(self) -> float:
        return self.rng.uniform(-self.jitter, self.jitter)
