"""Keyword classification of property types into coarse categories."""
from typing import List, Tuple

OTHER = "Otros"

# Checked in order; the first category with a matching keyword wins.
CATEGORY_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("Industrial", ("industrial", "bodega", "nave")),
    ("Terreno", ("terreno", "lote", "macrolote")),
    ("Comercial", ("local", "oficina", "comercial", "hotel")),
    ("Residencial", ("casa", "departamento", "townhouse")),
]

CATEGORIES: Tuple[str, ...] = ("Residencial", "Terreno", "Industrial", "Comercial", OTHER)


def classify(property_type: str) -> str:
    """Return the category for a free-text property type."""
    text = (property_type or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return OTHER
