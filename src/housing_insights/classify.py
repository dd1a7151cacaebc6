"""
Heuristic classifiers over the free-text unit type column.

Keyword order matters: the first rule that matches wins, so a unit type
mentioning both "social" and "market" is Social.
"""
from __future__ import annotations
from typing import Optional

import pandas as pd

from .records import Category

_CATEGORY_RULES = (
    ("social", Category.SOCIAL),
    ("market", Category.MARKET),
    ("affordable", Category.AFFORDABLE),
)

_BEDROOM_RULES = (
    (("studio", "bedsitter"), 0),
    (("1 room", "1 bedroom"), 1),
    (("2 room", "2 bedroom"), 2),
    (("3 room", "3 bedroom"), 3),
    (("4 room", "4 bedroom"), 4),
)

UNKNOWN_BUCKET = "Unknown"

BEDROOM_LABELS = {
    0: "Studio",
    1: "1 Bedroom",
    2: "2 Bedrooms",
    3: "3 Bedrooms",
    4: "4+ Bedrooms",
}

# fallback for "N room" unit types the bedroom rules did not catch
_ROOM_LABELS = (("1", "1 Room"), ("2", "2 Rooms"), ("3", "3 Rooms"))


def classify_category(unit_type: Optional[str]) -> Category:
    t = (unit_type or "").lower()
    for keyword, category in _CATEGORY_RULES:
        if keyword in t:
            return category
    return Category.OTHER


def classify_bedrooms(unit_type: Optional[str]) -> Optional[int]:
    """Bedroom/room count from the unit type (0 = studio), None if unrecognised."""
    t = (unit_type or "").lower()
    for keywords, count in _BEDROOM_RULES:
        if any(k in t for k in keywords):
            return count
    return None


def bedroom_bucket(bedrooms: Optional[int], unit_type: Optional[str]) -> str:
    """
    Display bucket for the bedroom chart.

    Known counts map to BEDROOM_LABELS; otherwise unit types mentioning
    "room" are bucketed by the first of 1/2/3 they contain. Everything
    else is UNKNOWN_BUCKET.
    """
    if bedrooms is not None and not pd.isna(bedrooms):
        return BEDROOM_LABELS.get(int(bedrooms), UNKNOWN_BUCKET)
    t = unit_type or ""
    if "room" in t.lower():
        for digit, label in _ROOM_LABELS:
            if digit in t:
                return label
    return UNKNOWN_BUCKET
