from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional

# listings frame column order (also the HousingRecord field order)
COLUMNS = [
    "county", "location", "project_name", "project_status", "total_units",
    "unit_type", "available_units", "price", "monthly_payment",
    "category", "bedrooms",
]

OTHER_COLOR = "#6B7280"


class Category(str, Enum):
    """Price category of a unit type."""
    SOCIAL = "Social"
    AFFORDABLE = "Affordable"
    MARKET = "Market"
    OTHER = "Other"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "Category":
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER

    @property
    def color(self) -> str:
        return _CATEGORY_COLORS[self]


class Availability(str, Enum):
    """Availability label; anything outside the known two is OTHER."""
    AVAILABLE = "Available"
    SOLD_OUT = "Sold Out"
    OTHER = "Other"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "Availability":
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER

    @property
    def color(self) -> str:
        return _AVAILABILITY_COLORS[self]


_CATEGORY_COLORS = {
    Category.SOCIAL: "#2563EB",
    Category.AFFORDABLE: "#059669",
    Category.MARKET: "#EA580C",
    Category.OTHER: OTHER_COLOR,
}

_AVAILABILITY_COLORS = {
    Availability.AVAILABLE: "#059669",
    Availability.SOLD_OUT: "#DC2626",
    Availability.OTHER: OTHER_COLOR,
}


def category_color(value: Optional[str]) -> str:
    return Category.from_string(value).color


def availability_color(value: Optional[str]) -> str:
    return Availability.from_string(value).color


@dataclass(frozen=True)
class HousingRecord:
    """
    One unit-type row of a housing project listing.

    `category` and `bedrooms` are derived from `unit_type` at parse time.
    `total_units` is the project-level total and is only set on some rows.
    """
    county: str
    location: str
    project_name: str
    project_status: str
    total_units: Optional[int]
    unit_type: str
    available_units: str
    price: float
    monthly_payment: Optional[float]
    category: str
    bedrooms: Optional[int]
