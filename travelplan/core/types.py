"""Shared type aliases used across the planner modules."""
from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field, StringConstraints

NonNegMoney = Annotated[float, Field(ge=0, allow_inf_nan=False)]
PositiveMoney = Annotated[float, Field(gt=0, allow_inf_nan=False)]
Lat = Annotated[float, Field(ge=-90, le=90)]
Lon = Annotated[float, Field(ge=-180, le=180)]
CityName = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=100),
]

CurrencyCode = Literal["INR", "USD", "EUR", "GBP", "AED"]
BudgetTier = Literal["very_low", "budget", "mid-range", "luxury"]
SectionName = Literal[
    "overview",
    "attractive_places",
    "restaurants",
    "travel_methods",
    "detailed_itinerary",
]
GenerationMode = Literal["combined", "sections"]

SECTION_NAMES: tuple[SectionName, ...] = (
    "overview",
    "attractive_places",
    "restaurants",
    "travel_methods",
    "detailed_itinerary",
)
