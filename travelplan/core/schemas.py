"""Pydantic data models for the travel plan pipeline.

Key model categories:
- PlanRequest: validated trip parameters accepted from collaborators
- BudgetAllocation / BudgetSummary: reference-currency budget figures
- GeneratedSections: the five sanitized narrative sections
- Coordinates / MapBundle: geocoding output and rendered map artefacts
- PlanResult / TravelPlan: the frozen response handed back to callers
- State / PlanContext: LangGraph workflow state and per-run context
"""
from __future__ import annotations

from typing import Annotated, Any, List, Optional

from langchain_core.messages import AnyMessage
from langgraph.graph.message import add_messages
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from travelplan.core.types import (
    SECTION_NAMES,
    BudgetTier,
    CityName,
    CurrencyCode,
    Lat,
    Lon,
    NonNegMoney,
    PositiveMoney,
    SectionName,
)


class PlanRequest(BaseModel):
    """Trip parameters as posted by the planning form.

    Wire names (``from_city``, ``to_city``, ...) are accepted as aliases so the
    JSON body can be validated directly.
    """

    origin_city: CityName = Field(alias="from_city", description="Departure city")
    destination_city: CityName = Field(alias="to_city", description="Destination city")
    budget_amount: PositiveMoney = Field(alias="budget", description="Total trip budget")
    budget_currency: CurrencyCode = Field(alias="currency", description="Currency of the budget")
    duration_days: int = Field(alias="duration", ge=1, le=30, description="Trip length in days")
    traveler_count: int = Field(alias="travelers", ge=1, le=20, description="Number of travelers")

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @field_validator("budget_currency", mode="before")
    @classmethod
    def normalise_currency(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("budget_amount", "duration_days", "traveler_count", mode="before")
    @classmethod
    def reject_booleans(cls, value: Any) -> Any:
        # Lax mode would read true as 1
        if isinstance(value, bool):
            raise ValueError("must be a number, not a boolean")
        return value


class BudgetAllocation(BaseModel):
    """Category split of the reference-currency budget."""

    accommodation: NonNegMoney
    food: NonNegMoney
    transport: NonNegMoney
    activities: NonNegMoney
    miscellaneous: NonNegMoney

    model_config = ConfigDict(extra="forbid", frozen=True)

    @computed_field(return_type=float)
    @property
    def total(self) -> float:
        """Return the sum of all categories."""

        return float(
            self.accommodation
            + self.food
            + self.transport
            + self.activities
            + self.miscellaneous
        )


class BudgetSummary(BaseModel):
    """Everything derived from the budget fields of one request."""

    reference_budget: NonNegMoney
    per_person_per_day: NonNegMoney
    tier: BudgetTier
    allocation: BudgetAllocation

    model_config = ConfigDict(extra="forbid", frozen=True)


class GeneratedSections(BaseModel):
    """Narrative sections of a plan; any of them may be empty on partial failure."""

    overview: str = ""
    attractive_places: str = ""
    restaurants: str = ""
    travel_methods: str = ""
    detailed_itinerary: str = ""

    model_config = ConfigDict(extra="forbid", frozen=True)

    def empty_sections(self) -> List[SectionName]:
        return [name for name in SECTION_NAMES if not getattr(self, name).strip()]


class Coordinates(BaseModel):
    lat: Lat
    lng: Lon

    model_config = ConfigDict(extra="forbid", frozen=True)


class MapBundle(BaseModel):
    """Map artefacts for the destination; both are absent when geocoding fails."""

    static_map_url: Optional[str] = None
    interactive_map: Optional[str] = None

    model_config = ConfigDict(extra="forbid", frozen=True)


class AssembledPlan(BaseModel):
    """Output of the plan assembler: sanitized sections plus the budget report."""

    sections: GeneratedSections
    budget_report: str
    warnings: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)


class TravelPlan(BaseModel):
    """Plan payload rendered by the front-end."""

    destination: str
    overview: str
    places_to_visit: List[str] = Field(default_factory=list)
    restaurants: str
    maps: MapBundle = Field(default_factory=MapBundle)
    attractive_places: str
    travel_methods: str
    budget_breakdown: str
    detailed_itinerary: str
    warnings: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)


class PlanResult(BaseModel):
    """Response envelope returned for every planning request."""

    success: bool
    plan: Optional[TravelPlan] = None
    error: Optional[str] = None

    model_config = ConfigDict(extra="forbid", frozen=True)

    def to_payload(self) -> dict:
        """JSON-ready dict with absent optional fields dropped."""

        return self.model_dump(mode="json", exclude_none=True)


class PlanContext(BaseModel):
    """Per-run context handed to every graph node."""

    request: PlanRequest
    mock_mode: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)


class State(BaseModel):
    """LangGraph workflow state that flows between the pipeline nodes.

    The state evolves through these stages:
    1. Initial: only the opening message
    2. Generate / geocode (parallel): budget summary, assembled plan, coordinates
    3. Compose maps: map bundle from the coordinates
    """

    messages: Annotated[List[AnyMessage], add_messages]
    budget: Optional[BudgetSummary] = None
    origin_coordinates: Optional[Coordinates] = None
    destination_coordinates: Optional[Coordinates] = None
    assembled: Optional[AssembledPlan] = None
    maps: Optional[MapBundle] = None

    model_config = ConfigDict(extra="forbid")


__all__ = [
    "PlanRequest",
    "BudgetAllocation",
    "BudgetSummary",
    "GeneratedSections",
    "Coordinates",
    "MapBundle",
    "AssembledPlan",
    "TravelPlan",
    "PlanResult",
    "PlanContext",
    "State",
]
