"""Deterministic offline sections used when mock mode is switched on."""
from __future__ import annotations

from travelplan.core.budget import render_budget_report
from travelplan.core.sanitizer import sanitize
from travelplan.core.schemas import AssembledPlan, BudgetSummary, GeneratedSections, PlanRequest

MOCK_ATTRACTIONS = "1. Central Park - Relaxing green space.\n2. City Museum - Local history and culture."
MOCK_RESTAURANTS = "Breakfast: Cozy Cafe; Lunch: Downtown Deli; Dinner: Riverside Grill."
MOCK_ITINERARY = "Day 1: Arrival and city walk. Day 2: Museums and markets. Day 3: Parks and riverfront."


def build_mock_sections(request: PlanRequest, summary: BudgetSummary) -> GeneratedSections:
    return GeneratedSections(
        overview=sanitize(
            f"A pleasant trip from {request.origin_city} to {request.destination_city} over "
            f"{request.duration_days} days for {request.traveler_count} travelers."
        ),
        attractive_places=sanitize(MOCK_ATTRACTIONS),
        restaurants=sanitize(MOCK_RESTAURANTS),
        travel_methods=sanitize(
            f"Flights, trains, and local taxis are available with budget options for {summary.tier}."
        ),
        detailed_itinerary=sanitize(MOCK_ITINERARY),
    )


def build_mock_plan(request: PlanRequest, summary: BudgetSummary) -> AssembledPlan:
    """Same shape as a live assembly, without calling any provider."""

    return AssembledPlan(
        sections=build_mock_sections(request, summary),
        budget_report=render_budget_report(request, summary),
    )
