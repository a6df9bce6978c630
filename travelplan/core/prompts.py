"""Prompt templates sent to the text-generation provider."""
from __future__ import annotations

from typing import Any, Dict

from travelplan.core.budget import format_amount, format_inr, round_half_up
from travelplan.core.schemas import BudgetSummary, PlanRequest
from travelplan.core.types import SectionName

_TRIP_CONTEXT = """From: {from_city}
To: {to_city}
Duration: {duration} days
Travelers: {travelers}
Budget: INR {budget_inr} (input: {currency} {budget})
Budget Category: {budget_category}
Budget Breakdown (INR totals):
  accommodation={accommodation}
  food={food}
  transport={transport}
  activities={activities}
  miscellaneous={miscellaneous}"""

combined_plan_prompt = """You are a helpful travel planner.
Return ONLY a compact JSON object with these string fields: overview, attractive_places, restaurants, travel_methods, detailed_itinerary.
Do not include markdown, code fences, or any additional commentary.

Context:
{trip_context}

Guidelines:
- overview: simple paragraphs on what makes {to_city} special.
- attractive_places: numbered list (plain text) of 10-15 attractions with short details.
- restaurants: plain text for breakfast/lunch/dinner/street food with price ranges.
- travel_methods: flights/trains/bus/local transport and budget split, plain text.
- detailed_itinerary: day-by-day schedule with morning/afternoon/evening, realistic costs; include a final BUDGET SPENT SUMMARY.
"""

_PLAIN_TEXT_RULES = """Formatting rules:
- Answer in plain text only. No markdown, no asterisks, no hash headings, no tables, no code fences.
- Use short paragraphs and line breaks; numbered lines are fine.
- Keep every price in INR and consistent with the budget breakdown above."""

overview_prompt = """You are a helpful travel planner writing the OVERVIEW of a trip plan.

Trip:
{trip_context}

Write 2-3 simple paragraphs on what makes {to_city} special for a {budget_category} traveler coming from {from_city}: atmosphere, best season, what to expect for {travelers} traveler(s) over {duration} days.

{plain_text_rules}
"""

attractive_places_prompt = """You are a helpful travel planner listing ATTRACTIONS for a trip plan.

Trip:
{trip_context}

List 10-15 attractions in {to_city} as a numbered list. For each give one or two lines: what it is, typical entry cost in INR and how long to spend there. Favour places that fit the activities budget of INR {activities}.

{plain_text_rules}
"""

restaurants_prompt = """You are a helpful travel planner recommending FOOD for a trip plan.

Trip:
{trip_context}

Recommend places to eat in {to_city} for breakfast, lunch, dinner and street food. Give a price range per person in INR for each and keep the total within the food budget of INR {food}.

{plain_text_rules}
"""

travel_methods_prompt = """You are a helpful travel planner describing TRAVEL METHODS for a trip plan.

Trip:
{trip_context}

Explain how to get from {from_city} to {to_city} (flights, trains, buses) with indicative fares, then how to move around locally. Show how the transport budget of INR {transport} is split.

{plain_text_rules}
"""

detailed_itinerary_prompt = """You are a helpful travel planner writing a DAY-BY-DAY ITINERARY.

Trip:
{trip_context}

Write a schedule for each of the {duration} days with Morning, Afternoon and Evening lines, realistic costs in INR and the day's total. Finish with a BUDGET SPENT SUMMARY comparing spending with the INR {budget_inr} budget.

{plain_text_rules}
"""

SECTION_PROMPTS: Dict[SectionName, str] = {
    "overview": overview_prompt,
    "attractive_places": attractive_places_prompt,
    "restaurants": restaurants_prompt,
    "travel_methods": travel_methods_prompt,
    "detailed_itinerary": detailed_itinerary_prompt,
}


def _prompt_parameters(request: PlanRequest, summary: BudgetSummary) -> Dict[str, Any]:
    allocation = summary.allocation
    params: Dict[str, Any] = {
        "from_city": request.origin_city,
        "to_city": request.destination_city,
        "duration": request.duration_days,
        "travelers": request.traveler_count,
        "currency": request.budget_currency,
        "budget": format_amount(request.budget_amount),
        "budget_inr": format_inr(summary.reference_budget, decimals=3),
        "budget_category": summary.tier,
        "accommodation": round_half_up(allocation.accommodation),
        "food": round_half_up(allocation.food),
        "transport": round_half_up(allocation.transport),
        "activities": round_half_up(allocation.activities),
        "miscellaneous": round_half_up(allocation.miscellaneous),
    }
    params["trip_context"] = _TRIP_CONTEXT.format(**params)
    params["plain_text_rules"] = _PLAIN_TEXT_RULES
    return params


def build_combined_prompt(request: PlanRequest, summary: BudgetSummary) -> str:
    """Single request asking for all five sections as one JSON object."""

    return combined_plan_prompt.format(**_prompt_parameters(request, summary))


def build_section_prompts(request: PlanRequest, summary: BudgetSummary) -> Dict[SectionName, str]:
    """One plain-text prompt per section, in rendering order."""

    params = _prompt_parameters(request, summary)
    return {name: template.format(**params) for name, template in SECTION_PROMPTS.items()}
