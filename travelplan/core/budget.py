"""Budget normalisation, tier classification and category allocation.

All amounts are expressed in the reference currency (INR). Thresholds and
weights are product constants; keep their values unless product says otherwise.
"""
from __future__ import annotations

import math
from typing import Dict, Tuple

from travelplan.core.schemas import BudgetAllocation, BudgetSummary, PlanRequest
from travelplan.core.types import BudgetTier

REFERENCE_CURRENCY = "INR"
REFERENCE_SYMBOL = "₹"

CURRENCY_RATES: Dict[str, float] = {
    "INR": 1.0,
    "USD": 83.0,
    "EUR": 89.0,
    "GBP": 105.0,
    "AED": 22.6,
}

# Per person per day, ascending; a value equal to a threshold belongs to that tier.
TIER_THRESHOLDS: Tuple[Tuple[float, BudgetTier], ...] = (
    (1000, "budget"),
    (3000, "mid-range"),
    (8000, "luxury"),
)

_ECONOMY_WEIGHTS = {
    "accommodation": 0.35,
    "food": 0.25,
    "transport": 0.20,
    "activities": 0.15,
    "miscellaneous": 0.05,
}

ALLOCATION_WEIGHTS: Dict[BudgetTier, Dict[str, float]] = {
    "very_low": _ECONOMY_WEIGHTS,
    "budget": _ECONOMY_WEIGHTS,
    "mid-range": {
        "accommodation": 0.40,
        "food": 0.25,
        "transport": 0.15,
        "activities": 0.15,
        "miscellaneous": 0.05,
    },
    "luxury": {
        "accommodation": 0.45,
        "food": 0.20,
        "transport": 0.15,
        "activities": 0.15,
        "miscellaneous": 0.05,
    },
}

MONEY_SAVING_TIPS: Dict[BudgetTier, str] = {
    "very_low": (
        "Book accommodations in advance for better rates. Use public transportation. "
        "Eat at local restaurants and street food. Look for free attractions and activities. "
        "Travel during off-peak seasons."
    ),
    "mid-range": (
        "Mix of budget and mid-range accommodations. Combination of local and upscale dining. "
        "Use mix of public and private transportation. Include both free and paid attractions. "
        "Book popular restaurants in advance."
    ),
    "luxury": (
        "Premium accommodations and experiences. Fine dining and exclusive restaurants. "
        "Private transportation options. VIP attraction access and tours. "
        "Luxury shopping and spa experiences."
    ),
}
MONEY_SAVING_TIPS["budget"] = MONEY_SAVING_TIPS["very_low"]

_REPORT_LINES = (
    ("accommodation", "Accommodation"),
    ("food", "Food & Dining"),
    ("transport", "Transportation"),
    ("activities", "Activities & Sightseeing"),
    ("miscellaneous", "Miscellaneous & Emergency"),
)


def to_reference(amount: float, currency: str) -> float:
    """Convert ``amount`` into the reference currency; unknown codes convert 1:1."""

    return amount * CURRENCY_RATES.get(currency, 1.0)


def classify(reference_budget: float, duration_days: int, traveler_count: int) -> BudgetTier:
    """Map the per-person-per-day spend onto a budget tier."""

    person_days = duration_days * traveler_count
    if person_days <= 0:
        raise ValueError("duration_days and traveler_count must be positive")

    per_person_per_day = reference_budget / person_days
    tier: BudgetTier = "very_low"
    for threshold, candidate in TIER_THRESHOLDS:
        if per_person_per_day < threshold:
            break
        tier = candidate
    return tier


def allocate(total_reference_budget: float, tier: BudgetTier) -> BudgetAllocation:
    """Split the total budget by the tier's fixed category weights."""

    weights = ALLOCATION_WEIGHTS[tier]
    return BudgetAllocation(
        **{category: total_reference_budget * weight for category, weight in weights.items()}
    )


def summarize_budget(request: PlanRequest) -> BudgetSummary:
    """Run conversion, classification and allocation for one request."""

    reference_budget = to_reference(request.budget_amount, request.budget_currency)
    tier = classify(reference_budget, request.duration_days, request.traveler_count)
    return BudgetSummary(
        reference_budget=reference_budget,
        per_person_per_day=reference_budget / (request.duration_days * request.traveler_count),
        tier=tier,
        allocation=allocate(reference_budget, tier),
    )


# ---------------------------------------------------------------------------
# Presentation helpers
# ---------------------------------------------------------------------------


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _group_indian(digits: str) -> str:
    """Apply Indian digit grouping (12,34,567) to a string of digits."""

    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_inr(value: float, *, decimals: int = 0) -> str:
    """Format an amount the way ``en-IN`` locales do, e.g. ``4,15,000``."""

    sign = "-" if value < 0 else ""
    value = abs(value)
    if decimals:
        whole, _, fraction = f"{value:.{decimals}f}".partition(".")
        fraction = fraction.rstrip("0")
    else:
        whole, fraction = str(round_half_up(value)), ""
    grouped = _group_indian(whole)
    return f"{sign}{grouped}.{fraction}" if fraction else f"{sign}{grouped}"


def format_amount(value: float) -> str:
    """Western grouping for the amount the traveler typed in."""

    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def tier_label(tier: BudgetTier) -> str:
    return tier[:1].upper() + tier[1:]


def render_budget_report(request: PlanRequest, summary: BudgetSummary) -> str:
    """Render the deterministic budget breakdown shown under the plan."""

    total = summary.reference_budget
    travelers = request.traveler_count
    allocation = summary.allocation

    lines = [
        f"BUDGET BREAKDOWN (Total: {REFERENCE_SYMBOL}{format_inr(total, decimals=3)} / "
        f"{request.budget_currency} {format_amount(request.budget_amount)})",
        "",
        f"Per Person Cost: {REFERENCE_SYMBOL}{format_inr(total / travelers)}",
        f"Budget Category: {tier_label(summary.tier)}",
        f"Trip Duration: {request.duration_days} days",
    ]
    for category, label in _REPORT_LINES:
        amount = getattr(allocation, category)
        share = round_half_up(amount / total * 100) if total else 0
        lines.append("")
        lines.append(
            f"{label}: {REFERENCE_SYMBOL}{format_inr(amount)} ({share}%) - "
            f"{REFERENCE_SYMBOL}{format_inr(amount / travelers)} per person"
        )
    lines.append("")
    lines.append(f"Money-Saving Tips for {summary.tier} Budget:")
    lines.append(MONEY_SAVING_TIPS[summary.tier])
    return "\n".join(lines)
