"""Pytest configuration for the travel plan project."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Ensure the project root is on sys.path so that import travelplan works under pytest.
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from travelplan.core.schemas import Coordinates, MapBundle  # noqa: E402


@pytest.fixture
def mumbai_goa_payload() -> Dict[str, Any]:
    """Request body for the reference Mumbai to Goa trip."""

    return {
        "from_city": "Mumbai",
        "to_city": "Goa",
        "budget": 50000,
        "currency": "INR",
        "duration": 5,
        "travelers": 2,
    }


class StubGenerator:
    """Records prompts and replays canned responses (or raises canned errors)."""

    mode = "stub"

    def __init__(self, responses: List[Any]) -> None:
        self._responses = list(responses)
        self.prompts: List[str] = []
        self.closed = False

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def aclose(self) -> None:
        self.closed = True


class StubResolver:
    """Resolves places from a fixed table."""

    def __init__(self, table: Optional[Dict[str, Coordinates]] = None) -> None:
        self.table = table or {}
        self.calls: List[str] = []

    async def resolve(self, place: str) -> Optional[Coordinates]:
        self.calls.append(place)
        return self.table.get(place)


class StubComposer:
    """Returns a predictable bundle and records the coordinates it saw."""

    def __init__(self) -> None:
        self.calls: List[Any] = []

    async def compose(self, destination, origin=None) -> MapBundle:
        self.calls.append((destination, origin))
        return MapBundle(
            static_map_url=f"https://maps.example/static?c={destination.lat},{destination.lng}",
            interactive_map="<iframe></iframe>" if origin is not None else None,
        )


MUMBAI = Coordinates(lat=19.076, lng=72.8777)
GOA = Coordinates(lat=15.2993, lng=74.124)

COMBINED_JSON = (
    '{"overview": "Goa is **sunny**.", "attractive_places": "1. Baga Beach", '
    '"restaurants": "Breakfast: Cafe", "travel_methods": "Train from Mumbai", '
    '"detailed_itinerary": "Day 1: Beach\\nDay 2: Forts"}'
)
