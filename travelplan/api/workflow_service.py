from __future__ import annotations

import logging
import math
from typing import Any, List, Mapping, Optional

from langchain_core.messages import BaseMessage, HumanMessage
from pydantic import ValidationError

from travelplan.core.assembler import PlanAssembler
from travelplan.core.budget import to_reference
from travelplan.core.config import ApiSettings
from travelplan.core.errors import PlanValidationError
from travelplan.core.graph_builder import build_plan_graph
from travelplan.core.schemas import (
    MapBundle,
    PlanContext,
    PlanRequest,
    PlanResult,
    State,
    TravelPlan,
)
from travelplan.services import create_gemini_client, create_geo_resolver, create_map_composer

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("from_city", "to_city", "budget", "currency", "duration", "travelers")
_FIELD_ALIASES = {
    "origin_city": "from_city",
    "destination_city": "to_city",
    "budget_amount": "budget",
    "budget_currency": "currency",
    "duration_days": "duration",
    "traveler_count": "travelers",
}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _describe_validation_error(exc: ValidationError) -> str:
    problems: List[str] = []
    for error in exc.errors():
        loc = error.get("loc") or ("request",)
        field = _FIELD_ALIASES.get(str(loc[0]), str(loc[0]))
        problems.append(f"{field}: {error.get('msg', 'invalid value')}")
    return "Invalid fields: " + "; ".join(problems)


def validate_request(payload: Any) -> PlanRequest:
    """Validate a raw request body into a ``PlanRequest``.

    Raises ``PlanValidationError`` naming missing fields first, then any field
    that is present but out of bounds.
    """

    if isinstance(payload, PlanRequest):
        request = payload
    elif not isinstance(payload, Mapping):
        raise PlanValidationError("Request body must be a JSON object")
    else:
        missing = [name for name in REQUIRED_FIELDS if _is_blank(payload.get(name))]
        if missing:
            raise PlanValidationError(f"Missing required fields: {', '.join(missing)}")
        try:
            request = PlanRequest.model_validate(dict(payload))
        except ValidationError as exc:
            raise PlanValidationError(_describe_validation_error(exc)) from exc

    if not math.isfinite(to_reference(request.budget_amount, request.budget_currency)):
        raise PlanValidationError("Invalid fields: budget: amount is too large to convert")
    return request


def _messages_to_strings(result: Mapping[str, Any]) -> List[str]:
    rendered: List[str] = []
    for message in result.get("messages", []):
        if isinstance(message, BaseMessage) and isinstance(message.content, str):
            rendered.append(f"{message.name or message.type}: {message.content}")
        else:
            rendered.append(repr(message))
    return rendered


class PlanPipeline:
    """Container for the plan graph and the services it calls.

    Attributes:
        settings: provider credentials and pipeline switches
        assembler: generates the narrative sections (Gemini-backed by default)
        resolver: place name to coordinates with provider fallback
        composer: static map URL and interactive embed
        graph: compiled LangGraph workflow
    """

    def __init__(
        self,
        settings: ApiSettings,
        *,
        generator: Any = None,
        resolver: Any = None,
        composer: Any = None,
    ) -> None:
        self.settings = settings
        self.generator = generator or create_gemini_client(settings)
        self.resolver = resolver or create_geo_resolver(settings)
        self.composer = composer or create_map_composer(settings)
        self.assembler = PlanAssembler(self.generator, mode=settings.generation_mode)
        self.graph = build_plan_graph(
            assembler=self.assembler,
            resolver=self.resolver,
            composer=self.composer,
        )

    async def close(self) -> None:
        """Close the HTTP clients owned by the services."""

        for service in (self.generator, self.resolver, self.composer):
            aclose = getattr(service, "aclose", None)
            if aclose is not None:
                await aclose()

    async def plan_trip(self, payload: Any, *, mock_mode: Optional[bool] = None) -> PlanResult:
        """Validate the request, run the graph and build the plan.

        Args:
            payload: request body using the wire names
                (``from_city``, ``to_city``, ``budget``, ``currency``, ``duration``, ``travelers``)
            mock_mode: overrides ``settings.mock_mode`` when given

        Raises:
            PlanValidationError: bad or missing fields, before any outbound call
            ConfigError: Gemini key missing in live mode
            ProviderError: generation failed
        """

        request = validate_request(payload)
        mock = self.settings.mock_mode if mock_mode is None else mock_mode
        if not mock:
            self.settings.ensure("gemini_api_key")

        logger.info(
            "Planning %s -> %s, %s %s, %s days, %s travelers%s",
            request.origin_city,
            request.destination_city,
            request.budget_amount,
            request.budget_currency,
            request.duration_days,
            request.traveler_count,
            " (mock)" if mock else "",
        )

        initial_state = State(
            messages=[
                HumanMessage(
                    content=f"Plan a trip from {request.origin_city} to {request.destination_city}",
                    name="request",
                )
            ]
        )
        result = await self.graph.ainvoke(
            initial_state,
            context=PlanContext(request=request, mock_mode=mock),
        )
        for line in _messages_to_strings(result):
            logger.debug("Plan log: %s", line)

        assembled = result["assembled"]
        sections = assembled.sections
        plan = TravelPlan(
            destination=request.destination_city,
            overview=sections.overview,
            restaurants=sections.restaurants,
            maps=result.get("maps") or MapBundle(),
            attractive_places=sections.attractive_places,
            travel_methods=sections.travel_methods,
            budget_breakdown=assembled.budget_report,
            detailed_itinerary=sections.detailed_itinerary,
            warnings=assembled.warnings,
        )
        return PlanResult(success=True, plan=plan)
