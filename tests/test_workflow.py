"""Tests for the plan graph nodes and the PlanPipeline entry point."""
from __future__ import annotations

import asyncio
import time

import pytest
from langchain_core.messages import AIMessage
from langgraph.runtime import Runtime

from travelplan.api.workflow_service import PlanPipeline, validate_request
from travelplan.core.budget import summarize_budget
from travelplan.core.config import ApiSettings
from travelplan.core.errors import ConfigError, PlanValidationError, RateLimitedError
from travelplan.core.assembler import PlanAssembler
from travelplan.core.nodes import make_compose_maps_node, make_generate_node, make_geocode_node
from travelplan.core.schemas import PlanContext, PlanRequest, State

from conftest import COMBINED_JSON, GOA, MUMBAI, StubComposer, StubGenerator, StubResolver


def _pipeline(generator=None, resolver=None, composer=None, **settings) -> PlanPipeline:
    settings.setdefault("gemini_api_key", "test-key")
    return PlanPipeline(
        ApiSettings(**settings),
        generator=generator or StubGenerator([COMBINED_JSON]),
        resolver=resolver or StubResolver({"Mumbai": MUMBAI, "Goa": GOA}),
        composer=composer or StubComposer(),
    )


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def test_validate_request_accepts_wire_names(mumbai_goa_payload) -> None:
    request = validate_request({**mumbai_goa_payload, "currency": "usd", "to_city": "  Goa "})

    assert request.destination_city == "Goa"
    assert request.budget_currency == "USD"
    assert request.traveler_count == 2


@pytest.mark.parametrize(
    "missing",
    [("travelers",), ("from_city", "budget")],
)
def test_validate_request_names_missing_fields(mumbai_goa_payload, missing) -> None:
    payload = {k: v for k, v in mumbai_goa_payload.items() if k not in missing}

    with pytest.raises(PlanValidationError) as excinfo:
        validate_request(payload)

    assert str(excinfo.value) == f"Missing required fields: {', '.join(missing)}"


def test_blank_city_counts_as_missing(mumbai_goa_payload) -> None:
    with pytest.raises(PlanValidationError, match="Missing required fields: to_city"):
        validate_request({**mumbai_goa_payload, "to_city": "   "})


@pytest.mark.parametrize(
    "field, value",
    [
        ("budget", 0),
        ("budget", -10),
        ("duration", 31),
        ("duration", 0),
        ("travelers", 21),
        ("currency", "JPY"),
        ("budget", float("inf")),
        ("budget", float("nan")),
        ("budget", True),
        ("duration", True),
        ("travelers", True),
    ],
)
def test_validate_request_rejects_out_of_bounds(mumbai_goa_payload, field, value) -> None:
    with pytest.raises(PlanValidationError) as excinfo:
        validate_request({**mumbai_goa_payload, field: value})

    assert str(excinfo.value).startswith("Invalid fields: ")
    assert f"{field}:" in str(excinfo.value)


def test_validation_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        validate_request(["not", "an", "object"])


def test_budget_that_overflows_after_conversion_is_rejected(mumbai_goa_payload) -> None:
    payload = {**mumbai_goa_payload, "budget": 1e307, "currency": "GBP"}

    with pytest.raises(PlanValidationError, match="Invalid fields: budget: amount is too large to convert"):
        validate_request(payload)


def test_large_finite_budget_is_accepted(mumbai_goa_payload) -> None:
    request = validate_request({**mumbai_goa_payload, "budget": 1e300, "currency": "GBP"})
    assert summarize_budget(request).tier == "luxury"


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


@pytest.fixture
def plan_context(mumbai_goa_payload) -> PlanContext:
    return PlanContext(request=PlanRequest.model_validate(mumbai_goa_payload))


@pytest.mark.asyncio
async def test_generate_node_outputs_summary_and_plan(plan_context) -> None:
    generator = StubGenerator([])
    context = plan_context.model_copy(update={"mock_mode": True})
    node = make_generate_node(PlanAssembler(generator))
    result = await node(State(messages=[]), Runtime(context=context))

    assert result["budget"].tier == "mid-range"
    assert result["assembled"].budget_report.startswith("BUDGET BREAKDOWN")
    assert generator.prompts == []
    assert all(isinstance(message, AIMessage) for message in result["messages"])
    assert [message.name for message in result["messages"]] == ["budget", "generate"]


@pytest.mark.asyncio
async def test_geocode_node_resolves_both_endpoints(plan_context) -> None:
    resolver = StubResolver({"Mumbai": MUMBAI, "Goa": GOA})
    result = await make_geocode_node(resolver)(State(messages=[]), Runtime(context=plan_context))

    assert sorted(resolver.calls) == ["Goa", "Mumbai"]
    assert result["origin_coordinates"] == MUMBAI
    assert result["destination_coordinates"] == GOA


@pytest.mark.asyncio
async def test_geocode_node_is_skipped_in_mock_mode(plan_context) -> None:
    resolver = StubResolver({"Goa": GOA})
    context = plan_context.model_copy(update={"mock_mode": True})
    result = await make_geocode_node(resolver)(State(messages=[]), Runtime(context=context))

    assert resolver.calls == []
    assert "destination_coordinates" not in result


@pytest.mark.asyncio
async def test_compose_maps_node_without_destination(plan_context) -> None:
    composer = StubComposer()
    state = State(messages=[], origin_coordinates=MUMBAI)
    result = await make_compose_maps_node(composer)(state, Runtime(context=plan_context))

    assert composer.calls == []
    assert result["maps"].model_dump(exclude_none=True) == {}


# ---------------------------------------------------------------------------
# PlanPipeline
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_plan_trip_builds_full_plan(mumbai_goa_payload) -> None:
    composer = StubComposer()
    pipeline = _pipeline(composer=composer)

    result = await pipeline.plan_trip(mumbai_goa_payload)

    assert result.success is True
    plan = result.plan
    assert plan.destination == "Goa"
    assert plan.overview == "Goa is sunny."
    assert plan.attractive_places == "1. Baga Beach"
    assert plan.restaurants == "Breakfast: Cafe"
    assert plan.travel_methods == "Train from Mumbai"
    assert plan.detailed_itinerary == "Day 1: Beach\nDay 2: Forts"
    assert plan.places_to_visit == []
    assert plan.budget_breakdown.startswith("BUDGET BREAKDOWN (Total: ₹50,000 / INR 50,000)")
    assert plan.maps.static_map_url.startswith("https://maps.example/static")
    assert plan.maps.interactive_map == "<iframe></iframe>"
    assert composer.calls == [(GOA, MUMBAI)]

    payload = result.to_payload()
    assert payload["success"] is True
    assert "error" not in payload
    assert set(payload["plan"]) >= {
        "destination",
        "overview",
        "attractive_places",
        "restaurants",
        "travel_methods",
        "budget_breakdown",
        "detailed_itinerary",
        "maps",
    }


@pytest.mark.asyncio
async def test_missing_travelers_makes_no_outbound_calls(mumbai_goa_payload) -> None:
    generator = StubGenerator([COMBINED_JSON])
    resolver = StubResolver({"Goa": GOA})
    pipeline = _pipeline(generator=generator, resolver=resolver)
    payload = {k: v for k, v in mumbai_goa_payload.items() if k != "travelers"}

    with pytest.raises(PlanValidationError, match="travelers"):
        await pipeline.plan_trip(payload)

    assert generator.prompts == []
    assert resolver.calls == []


@pytest.mark.asyncio
async def test_geocoding_failure_leaves_maps_empty(mumbai_goa_payload) -> None:
    composer = StubComposer()
    pipeline = _pipeline(resolver=StubResolver({}), composer=composer)

    result = await pipeline.plan_trip(mumbai_goa_payload)

    assert result.success is True
    assert result.to_payload()["plan"]["maps"] == {}
    assert composer.calls == []


@pytest.mark.asyncio
async def test_origin_failure_keeps_static_map_only(mumbai_goa_payload) -> None:
    pipeline = _pipeline(resolver=StubResolver({"Goa": GOA}))

    result = await pipeline.plan_trip(mumbai_goa_payload)

    maps = result.to_payload()["plan"]["maps"]
    assert "static_map_url" in maps
    assert "interactive_map" not in maps


@pytest.mark.asyncio
async def test_missing_key_is_a_config_error_before_any_call(mumbai_goa_payload) -> None:
    generator = StubGenerator([COMBINED_JSON])
    resolver = StubResolver({"Goa": GOA})
    pipeline = _pipeline(generator=generator, resolver=resolver, gemini_api_key=None)

    with pytest.raises(ConfigError):
        await pipeline.plan_trip(mumbai_goa_payload)

    assert generator.prompts == []
    assert resolver.calls == []


@pytest.mark.asyncio
async def test_provider_error_propagates(mumbai_goa_payload) -> None:
    generator = StubGenerator([RateLimitedError("Gemini API rate limit exceeded.", status=429)])
    pipeline = _pipeline(generator=generator)

    with pytest.raises(RateLimitedError):
        await pipeline.plan_trip(mumbai_goa_payload)


@pytest.mark.asyncio
async def test_mock_mode_skips_providers_and_key_check(mumbai_goa_payload) -> None:
    generator = StubGenerator([])
    resolver = StubResolver({"Goa": GOA})
    pipeline = _pipeline(generator=generator, resolver=resolver, gemini_api_key=None)

    result = await pipeline.plan_trip(mumbai_goa_payload, mock_mode=True)

    assert result.success is True
    assert result.plan.overview == "A pleasant trip from Mumbai to Goa over 5 days for 2 travelers."
    assert result.to_payload()["plan"]["maps"] == {}
    assert generator.prompts == []
    assert resolver.calls == []


@pytest.mark.asyncio
async def test_mock_mode_from_settings_still_validates(mumbai_goa_payload) -> None:
    pipeline = _pipeline(mock_mode=True)

    with pytest.raises(PlanValidationError):
        await pipeline.plan_trip({**mumbai_goa_payload, "duration": 0})


@pytest.mark.asyncio
async def test_sections_mode_runs_through_pipeline(mumbai_goa_payload) -> None:
    generator = StubGenerator(["Overview", "Places", "Food", "Trains", "Day 1"])
    pipeline = _pipeline(generator=generator, generation_mode="sections")

    result = await pipeline.plan_trip(mumbai_goa_payload)

    assert len(generator.prompts) == 5
    assert result.plan.restaurants == "Food"


@pytest.mark.asyncio
async def test_close_closes_services() -> None:
    generator = StubGenerator([])
    pipeline = _pipeline(generator=generator)

    await pipeline.close()

    assert generator.closed is True


def test_summary_from_validated_request(mumbai_goa_payload) -> None:
    request = validate_request(mumbai_goa_payload)
    assert summarize_budget(request).reference_budget == 50000


class SlowResolver(StubResolver):
    def __init__(self, table, delay: float) -> None:
        super().__init__(table)
        self.delay = delay
        self.done = None

    async def resolve(self, place):
        await asyncio.sleep(self.delay)
        self.done = time.monotonic()
        return await super().resolve(place)


class TimedGenerator(StubGenerator):
    started = None

    async def generate(self, prompt: str) -> str:
        if self.started is None:
            self.started = time.monotonic()
        return await super().generate(prompt)


@pytest.mark.asyncio
async def test_generation_does_not_wait_for_geocoding(mumbai_goa_payload) -> None:
    generator = TimedGenerator([COMBINED_JSON])
    resolver = SlowResolver({"Mumbai": MUMBAI, "Goa": GOA}, delay=0.3)
    pipeline = _pipeline(generator=generator, resolver=resolver)

    result = await pipeline.plan_trip(mumbai_goa_payload)

    assert result.plan.maps.interactive_map is not None
    assert generator.started is not None
    assert generator.started < resolver.done
