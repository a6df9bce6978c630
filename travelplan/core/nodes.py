"""LangGraph nodes for the plan pipeline.

Each ``make_*_node`` factory binds a node to its service dependency and returns
an async callable with the ``(state, runtime)`` signature LangGraph expects.
Every node appends its ``AIMessage`` entries to the shared message log.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict

from langchain_core.messages import AIMessage
from langgraph.runtime import Runtime

from travelplan.core.assembler import PlanAssembler
from travelplan.core.budget import summarize_budget
from travelplan.core.mock_plan import build_mock_plan
from travelplan.core.schemas import MapBundle, PlanContext, State

logger = logging.getLogger(__name__)


def make_generate_node(assembler: PlanAssembler):
    """Return the node that summarizes the budget and produces the plan text.

    The budget step lives here so generation starts in the same superstep as
    geocoding.
    """

    async def node(state: State, runtime: Runtime[PlanContext]) -> Dict[str, Any]:
        request = runtime.context.request
        summary = summarize_budget(request)
        logger.info(
            "Budget for %s: %.2f INR, tier %s",
            request.destination_city,
            summary.reference_budget,
            summary.tier,
        )

        if runtime.context.mock_mode:
            assembled = build_mock_plan(request, summary)
            source = "mock"
        else:
            try:
                assembled = await assembler.assemble(request, summary)
            except Exception as e:
                logger.error(f"Error generating plan for {request.destination_city}: {e}")
                raise e
            source = assembler.mode

        empty = assembled.sections.empty_sections()
        return {
            "messages": [
                AIMessage(
                    content=f"Budget summary: {summary.model_dump_json()}",
                    name="budget",
                ),
                AIMessage(
                    content=f"Generated plan ({source}); empty sections: {', '.join(empty) or 'none'}",
                    name="generate",
                ),
            ],
            "budget": summary,
            "assembled": assembled,
        }

    return node


def make_geocode_node(resolver: Any):
    """Return the node resolving origin and destination concurrently."""

    async def node(state: State, runtime: Runtime[PlanContext]) -> Dict[str, Any]:
        request = runtime.context.request
        if runtime.context.mock_mode:
            return {
                "messages": [AIMessage(content="Geocoding skipped in mock mode", name="geocode")],
            }

        origin, destination = await asyncio.gather(
            resolver.resolve(request.origin_city),
            resolver.resolve(request.destination_city),
        )
        logger.info(
            "Geocoded %s -> %s, %s -> %s",
            request.origin_city,
            origin,
            request.destination_city,
            destination,
        )
        return {
            "messages": [
                AIMessage(
                    content=(
                        f"Origin resolved: {origin is not None}; "
                        f"destination resolved: {destination is not None}"
                    ),
                    name="geocode",
                )
            ],
            "origin_coordinates": origin,
            "destination_coordinates": destination,
        }

    return node


def make_compose_maps_node(composer: Any):
    """Return the node building the map bundle from resolved coordinates."""

    async def node(state: State, runtime: Runtime[PlanContext]) -> Dict[str, Any]:
        if state.destination_coordinates is None:
            maps = MapBundle()
        else:
            maps = await composer.compose(state.destination_coordinates, state.origin_coordinates)

        return {
            "messages": [
                AIMessage(
                    content=(
                        f"Maps composed: static={maps.static_map_url is not None}, "
                        f"interactive={maps.interactive_map is not None}"
                    ),
                    name="compose_maps",
                )
            ],
            "maps": maps,
        }

    return node
