from typing import Any

from langgraph.graph import END, START, StateGraph

from travelplan.core.assembler import PlanAssembler
from travelplan.core.nodes import make_compose_maps_node, make_generate_node, make_geocode_node
from travelplan.core.schemas import PlanContext, State


def build_plan_graph(
    *,
    assembler: PlanAssembler,
    resolver: Any,
    composer: Any,
) -> Any:
    """Wire the pipeline nodes into a compiled LangGraph state machine.

    ``generate`` and ``geocode`` start together in the first superstep;
    ``compose_maps`` runs once the coordinates are in.
    """

    graph_builder = StateGraph(state_schema=State, context_schema=PlanContext)

    graph_builder.add_node("generate", make_generate_node(assembler))
    graph_builder.add_node("geocode", make_geocode_node(resolver))
    graph_builder.add_node("compose_maps", make_compose_maps_node(composer))

    # Text branch
    graph_builder.add_edge(START, "generate")
    graph_builder.add_edge("generate", END)

    # Map branch, independent of generation
    graph_builder.add_edge(START, "geocode")
    graph_builder.add_edge("geocode", "compose_maps")
    graph_builder.add_edge("compose_maps", END)

    # Single-shot requests, nothing to resume
    return graph_builder.compile()
