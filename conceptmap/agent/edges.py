"""Conditional edge and routing logic for the pipeline graph."""

from __future__ import annotations

from typing import Any

from langgraph.graph import END

from conceptmap.agent.nodes.refiner import needs_refinement


def route_after_validation(state: dict[str, Any]) -> str:
    """Stop on an admissibility failure, otherwise extract concepts."""
    if state.get("error"):
        return END
    return "extract_concepts"


def route_after_concepts(state: dict[str, Any]) -> str:
    """Stop when too few concepts were found."""
    if state.get("error"):
        return END
    return "extract_relationships"


def route_after_relationships(state: dict[str, Any]) -> str:
    """Enter the refinement loop only when enabled and the graph is large enough."""
    options = state["options"]
    if options.refine and needs_refinement(state.get("concepts", []), state.get("relationships", [])):
        return "refine"
    return "simplify"
