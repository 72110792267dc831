"""LangGraph pipeline definition — wires all nodes together with routing."""

from __future__ import annotations

from typing import Any

from langgraph.graph import END, START, StateGraph

from conceptmap.agent.edges import (
    route_after_concepts,
    route_after_relationships,
    route_after_validation,
)
from conceptmap.agent.nodes import (
    ConceptExtractorAgent,
    ContentValidator,
    GraphAssembler,
    RefinementAgent,
    RelationshipExtractorAgent,
    SimplificationAgent,
)
from conceptmap.agent.state import PipelineState
from conceptmap.models.generation_client import TextGenerator


def build_pipeline_graph(client: TextGenerator) -> StateGraph:
    """Build the concept map StateGraph.

    Generation nodes share ``client``; the validator and assembler make no
    model calls.
    """
    validator = ContentValidator()
    concept_extractor = ConceptExtractorAgent(client=client)
    relationship_extractor = RelationshipExtractorAgent(client=client)
    refiner = RefinementAgent(client=client)
    simplifier = SimplificationAgent(client=client)
    assembler = GraphAssembler()

    graph = StateGraph(PipelineState)

    graph.add_node(validator.name, validator.run)
    graph.add_node(concept_extractor.name, concept_extractor.run)
    graph.add_node(relationship_extractor.name, relationship_extractor.run)
    graph.add_node(refiner.name, refiner.run)
    graph.add_node(simplifier.name, simplifier.run)
    graph.add_node(assembler.name, assembler.run)

    graph.add_edge(START, "validate")

    graph.add_conditional_edges(
        "validate",
        route_after_validation,
        {"extract_concepts": "extract_concepts", END: END},
    )
    graph.add_conditional_edges(
        "extract_concepts",
        route_after_concepts,
        {"extract_relationships": "extract_relationships", END: END},
    )
    graph.add_conditional_edges(
        "extract_relationships",
        route_after_relationships,
        {"refine": "refine", "simplify": "simplify"},
    )

    graph.add_edge("refine", "simplify")
    graph.add_edge("simplify", "assemble_graph")
    graph.add_edge("assemble_graph", END)

    return graph


def compile_pipeline_graph(client: TextGenerator, checkpointer: Any = None) -> Any:
    """Build and compile the pipeline graph, optionally with a checkpointer."""
    graph = build_pipeline_graph(client)
    return graph.compile(checkpointer=checkpointer)
