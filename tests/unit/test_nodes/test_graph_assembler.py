"""Unit tests for the Graph Assembler node."""

from __future__ import annotations

import pytest

from conceptmap.agent.nodes.graph_assembler import GraphAssembler, classify_node
from conceptmap.agent.prompts.diagrams import DIAGRAM_PROFILES, get_diagram_profile
from conceptmap.models.schemas import PipelineOptions, Relationship


def _rel(source: str, relation: str, target: str, original: str | None = None) -> Relationship:
    return Relationship(source=source, relation=relation, target=target, original_relation=original)


def test_isolated_concept_is_counted():
    graph = GraphAssembler().assemble(["A", "B", "C"], [_rel("A", "uses", "B")])

    assert graph.isolated_concepts == 1
    assert [n.connections for n in graph.nodes] == [1, 1, 0]


def test_nodes_and_edges_are_indexed():
    graph = GraphAssembler().assemble(
        ["Sun", "Plant", "Sugar"],
        [_rel("Sun", "powers", "Plant", original="provides energy to"), _rel("Plant", "makes", "Sugar")],
    )

    assert [n.id for n in graph.nodes] == ["node_0", "node_1", "node_2"]
    first, second = graph.edges
    assert (first.id, first.source, first.target) == ("edge_0", "node_0", "node_1")
    assert (first.source_index, first.target_index) == (0, 1)
    assert first.label == "powers"
    assert first.original_label == "provides energy to"
    assert (first.source_label, first.target_label) == ("Sun", "Plant")
    assert (second.source, second.target) == ("node_1", "node_2")
    assert graph.isolated_concepts == 0


def test_unresolved_endpoints_and_self_loops_are_dropped():
    graph = GraphAssembler().assemble(
        ["A", "B"],
        [_rel("A", "uses", "Z"), _rel("A", "is", "A"), _rel("A", "uses", "B"), _rel("A", "uses", "B")],
    )

    assert len(graph.edges) == 1
    assert graph.edges[0].label == "uses"
    assert graph.relationships == [_rel("A", "uses", "Z"), _rel("A", "is", "A"), _rel("A", "uses", "B")]


def test_every_edge_resolves_to_a_node():
    concepts = ["A", "B", "C", "D"]
    rels = [_rel("A", "x", "B"), _rel("C", "y", "Q"), _rel("D", "z", "A"), _rel("B", "w", "C")]

    graph = GraphAssembler().assemble(concepts, rels)

    node_ids = {n.id for n in graph.nodes}
    for edge in graph.edges:
        assert edge.source in node_ids and edge.target in node_ids
        assert 0 <= edge.source_index < len(concepts)
        assert 0 <= edge.target_index < len(concepts)


def test_isolated_counts_surviving_edges_only():
    graph = GraphAssembler().assemble(["A", "B", "C"], [_rel("A", "uses", "B"), _rel("C", "uses", "Missing")])

    assert graph.isolated_concepts == 1
    assert graph.nodes[2].connections == 1


def test_connections_include_unresolved_relationships():
    graph = GraphAssembler().assemble(["A", "B", "C"], [_rel("A", "uses", "Z")])

    assert graph.nodes[0].connections == 1
    assert graph.edges == []
    assert graph.isolated_concepts == 3
    assert len(graph.relationships) == 1


def test_repeated_concept_keeps_its_node_and_edges_resolve_to_first():
    graph = GraphAssembler().assemble(["A", "A", "B"], [_rel("A", "uses", "B")])

    assert [n.id for n in graph.nodes] == ["node_0", "node_1", "node_2"]
    assert graph.concepts == ["A", "A", "B"]
    assert (graph.edges[0].source, graph.edges[0].target) == ("node_0", "node_2")
    assert graph.isolated_concepts == 1


@pytest.mark.parametrize("diagram_type, index, connections, expected", [
    ("mindmap", 0, 0, "central"),
    ("mindmap", 3, 3, "branch"),
    ("mindmap", 3, 1, "leaf"),
    ("flowchart", 2, 0, "start"),
    ("flowchart", 2, 1, "end"),
    ("flowchart", 2, 2, "process"),
    ("flowchart", 2, 4, "decision"),
    ("network", 0, 5, "hub"),
    ("network", 0, 1, "endpoint"),
    ("tree", 0, 0, "root"),
    ("tree", 1, 0, "leaf"),
    ("orgchart", 1, 2, "team"),
    ("block", 1, 0, "interface"),
])
def test_classify_node(diagram_type, index, connections, expected):
    assert classify_node(get_diagram_profile(diagram_type), index, connections) == expected


@pytest.mark.parametrize("diagram_type", list(DIAGRAM_PROFILES))
def test_node_types_come_from_profile_vocabulary(diagram_type):
    graph = GraphAssembler(diagram_type).assemble(
        ["A", "B", "C", "D"],
        [_rel("A", "x", "B"), _rel("A", "y", "C"), _rel("A", "z", "D")],
    )

    vocabulary = set(DIAGRAM_PROFILES[diagram_type].node_types)
    assert {n.node_type for n in graph.nodes} <= vocabulary


def test_unknown_diagram_type_uses_mindmap():
    assert GraphAssembler("sunburst").profile.key == "mindmap"


@pytest.mark.asyncio
async def test_run_uses_option_diagram_type(no_stream_writer):
    state = {
        "concepts": ["A", "B"],
        "relationships": [_rel("A", "uses", "B")],
        "options": PipelineOptions(diagram_type="tree"),
    }

    result = await GraphAssembler().run(state)

    assert result["graph"].nodes[0].node_type == "root"
    assert result["graph"].nodes[1].node_type == "child"
