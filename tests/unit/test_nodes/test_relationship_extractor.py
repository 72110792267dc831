"""Unit tests for the Relationship Extractor node."""

from __future__ import annotations

import json

import pytest

from conceptmap.agent.nodes.relationship_extractor import (
    MAX_RELATIONSHIPS,
    RelationshipExtractorAgent,
    dedupe_concept_pairs,
    parse_relationships,
)
from conceptmap.models.schemas import PipelineOptions, Relationship
from conceptmap.utils.exceptions import GenerationError


def _rel(source: str, relation: str, target: str) -> Relationship:
    return Relationship(source=source, relation=relation, target=target)


def test_parse_relationships_skips_malformed_items():
    response = json.dumps([
        {"source": "A", "relation": "uses", "target": "B"},
        {"source": "A", "relation": "uses"},
        {"source": "", "relation": "has", "target": "C"},
        "A uses C",
        {"source": " B ", "relation": " feeds ", "target": " C "},
    ])

    assert parse_relationships(response) == [_rel("A", "uses", "B"), _rel("B", "feeds", "C")]


def test_parse_relationships_recovers_from_prose():
    response = 'Relationships:\n[{"source": "A", "relation": "uses", "target": "B"}]\n'

    assert parse_relationships(response) == [_rel("A", "uses", "B")]


def test_dedupe_concept_pairs_drops_reverse_pairs_and_self_loops():
    rels = [
        _rel("A", "uses", "B"),
        _rel("b", "supports", "a"),
        _rel("A", "is", "a"),
        _rel("B", "feeds", "C"),
        _rel("A", "needs", "B"),
    ]

    assert dedupe_concept_pairs(rels) == [_rel("A", "uses", "B"), _rel("B", "feeds", "C")]


def test_dedupe_concept_pairs_keeps_edges_back_to_earlier_hub():
    rels = [
        _rel("Hub", "has", "B"),
        _rel("B", "feeds", "C"),
        _rel("C", "reports to", "Hub"),
    ]

    assert dedupe_concept_pairs(rels) == rels


@pytest.mark.asyncio
async def test_extract_caps_relationship_count(make_generator, sample_text):
    items = [{"source": f"C{i}", "relation": "links", "target": f"C{i + 1}"} for i in range(70)]
    agent = RelationshipExtractorAgent(client=make_generator(relationship_extraction=[json.dumps(items)]))

    relationships = await agent.extract(sample_text, [f"C{i}" for i in range(71)])

    assert len(relationships) == MAX_RELATIONSHIPS


@pytest.mark.asyncio
async def test_extract_prompt_lists_concepts(make_generator, sample_text):
    client = make_generator(relationship_extraction=["[]"])
    agent = RelationshipExtractorAgent(client=client)

    relationships = await agent.extract(sample_text, ["Chlorophyll", "Glucose"], diagram_type="tree")

    assert relationships == []
    prompt = client.calls_for("relationship_extraction")[0]
    assert '["Chlorophyll", "Glucose"]' in prompt
    assert "Tree" in prompt


@pytest.mark.asyncio
async def test_extract_propagates_generation_error(make_generator, sample_text):
    agent = RelationshipExtractorAgent(client=make_generator())

    with pytest.raises(GenerationError):
        await agent.extract(sample_text, ["A", "B", "C"])


@pytest.mark.asyncio
async def test_run_returns_relationships(make_generator, no_stream_writer, sample_text):
    response = '[{"source": "A", "relation": "uses", "target": "B"}]'
    agent = RelationshipExtractorAgent(client=make_generator(relationship_extraction=[response]))

    result = await agent.run({"text": sample_text, "concepts": ["A", "B", "C"], "options": PipelineOptions()})

    assert result == {"relationships": [_rel("A", "uses", "B")]}
