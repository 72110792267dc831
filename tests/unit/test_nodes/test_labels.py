"""Unit tests for the rule-based relation label simplifier."""

from __future__ import annotations

import pytest

from conceptmap.agent.labels import (
    MAX_LABEL_LENGTH,
    RELATION_MAPPINGS,
    simplify_edges,
    simplify_label,
    simplify_relationships,
)
from conceptmap.models.schemas import Edge, Relationship

SAMPLE_RELATIONS = [
    "is_associated_with",
    "is associated with",
    "IS_PART_OF",
    "depends on",
    "leads to",
    "is_composed_of",
    "is_based_on",
    "utilizes",
    "is responsible for managing",
    "the process of converting data into information",
    "communicates_with",
    "relates to the",
    "the",
    "feeds",
    "  Uses   ",
    "is a necessary precondition for",
]


@pytest.mark.parametrize("label, expected", [
    ("is_associated_with", "links"),
    ("is associated with", "links"),
    ("IS_PART_OF", "in"),
    ("utilizes", "uses"),
    ("depends on", "needs"),
    ("leads to", "leads"),
    ("is_composed_of", "has"),
    ("feeds", "feeds"),
    ("  Uses   ", "uses"),
])
def test_known_relations(label, expected):
    assert simplify_label(label) == expected


def test_partial_match_replaces_first_key():
    # "utilizes" is replaced, "the" is noise
    assert simplify_label("utilizes the") == "uses"


def test_noise_only_label_keeps_first_word():
    assert simplify_label("the") == "the"


def test_long_label_is_truncated():
    result = simplify_label("photosynthesizes energetically")

    assert result == "photosyn.."
    assert len(result) == MAX_LABEL_LENGTH


@pytest.mark.parametrize("label", [None, 5, "", "   "])
def test_non_string_or_blank_is_empty(label):
    assert simplify_label(label) == ""


@pytest.mark.parametrize("label", SAMPLE_RELATIONS + list(RELATION_MAPPINGS))
def test_output_never_exceeds_max_length(label):
    assert len(simplify_label(label)) <= MAX_LABEL_LENGTH


@pytest.mark.parametrize("label", SAMPLE_RELATIONS + list(RELATION_MAPPINGS))
def test_simplify_label_is_idempotent(label):
    once = simplify_label(label)

    assert simplify_label(once) == once


def test_simplify_relationships_keeps_original_relation():
    rels = [
        Relationship(source="A", relation="is_associated_with", target="B"),
        Relationship(source="B", relation="Depends On", target="C"),
    ]

    simplified = simplify_relationships(rels)

    assert [r.relation for r in simplified] == ["links", "needs"]
    assert [r.original_relation for r in simplified] == ["is_associated_with", "Depends On"]
    assert simplified[0].source == "A" and simplified[0].target == "B"


def test_simplify_edges_keeps_original_label():
    edge = Edge(
        id="edge_0",
        source="node_0",
        target="node_1",
        source_index=0,
        target_index=1,
        label="is_part_of",
        source_label="Wheel",
        target_label="Car",
    )

    (simplified,) = simplify_edges([edge])

    assert simplified.label == "in"
    assert simplified.original_label == "is_part_of"
