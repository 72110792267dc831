"""Rule-based relation label simplifier.

Turns verbose relation strings into short, display-safe edge labels without
calling a model. Pure and synchronous; never raises.
"""

from __future__ import annotations

from typing import Any

from conceptmap.models.schemas import Edge, Relationship

MAX_LABEL_LENGTH = 10
# Bound on re-normalisation passes; a mapped value can itself be a key.
MAX_PASSES = 4

NOISE_WORDS = frozenset({
    "the", "a", "an", "of", "to", "in", "for", "on", "with", "at", "by",
    "from", "that", "which", "who", "whom", "this", "these", "those", "it",
    "its", "process", "id", "process_id", "data", "information", "thing",
    "stuff", "basically", "actually", "really", "very", "just", "simply",
    "essentially",
})

# Declaration order matters: the partial-match scan takes the first key found.
RELATION_MAPPINGS: dict[str, str] = {
    # Verbose to concise
    "is_a": "is",
    "is_an": "is",
    "is_the": "is",
    "are_the": "are",
    "has_a": "has",
    "has_an": "has",
    "has_the": "has",
    "is_part_of": "part of",
    "is_type_of": "type of",
    "is_kind_of": "kind of",
    "is_related_to": "relates",
    "is_associated_with": "links",
    "is_connected_to": "connects",
    "is_linked_to": "links",
    "belongs_to": "belongs",
    "depends_on": "needs",
    "relies_on": "needs",
    "leads_to": "leads",
    "results_in": "causes",
    "consists_of": "contains",
    "is_composed_of": "contains",
    "is_made_of": "made of",
    "is_created_by": "by",
    "is_used_by": "used by",
    "is_defined_by": "defined by",
    "is_described_by": "described by",
    "is_based_on": "based on",
    "is_derived_from": "from",
    "is_influenced_by": "influenced by",
    "is_affected_by": "affected by",
    "is_required_by": "required by",
    "is_needed_by": "needed by",
    "is_provided_by": "by",
    "is_supported_by": "supported by",
    "is_enabled_by": "enabled by",
    "is_managed_by": "managed by",
    "is_controlled_by": "controlled by",
    "is_owned_by": "owned by",
    "can_be": "can be",
    "may_be": "may be",
    "must_be": "must be",
    "should_be": "should be",
    "will_be": "will be",
    "would_be": "would be",
    "could_be": "could be",
    "might_be": "might be",
    # Technical terms
    "utilizes": "uses",
    "implements": "uses",
    "employs": "uses",
    "leverages": "uses",
    "incorporates": "includes",
    "encompasses": "includes",
    "comprises": "includes",
    "facilitates": "enables",
    "enables": "enables",
    "allows": "enables",
    "permits": "allows",
    "provides": "gives",
    "supplies": "gives",
    "delivers": "gives",
    "generates": "creates",
    "produces": "creates",
    "constructs": "builds",
    "establishes": "creates",
    "initiates": "starts",
    "commences": "starts",
    "terminates": "ends",
    "concludes": "ends",
    "completes": "ends",
    "modifies": "changes",
    "alters": "changes",
    "transforms": "changes",
    "converts": "changes",
    "requires": "needs",
    "necessitates": "needs",
    "demands": "needs",
    "contains": "has",
    "includes": "has",
    "possesses": "has",
    "exhibits": "shows",
    "demonstrates": "shows",
    "displays": "shows",
    "indicates": "shows",
    "represents": "is",
    "denotes": "means",
    "signifies": "means",
    "determines": "sets",
    "specifies": "defines",
    "describes": "about",
    "explains": "about",
    "illustrates": "shows",
    "interacts_with": "with",
    "communicates_with": "with",
    "connects_to": "to",
    "links_to": "to",
    "refers_to": "to",
    "points_to": "to",
    "maps_to": "to",
    "corresponds_to": "matches",
    "correlates_with": "matches",
    "relates_to": "relates",
    "pertains_to": "about",
    "applies_to": "for",
    "extends": "extends",
    "inherits": "from",
    "derives": "from",
    "originates": "from",
    "stems_from": "from",
    "arises_from": "from",
    "follows": "after",
    "precedes": "before",
    "triggers": "causes",
    "invokes": "calls",
    "calls": "calls",
    "executes": "runs",
    "performs": "does",
    "handles": "manages",
    "processes": "handles",
    "manages": "manages",
    "controls": "controls",
    "regulates": "controls",
    "governs": "controls",
    "oversees": "manages",
    "supervises": "manages",
    "monitors": "watches",
    "tracks": "tracks",
    "observes": "watches",
    "analyzes": "analyzes",
    "evaluates": "checks",
    "assesses": "checks",
    "validates": "checks",
    "verifies": "checks",
    "confirms": "confirms",
    "ensures": "ensures",
    "guarantees": "ensures",
    "maintains": "keeps",
    "preserves": "keeps",
    "retains": "keeps",
    "stores": "stores",
    "saves": "saves",
    "retrieves": "gets",
    "fetches": "gets",
    "obtains": "gets",
    "acquires": "gets",
    "accesses": "uses",
    "references": "refs",
    "influences": "affects",
    "impacts": "affects",
    "affects": "affects",
    "supports": "helps",
    "assists": "helps",
    "aids": "helps",
    "enhances": "boosts",
    "improves": "boosts",
    "optimizes": "boosts",
    "increases": "grows",
    "decreases": "cuts",
    "reduces": "cuts",
    "minimizes": "cuts",
    "maximizes": "grows",
    "expands": "grows",
    "limits": "caps",
    "restricts": "caps",
    "constrains": "caps",
    "leads to": "causes",
    "part of": "in",
    "belongs to": "in",
    "connects to": "links",
    "outputs to": "feeds",
    "inputs from": "gets",
    "depends on": "needs",
}

_SPACED_MAPPINGS: list[tuple[str, str]] = [
    (key.replace("_", " "), value) for key, value in RELATION_MAPPINGS.items()
]


def _format_label(label: str) -> str:
    formatted = label.strip()
    if len(formatted) > MAX_LABEL_LENGTH:
        formatted = formatted[: MAX_LABEL_LENGTH - 2] + ".."
    return formatted


def _simplify_once(label: str) -> str:
    simplified = " ".join(label.lower().replace("_", " ").split())

    direct = RELATION_MAPPINGS.get(simplified.replace(" ", "_"))
    if direct:
        return _format_label(direct)

    for phrase, value in _SPACED_MAPPINGS:
        if phrase in simplified:
            simplified = simplified.replace(phrase, value, 1)
            break

    words = simplified.split(" ")
    filtered = " ".join(w for w in words if w not in NOISE_WORDS)
    if not filtered.strip():
        filtered = words[0] or label

    return _format_label(filtered)


def simplify_label(label: Any) -> str:
    """Simplify a relation label for display.

    Lower-cases, maps verbose phrasings through ``RELATION_MAPPINGS``, strips
    noise words and truncates to ``MAX_LABEL_LENGTH`` characters. The result
    is re-simplified until stable, so ``simplify_label`` is idempotent for
    any label whose mapping chain settles within ``MAX_PASSES``.
    """
    if not isinstance(label, str) or not label.strip():
        return ""

    current = _simplify_once(label)
    for _ in range(MAX_PASSES - 1):
        following = _simplify_once(current)
        if following == current:
            break
        current = following
    return current


def simplify_relationships(relationships: list[Relationship]) -> list[Relationship]:
    """Simplify every relation label, keeping the input label as ``original_relation``."""
    return [
        rel.model_copy(update={
            "relation": simplify_label(rel.relation),
            "original_relation": rel.relation,
        })
        for rel in relationships
    ]


def simplify_edges(edges: list[Edge]) -> list[Edge]:
    """Simplify assembled edge labels, keeping the input label as ``original_label``."""
    return [
        edge.model_copy(update={"label": simplify_label(edge.label), "original_label": edge.label})
        for edge in edges
    ]
