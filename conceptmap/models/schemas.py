"""Pydantic models for data flowing through the concept map pipeline."""

from __future__ import annotations

from typing import Any, Iterator, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


# ── Graph primitives ─────────────────────────────────────────────────


class Relationship(BaseModel):
    """Directed, labeled edge between two concepts.

    ``original_*`` fields carry the pre-simplification values so a display
    label can always be traced back to what the model produced.
    """

    model_config = ConfigDict(frozen=True)

    source: str
    relation: str
    target: str
    original_relation: str | None = None
    original_source: str | None = None
    original_target: str | None = None

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.source, self.relation, self.target)


class Node(BaseModel):
    id: str
    label: str
    connections: int = 0
    node_type: str = ""


class Edge(BaseModel):
    id: str
    source: str
    target: str
    source_index: int
    target_index: int
    label: str
    original_label: str | None = None
    source_label: str
    target_label: str


class Graph(BaseModel):
    concepts: list[str] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)
    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)
    isolated_concepts: int = 0


# ── Validation ───────────────────────────────────────────────────────


class ValidationAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    char_count: int | None = None
    word_count: int | None = None
    unique_meaningful_words: int | None = None
    estimated_concepts: int | None = None
    quality: int | None = None
    # Populated on failure only
    min_required: int | None = None
    pattern: str | None = None
    content_type: str | None = None


class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_valid: bool
    error: str | None = None
    suggestions: list[str] = Field(default_factory=list)
    analysis: ValidationAnalysis = Field(default_factory=ValidationAnalysis)


# ── Refinement ───────────────────────────────────────────────────────


class RefinementState(BaseModel):
    concepts: list[str]
    relationships: list[Relationship]
    iterations_completed: int = 0


class RefinementInfo(BaseModel):
    original_concept_count: int
    original_relationship_count: int
    iterations: int


# ── Simplification ───────────────────────────────────────────────────


class LabelMapping:
    """Ordered original → simplified label pairs with unique keys.

    Callers only look labels up; insertion order is kept for stable logging
    and serialization.
    """

    def __init__(self, pairs: dict[str, str] | None = None) -> None:
        self._pairs: dict[str, str] = dict(pairs or {})

    def set(self, original: str, simplified: str) -> None:
        self._pairs[original] = simplified

    def get(self, original: str, default: str | None = None) -> str | None:
        return self._pairs.get(original, default)

    def __getitem__(self, original: str) -> str:
        return self._pairs[original]

    def __contains__(self, original: object) -> bool:
        return original in self._pairs

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[str]:
        return iter(self._pairs)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, LabelMapping):
            return self._pairs == other._pairs
        if isinstance(other, dict):
            return self._pairs == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"LabelMapping({self._pairs!r})"

    def items(self) -> list[tuple[str, str]]:
        return list(self._pairs.items())

    def to_dict(self) -> dict[str, str]:
        return dict(self._pairs)


class SimplifiedGraph(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    concepts: list[str]
    relationships: list[Relationship]
    concept_map: LabelMapping
    relation_map: LabelMapping


# ── Pipeline I/O ─────────────────────────────────────────────────────


class PipelineOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    refine: bool = True
    # 0 runs the refine node without any merge or recovery passes
    max_iterations: int = Field(default=2, ge=0)
    diagram_type: str = "mindmap"
    # Model-assisted label simplification; rule-based relation labels always run
    simplify: bool = True


class GraphStats(BaseModel):
    concept_count: int
    relationship_count: int
    isolated_concepts: int


class PipelineFailure(BaseModel):
    success: Literal[False] = False
    error: str
    suggestions: list[str] = Field(default_factory=list)
    analysis: ValidationAnalysis | None = None
    concepts: list[str] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)
    diagram_type: str = "mindmap"


class PipelineSuccess(BaseModel):
    success: Literal[True] = True
    concepts: list[str]
    relationships: list[Relationship]
    nodes: list[Node]
    edges: list[Edge]
    refinement_info: RefinementInfo | None = None
    stats: GraphStats
    diagram_type: str = "mindmap"


PipelineResult = Union[PipelineSuccess, PipelineFailure]


def relationship_from_raw(item: Any) -> Relationship | None:
    """Build a Relationship from one element of a model's JSON array.

    Returns None for anything that is not an object with non-empty string
    ``source``, ``relation`` and ``target``.
    """
    if not isinstance(item, dict):
        return None
    fields = {}
    for name in ("source", "relation", "target"):
        value = item.get(name)
        if not isinstance(value, str) or not value.strip():
            return None
        fields[name] = value.strip()
    return Relationship(**fields)


def dedupe_relationships(relationships: list[Relationship]) -> list[Relationship]:
    """Drop exact (source, relation, target) repeats, keeping the first occurrence."""
    seen: set[tuple[str, str, str]] = set()
    result: list[Relationship] = []
    for rel in relationships:
        if rel.key not in seen:
            seen.add(rel.key)
            result.append(rel)
    return result
