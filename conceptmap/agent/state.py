"""Pipeline state schema for the LangGraph concept map graph."""

from __future__ import annotations

from typing import TypedDict

from conceptmap.models.schemas import (
    Graph,
    PipelineOptions,
    RefinementInfo,
    Relationship,
    ValidationAnalysis,
    ValidationResult,
)


class PipelineState(TypedDict, total=False):
    """State for one pipeline run.

    Every node returns a partial update that overwrites the named keys; no
    reducers are needed because each stage replaces its predecessor's output
    wholesale.
    """

    # ── Input (set once at start) ──
    run_id: str
    text: str
    options: PipelineOptions

    # ── Stage outputs ──
    validation: ValidationResult
    concepts: list[str]
    relationships: list[Relationship]
    refinement_info: RefinementInfo | None
    graph: Graph

    # ── Early exit (set by the validator or the concept extractor) ──
    error: str | None
    suggestions: list[str]
    analysis: ValidationAnalysis | None
