"""Refinement node — merges near-duplicate concepts and reconnects isolated ones.

The loop runs exactly ``max_iterations`` times once entered; it does not stop
early when the graph stops changing, so the number of generation calls per
run is fixed (at most two per iteration).
"""

from __future__ import annotations

import json
import time
from typing import Any

from langgraph.config import get_stream_writer

from conceptmap.agent.base import GenerationAgent
from conceptmap.agent.nodes.relationship_extractor import parse_relationships
from conceptmap.agent.prompts.refiner import ISOLATE_CHECK_PROMPT, MERGE_PROMPT
from conceptmap.models.schemas import (
    RefinementInfo,
    RefinementState,
    Relationship,
    dedupe_relationships,
)
from conceptmap.utils.exceptions import GenerationError
from conceptmap.utils.json_recovery import recover_json_array
from conceptmap.utils.logging import get_logger
from conceptmap.utils.text_processing import collapse_whitespace, truncate_content, unique_in_order

logger = get_logger(__name__)

# Refinement is only worth its cost on larger graphs.
REFINE_CONCEPT_THRESHOLD = 15
REFINE_RELATIONSHIP_THRESHOLD = 30
ISOLATE_TEXT_LIMIT = 3000
DEFAULT_MAX_ITERATIONS = 2


def needs_refinement(concepts: list[str], relationships: list[Relationship]) -> bool:
    return len(concepts) > REFINE_CONCEPT_THRESHOLD or len(relationships) > REFINE_RELATIONSHIP_THRESHOLD


def build_concept_mapping(original: list[str], merged: list[str]) -> dict[str, str]:
    """Best-effort map from every original concept to a surviving concept.

    A concept maps to the first merged concept that contains it, or that it
    contains (case-insensitive). Without such a match it is assigned
    round-robin, ``merged[i % len(merged)]``, which guarantees a target but
    not a meaningful one.
    """
    mapping: dict[str, str] = {}
    for i, concept in enumerate(original):
        lowered = concept.lower()
        closest = next(
            (m for m in merged if lowered in m.lower() or m.lower() in lowered),
            merged[i % len(merged)],
        )
        mapping[concept] = closest
    return mapping


def remap_relationships(
    relationships: list[Relationship],
    mapping: dict[str, str],
    concepts: list[str],
) -> list[Relationship]:
    """Route endpoints through ``mapping``; drop dangling edges and new self-loops."""
    valid = set(concepts)
    remapped: list[Relationship] = []
    for rel in relationships:
        source = mapping.get(rel.source, rel.source)
        target = mapping.get(rel.target, rel.target)
        if source not in valid or target not in valid or source == target:
            continue
        remapped.append(rel.model_copy(update={"source": source, "target": target}))
    return remapped


def find_isolated_concepts(concepts: list[str], relationships: list[Relationship]) -> list[str]:
    connected = {rel.source for rel in relationships} | {rel.target for rel in relationships}
    return [c for c in concepts if c not in connected]


class RefinementAgent(GenerationAgent):
    """Iterative merge + isolate-recovery loop.

    Generation failures are absorbed per step: a failed merge leaves the
    iteration's concepts untouched and a failed recovery adds nothing.
    """

    name = "refine"
    task = "refinement"

    async def merge_similar_concepts(self, concepts: list[str]) -> list[str]:
        """Ask for a refined concept list with synonyms merged.

        Returns ``concepts`` unchanged for small lists, on generation failure,
        or when the response holds no usable concepts.
        """
        if len(concepts) <= REFINE_CONCEPT_THRESHOLD:
            return concepts

        prompt = MERGE_PROMPT.format(concepts_json=json.dumps(concepts, ensure_ascii=False))
        try:
            response = await self._generate(prompt)
        except GenerationError as exc:
            logger.warning("concept_merge_failed", error=str(exc), concepts=len(concepts))
            return concepts

        recovery = recover_json_array(response)
        merged = unique_in_order(
            collapse_whitespace(item)
            for item in recovery.value
            if isinstance(item, str) and item.strip()
        )
        if not merged:
            logger.warning("concept_merge_unparseable", status=recovery.status.value)
            return concepts

        logger.debug("concepts_merged", before=len(concepts), after=len(merged), status=recovery.status.value)
        return merged

    async def find_isolated_relationships(
        self,
        text: str,
        concepts: list[str],
        relationships: list[Relationship],
    ) -> list[Relationship]:
        """Propose relationships for concepts that have none.

        Returned relationships are not checked against the concept list here;
        graph assembly drops any that do not resolve.
        """
        isolated = find_isolated_concepts(concepts, relationships)
        if not isolated:
            return []

        prompt = ISOLATE_CHECK_PROMPT.format(
            isolated_json=json.dumps(isolated, ensure_ascii=False),
            concepts_json=json.dumps(concepts, ensure_ascii=False),
            text=truncate_content(text, ISOLATE_TEXT_LIMIT),
        )
        try:
            response = await self._generate(prompt)
        except GenerationError as exc:
            logger.warning("isolate_recovery_failed", error=str(exc), isolated=len(isolated))
            return []

        found = parse_relationships(response)
        logger.debug("isolate_recovery", isolated=len(isolated), proposed=len(found))
        return found

    async def refine(
        self,
        text: str,
        concepts: list[str],
        relationships: list[Relationship],
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ) -> RefinementState:
        current_concepts = list(concepts)
        current_relationships = list(relationships)
        iterations = 0

        start = time.monotonic()
        while iterations < max_iterations:
            merged = await self.merge_similar_concepts(current_concepts)
            if len(merged) < len(current_concepts):
                mapping = build_concept_mapping(current_concepts, merged)
                current_relationships = remap_relationships(current_relationships, mapping, merged)
                current_concepts = merged

            current_relationships.extend(
                await self.find_isolated_relationships(text, current_concepts, current_relationships)
            )
            iterations += 1

            logger.debug(
                "refinement_iteration",
                iteration=iterations,
                concepts=len(current_concepts),
                relationships=len(current_relationships),
            )

        unique_relationships = dedupe_relationships(current_relationships)

        logger.info(
            "refinement_complete",
            iterations=iterations,
            concepts_before=len(concepts),
            concepts_after=len(current_concepts),
            relationships_before=len(relationships),
            relationships_after=len(unique_relationships),
            elapsed_ms=int((time.monotonic() - start) * 1000),
        )

        return RefinementState(
            concepts=current_concepts,
            relationships=unique_relationships,
            iterations_completed=iterations,
        )

    async def run(self, state: dict[str, Any]) -> dict[str, Any]:
        writer = get_stream_writer()
        writer({"node": self.name, "status": "started"})

        concepts = state["concepts"]
        relationships = state["relationships"]
        refined = await self.refine(
            state["text"],
            concepts,
            relationships,
            state["options"].max_iterations,
        )

        writer({
            "node": self.name,
            "status": "complete",
            "iterations": refined.iterations_completed,
            "concepts": len(refined.concepts),
        })

        return {
            "concepts": refined.concepts,
            "relationships": refined.relationships,
            "refinement_info": RefinementInfo(
                original_concept_count=len(concepts),
                original_relationship_count=len(relationships),
                iterations=refined.iterations_completed,
            ),
        }
