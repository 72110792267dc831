"""Relationship Extractor node — labeled, directed edges between extracted concepts."""

from __future__ import annotations

import json
import time
from typing import Any

from langgraph.config import get_stream_writer

from conceptmap.agent.base import GenerationAgent
from conceptmap.agent.prompts.diagrams import get_diagram_profile
from conceptmap.agent.prompts.relationship_extractor import RELATIONSHIP_EXTRACTION_PROMPT
from conceptmap.models.schemas import Relationship, relationship_from_raw
from conceptmap.utils.json_recovery import recover_json_array
from conceptmap.utils.logging import get_logger

logger = get_logger(__name__)

MAX_RELATIONSHIPS = 50


def dedupe_concept_pairs(relationships: list[Relationship]) -> list[Relationship]:
    """Keep the first relationship per unordered concept pair and drop self-loops.

    Endpoints are compared case-insensitively. Edges pointing back to a
    concept that was listed earlier as a source are kept: whether such an
    edge counts as "backward" depends only on the order the model happened
    to list relationships in, and it would cut links into hub concepts.
    Two-node cycles are already removed by the pair check.
    """
    seen: set[tuple[str, str]] = set()
    result: list[Relationship] = []
    for rel in relationships:
        source = rel.source.lower()
        target = rel.target.lower()
        if source == target:
            continue
        if (source, target) in seen or (target, source) in seen:
            continue
        seen.add((source, target))
        result.append(rel)
    return result


def parse_relationships(response: str) -> list[Relationship]:
    """Lenient parse of a relationship array. Never raises; unusable input gives []."""
    recovery = recover_json_array(response)
    if recovery.is_empty:
        logger.warning("relationship_response_unparseable", chars=len(response or ""))
        return []

    parsed = [rel for rel in map(relationship_from_raw, recovery.value) if rel is not None]
    dropped = len(recovery.value) - len(parsed)
    if dropped:
        logger.debug("relationship_items_dropped", dropped=dropped)
    return parsed


class RelationshipExtractorAgent(GenerationAgent):
    """Extract relationships supported by the text between the given concepts.

    Generation failures propagate, as for concept extraction.
    """

    name = "extract_relationships"
    task = "relationship_extraction"

    async def extract(
        self,
        text: str,
        concepts: list[str],
        diagram_type: str = "mindmap",
    ) -> list[Relationship]:
        profile = get_diagram_profile(diagram_type)
        prompt = RELATIONSHIP_EXTRACTION_PROMPT.format(
            relationship_context=profile.relationship_context,
            diagram_name=profile.name,
            structure=profile.structure,
            preferred_relations=", ".join(profile.preferred_relations),
            max_relationships=MAX_RELATIONSHIPS,
            concepts_json=json.dumps(concepts, ensure_ascii=False),
            text=text,
        )

        start = time.monotonic()
        response = await self._generate(prompt)
        found = parse_relationships(response)
        relationships = dedupe_concept_pairs(found)[:MAX_RELATIONSHIPS]

        logger.info(
            "relationships_extracted",
            diagram_type=profile.key,
            found=len(found),
            kept=len(relationships),
            elapsed_ms=int((time.monotonic() - start) * 1000),
        )
        return relationships

    async def run(self, state: dict[str, Any]) -> dict[str, Any]:
        writer = get_stream_writer()
        writer({"node": self.name, "status": "started"})

        options = state["options"]
        relationships = await self.extract(state["text"], state["concepts"], options.diagram_type)

        writer({"node": self.name, "status": "complete", "relationships": len(relationships)})
        return {"relationships": relationships}
