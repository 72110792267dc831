"""Concept Extractor node — derives short concept labels from the source text."""

from __future__ import annotations

import time
from typing import Any

from langgraph.config import get_stream_writer

from conceptmap.agent.base import GenerationAgent
from conceptmap.agent.prompts.concept_extractor import CONCEPT_EXTRACTION_PROMPT
from conceptmap.agent.prompts.diagrams import get_diagram_profile
from conceptmap.utils.json_recovery import recover_json_array
from conceptmap.utils.logging import get_logger
from conceptmap.utils.text_processing import collapse_whitespace, unique_in_order

logger = get_logger(__name__)

MAX_CONCEPTS = 30
# Fewer concepts than this cannot make a useful graph.
MIN_CONCEPTS = 3


def parse_concepts(response: str) -> list[str]:
    """Lenient parse of a concept array. Never raises; unusable input gives []."""
    recovery = recover_json_array(response)
    if recovery.is_empty:
        logger.warning("concept_response_unparseable", chars=len(response or ""))
        return []

    concepts = [
        collapse_whitespace(item)
        for item in recovery.value
        if isinstance(item, str) and item.strip()
    ]
    return unique_in_order(concepts)[:MAX_CONCEPTS]


def insufficiency_failure(concepts: list[str]) -> dict[str, Any]:
    """State updates for a run that found too few concepts to continue."""
    if not concepts:
        return {
            "error": "AI could not extract meaningful concepts from this content",
            "suggestions": [
                "Try rephrasing your content with clearer topics",
                "Add more specific terms related to your subject",
                "Include definitions or explanations of key ideas",
            ],
        }
    return {
        "error": "Not enough concepts found to create a meaningful graph",
        "suggestions": [
            f"Only {len(concepts)} concept(s) found: {', '.join(concepts)}",
            "Add more content with additional topics or ideas",
            "Expand on the existing concepts with more detail",
        ],
    }


class ConceptExtractorAgent(GenerationAgent):
    """Extract a deduplicated list of short concepts in one generation call.

    Generation failures propagate: without concepts the run cannot proceed.
    """

    name = "extract_concepts"
    task = "concept_extraction"

    async def extract(self, text: str, diagram_type: str = "mindmap") -> list[str]:
        profile = get_diagram_profile(diagram_type)
        prompt = CONCEPT_EXTRACTION_PROMPT.format(
            diagram_context=profile.extraction_context,
            diagram_name=profile.name,
            extraction_focus=profile.extraction_focus,
            max_concepts=MAX_CONCEPTS,
            text=text,
        )

        start = time.monotonic()
        response = await self._generate(prompt)
        concepts = parse_concepts(response)

        logger.info(
            "concepts_extracted",
            diagram_type=profile.key,
            count=len(concepts),
            elapsed_ms=int((time.monotonic() - start) * 1000),
        )
        return concepts

    async def run(self, state: dict[str, Any]) -> dict[str, Any]:
        writer = get_stream_writer()
        writer({"node": self.name, "status": "started"})

        options = state["options"]
        concepts = await self.extract(state["text"], options.diagram_type)

        if len(concepts) < MIN_CONCEPTS:
            logger.info("concepts_insufficient", count=len(concepts))
            writer({"node": self.name, "status": "insufficient", "concepts": len(concepts)})
            return {"concepts": concepts, **insufficiency_failure(concepts)}

        writer({"node": self.name, "status": "complete", "concepts": len(concepts)})
        return {"concepts": concepts}
