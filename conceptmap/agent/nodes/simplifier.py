"""Simplifier node — condenses verbose concept and relation labels.

Two tiers run here. The model-assisted tier batches verbose labels into one
prompt per kind and degrades to local fallbacks on any failure; the
rule-based tier in ``conceptmap.agent.labels`` then normalises every
relation label for display.
"""

from __future__ import annotations

import json
import time
from typing import Any

from langgraph.config import get_stream_writer

from conceptmap.agent import labels
from conceptmap.agent.base import GenerationAgent
from conceptmap.agent.prompts.simplifier import (
    CONCEPT_SIMPLIFICATION_PROMPT,
    RELATION_SIMPLIFICATION_PROMPT,
)
from conceptmap.models.schemas import LabelMapping, Relationship, SimplifiedGraph
from conceptmap.utils.exceptions import GenerationError
from conceptmap.utils.json_recovery import recover_json_object
from conceptmap.utils.logging import get_logger
from conceptmap.utils.text_processing import collapse_whitespace, unique_in_order

logger = get_logger(__name__)

# Labels above these word counts go to the model.
CONCEPT_VERBOSE_WORDS = 5
RELATION_VERBOSE_WORDS = 3

CONCEPT_MAX_WORDS = 8
RELATION_MAX_WORDS = 3
FALLBACK_CONCEPT_WORDS = 5
FALLBACK_RELATION_WORDS = 2
ACRONYM_MAX_LENGTH = 4

FALLBACK_STOP_WORDS = frozenset({
    "the", "a", "an", "of", "to", "in", "for", "on", "with", "at", "by",
    "from", "that", "which", "is", "are", "was", "were", "be", "been",
    "being", "have", "has", "had", "do", "does", "did", "will", "would",
    "could", "should", "may", "might", "must", "can",
})


def enforce_word_limit(label: str, max_words: int, suffix: str = "...") -> str:
    words = label.split()
    if len(words) <= max_words:
        return " ".join(words)
    return " ".join(words[:max_words]) + suffix


def _title_word(word: str) -> str:
    if word == word.upper() and len(word) <= ACRONYM_MAX_LENGTH:
        return word
    return word[:1].upper() + word[1:].lower()


def format_concept_label(label: str) -> str:
    """Deterministic concept formatter: title case, acronyms kept, 8-word cap."""
    if not label or not label.strip():
        return ""
    titled = " ".join(_title_word(word) for word in label.split())
    return enforce_word_limit(titled, CONCEPT_MAX_WORDS)


def format_relation_label(label: str) -> str:
    return collapse_whitespace(label).lower()


def fallback_simplify_concept(concept: str) -> str:
    words = concept.split()
    kept = [w for w in words if w.lower() not in FALLBACK_STOP_WORDS][:FALLBACK_CONCEPT_WORDS]
    return format_concept_label(" ".join(kept or words[:FALLBACK_CONCEPT_WORDS]))


def fallback_simplify_relation(relation: str) -> str:
    return " ".join(relation.split()[:FALLBACK_RELATION_WORDS]).lower()


def _is_verbose(label: str, threshold: int) -> bool:
    return len(label.split()) > threshold


class SimplificationAgent(GenerationAgent):
    """Model-assisted label simplification. Never raises past its own methods."""

    name = "simplify"
    task = "simplification"

    async def _request_mapping(self, prompt: str, kind: str, count: int) -> dict[str, Any] | None:
        try:
            response = await self._generate(prompt)
        except GenerationError as exc:
            logger.warning("simplification_failed", kind=kind, items=count, error=str(exc))
            return None

        recovery = recover_json_object(response)
        if recovery.is_empty:
            logger.warning("simplification_unparseable", kind=kind, items=count)
            return None
        return recovery.value

    async def simplify_concepts(self, concepts: list[str]) -> LabelMapping:
        mapping = LabelMapping()
        verbose: list[str] = []
        for concept in unique_in_order(concepts):
            if _is_verbose(concept, CONCEPT_VERBOSE_WORDS):
                verbose.append(concept)
            else:
                mapping.set(concept, format_concept_label(concept))

        if not verbose:
            return mapping

        prompt = CONCEPT_SIMPLIFICATION_PROMPT.format(
            max_words=CONCEPT_MAX_WORDS,
            concepts_json=json.dumps(verbose, indent=2, ensure_ascii=False),
        )
        response = await self._request_mapping(prompt, "concepts", len(verbose)) or {}

        from_model = 0
        for concept in verbose:
            simplified = response.get(concept)
            if isinstance(simplified, str) and simplified.strip():
                mapping.set(concept, enforce_word_limit(simplified, CONCEPT_MAX_WORDS))
                from_model += 1
            else:
                mapping.set(concept, fallback_simplify_concept(concept))

        logger.debug("concepts_simplified", verbose=len(verbose), from_model=from_model)
        return mapping

    async def simplify_relation_labels(self, relationships: list[Relationship]) -> LabelMapping:
        mapping = LabelMapping()
        verbose: list[str] = []
        for relation in unique_in_order(rel.relation for rel in relationships):
            if _is_verbose(relation, RELATION_VERBOSE_WORDS):
                verbose.append(relation)
            else:
                mapping.set(relation, format_relation_label(relation))

        if not verbose:
            return mapping

        prompt = RELATION_SIMPLIFICATION_PROMPT.format(
            max_words=RELATION_MAX_WORDS,
            relations_json=json.dumps(verbose, indent=2, ensure_ascii=False),
        )
        response = await self._request_mapping(prompt, "relations", len(verbose)) or {}

        for relation in verbose:
            simplified = response.get(relation)
            if isinstance(simplified, str) and simplified.strip():
                mapping.set(relation, enforce_word_limit(simplified, RELATION_MAX_WORDS, suffix="").lower())
            else:
                mapping.set(relation, fallback_simplify_relation(relation))

        logger.debug("relations_simplified", verbose=len(verbose))
        return mapping

    @staticmethod
    def apply_concept_simplification(concepts: list[str], concept_map: LabelMapping) -> list[str]:
        return [concept_map.get(c) or format_concept_label(c) for c in concepts]

    @staticmethod
    def apply_relationship_simplification(
        relationships: list[Relationship],
        concept_map: LabelMapping,
        relation_map: LabelMapping,
    ) -> list[Relationship]:
        return [
            rel.model_copy(update={
                "source": concept_map.get(rel.source) or format_concept_label(rel.source),
                "target": concept_map.get(rel.target) or format_concept_label(rel.target),
                "relation": relation_map.get(rel.relation) or rel.relation,
                "original_source": rel.source,
                "original_target": rel.target,
                "original_relation": rel.relation,
            })
            for rel in relationships
        ]

    async def simplify_graph(
        self,
        concepts: list[str],
        relationships: list[Relationship],
    ) -> SimplifiedGraph:
        """Simplify both label kinds; concepts that collapse to one label are merged."""
        concept_map = await self.simplify_concepts(concepts)
        relation_map = await self.simplify_relation_labels(relationships)

        simplified_concepts = unique_in_order(
            c for c in self.apply_concept_simplification(concepts, concept_map) if c
        )
        simplified_relationships = self.apply_relationship_simplification(
            relationships, concept_map, relation_map,
        )

        logger.info(
            "graph_simplified",
            concepts_before=len(concepts),
            concepts_after=len(simplified_concepts),
            relationships=len(simplified_relationships),
        )
        return SimplifiedGraph(
            concepts=simplified_concepts,
            relationships=simplified_relationships,
            concept_map=concept_map,
            relation_map=relation_map,
        )

    async def run(self, state: dict[str, Any]) -> dict[str, Any]:
        writer = get_stream_writer()
        writer({"node": self.name, "status": "started"})

        concepts = state["concepts"]
        relationships = state["relationships"]

        start = time.monotonic()
        if state["options"].simplify:
            simplified = await self.simplify_graph(concepts, relationships)
            concepts, relationships = simplified.concepts, simplified.relationships

        # Rule-based labels run regardless; original_relation is their input label.
        relationships = labels.simplify_relationships(relationships)

        logger.debug("labels_simplified", elapsed_ms=int((time.monotonic() - start) * 1000))
        writer({"node": self.name, "status": "complete", "concepts": len(concepts)})
        return {"concepts": concepts, "relationships": relationships}
