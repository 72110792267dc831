"""Pipeline entry point: text in, concept graph (or a structured failure) out."""

from __future__ import annotations

import time
import uuid
from typing import Any

from pydantic import ValidationError

from conceptmap.agent.graph import compile_pipeline_graph
from conceptmap.agent.prompts.diagrams import get_diagram_profile
from conceptmap.config import Settings, get_settings
from conceptmap.models.generation_client import GenerationClient, TextGenerator
from conceptmap.models.llm_registry import LLMRegistry
from conceptmap.models.model_router import ModelRouter
from conceptmap.models.schemas import (
    GraphStats,
    PipelineFailure,
    PipelineOptions,
    PipelineResult,
    PipelineSuccess,
)
from conceptmap.utils.exceptions import PipelineOptionsError
from conceptmap.utils.logging import bound_context, get_logger

logger = get_logger(__name__)


class ConceptMapPipeline:
    """Runs the compiled pipeline graph for one text at a time.

    Instances are safe to share across concurrent ``process`` calls; the
    generation client is the only shared resource and bounds itself.
    """

    def __init__(self, client: TextGenerator, settings: Settings | None = None) -> None:
        self._client = client
        self._settings = settings
        self._graph = compile_pipeline_graph(client)

    def resolve_options(
        self,
        options: PipelineOptions | dict[str, Any] | None = None,
        **overrides: Any,
    ) -> PipelineOptions:
        """Merge settings defaults, ``options`` and keyword overrides, in that order."""
        values: dict[str, Any] = {}
        if self._settings is not None:
            values["refine"] = self._settings.REFINE_BY_DEFAULT
            values["max_iterations"] = self._settings.MAX_REFINEMENT_ITERATIONS

        if isinstance(options, PipelineOptions):
            values.update(options.model_dump(exclude_unset=True))
        elif isinstance(options, dict):
            values.update(options)
        elif options is not None:
            raise PipelineOptionsError(f"Unsupported options type: {type(options).__name__}")
        values.update(overrides)

        try:
            return PipelineOptions.model_validate(values)
        except ValidationError as exc:
            raise PipelineOptionsError(f"Invalid pipeline options: {exc}") from exc

    async def process(
        self,
        text: str,
        options: PipelineOptions | dict[str, Any] | None = None,
        **overrides: Any,
    ) -> PipelineResult:
        """Convert ``text`` into a concept graph.

        Admissibility and insufficiency failures come back as
        ``PipelineFailure``. A ``GenerationError`` during concept or
        relationship extraction propagates to the caller.
        """
        resolved = self.resolve_options(options, **overrides)
        run_id = uuid.uuid4().hex

        with bound_context(run_id=run_id):
            logger.info(
                "pipeline_started",
                chars=len(text) if isinstance(text, str) else 0,
                refine=resolved.refine,
                max_iterations=resolved.max_iterations,
                diagram_type=resolved.diagram_type,
            )
            start = time.monotonic()
            state = await self._graph.ainvoke({"run_id": run_id, "text": text, "options": resolved})
            result = self._to_result(state, resolved)
            logger.info(
                "pipeline_complete",
                success=result.success,
                elapsed_ms=int((time.monotonic() - start) * 1000),
            )
            return result

    @staticmethod
    def _to_result(state: dict[str, Any], options: PipelineOptions) -> PipelineResult:
        diagram_type = get_diagram_profile(options.diagram_type).key

        if state.get("error"):
            return PipelineFailure(
                error=state["error"],
                suggestions=state.get("suggestions", []),
                analysis=state.get("analysis"),
                concepts=state.get("concepts", []),
                diagram_type=diagram_type,
            )

        graph = state["graph"]
        return PipelineSuccess(
            concepts=graph.concepts,
            relationships=graph.relationships,
            nodes=graph.nodes,
            edges=graph.edges,
            refinement_info=state.get("refinement_info"),
            stats=GraphStats(
                concept_count=len(graph.concepts),
                relationship_count=len(graph.relationships),
                isolated_concepts=graph.isolated_concepts,
            ),
            diagram_type=diagram_type,
        )


def build_default_pipeline(settings: Settings | None = None) -> ConceptMapPipeline:
    """Wire registry → router → generation client → pipeline from settings."""
    settings = settings or get_settings()
    registry = LLMRegistry(settings)
    router = ModelRouter(registry)
    client = GenerationClient.from_settings(settings, router)
    return ConceptMapPipeline(client, settings)
