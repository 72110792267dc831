"""Shared test fixtures."""

from __future__ import annotations

from contextlib import ExitStack
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from conceptmap.utils.exceptions import GenerationError

NODE_MODULES = [
    "conceptmap.agent.nodes.validator",
    "conceptmap.agent.nodes.concept_extractor",
    "conceptmap.agent.nodes.relationship_extractor",
    "conceptmap.agent.nodes.refiner",
    "conceptmap.agent.nodes.simplifier",
    "conceptmap.agent.nodes.graph_assembler",
]

SAMPLE_TEXT = (
    "Photosynthesis is the process by which green plants convert light energy into "
    "chemical energy. Chlorophyll inside chloroplasts absorbs sunlight, which drives "
    "the splitting of water molecules and releases oxygen. The Calvin cycle then uses "
    "carbon dioxide from the atmosphere to build glucose, a sugar that stores energy "
    "for plant growth and feeds nearly every food chain on Earth."
)


class StubGenerator:
    """Scripted TextGenerator: pops the next response queued for the task.

    A queued exception instance is raised instead of returned. An empty queue
    raises GenerationError, like an exhausted client.
    """

    def __init__(self, **responses: list) -> None:
        self.responses = {task: list(items) for task, items in responses.items()}
        self.calls: list[tuple[str, str]] = []

    async def generate(self, prompt: str, *, task: str = "concept_extraction") -> str:
        self.calls.append((task, prompt))
        queue = self.responses.get(task)
        if not queue:
            raise GenerationError(f"no scripted response for '{task}'")
        response = queue.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def calls_for(self, task: str) -> list[str]:
        return [prompt for t, prompt in self.calls if t == task]


@pytest.fixture(autouse=True)
def _env_setup(monkeypatch):
    """Set required environment variables for tests."""
    monkeypatch.setenv("OPENROUTER_API_KEY", "test-key")
    monkeypatch.setenv("LANGSMITH_API_KEY", "")
    monkeypatch.setenv("LANGCHAIN_TRACING_V2", "false")


@pytest.fixture
def settings():
    from conceptmap.config import Settings

    return Settings(
        OPENROUTER_API_KEY="test-key",
        LANGSMITH_API_KEY="",
        LANGCHAIN_TRACING_V2=False,
    )


@pytest.fixture
def mock_registry(settings):
    """LLM registry with mocked models."""
    from conceptmap.models.llm_registry import MODEL_CONFIG, LLMRegistry

    with patch.object(LLMRegistry, "__init__", lambda self, s: None):
        registry = LLMRegistry.__new__(LLMRegistry)
        registry._settings = settings
        registry._models = {}
        registry._slug_cache = {}
        registry._call_stats = {}

        mock_model = MagicMock()
        mock_model.ainvoke = AsyncMock(return_value=MagicMock(content="test response", usage_metadata=None))
        mock_model.model_name = "test-model"

        for task in MODEL_CONFIG:
            registry._models[task] = mock_model
            registry._call_stats[task] = {"calls": 0, "tokens": 0}

        registry.get_fallback_chain = MagicMock(return_value=[])
        return registry


@pytest.fixture
def mock_router(mock_registry):
    from conceptmap.models.model_router import ModelRouter

    return ModelRouter(mock_registry)


@pytest.fixture
def make_generator():
    """Factory for StubGenerator: ``make_generator(concept_extraction=[...], ...)``."""
    return StubGenerator


@pytest.fixture
def no_stream_writer():
    """Patch get_stream_writer in every node module so run() works outside a graph."""
    with ExitStack() as stack:
        for module in NODE_MODULES:
            stack.enter_context(patch(f"{module}.get_stream_writer", return_value=lambda x: None))
        yield


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_TEXT


@pytest.fixture
def sample_state() -> dict:
    """A sample pipeline state after relationship extraction."""
    from conceptmap.models.schemas import PipelineOptions, Relationship

    return {
        "run_id": "test-123",
        "text": SAMPLE_TEXT,
        "options": PipelineOptions(),
        "concepts": ["Photosynthesis", "Chlorophyll", "Calvin Cycle", "Glucose"],
        "relationships": [
            Relationship(source="Chlorophyll", relation="enables", target="Photosynthesis"),
            Relationship(source="Calvin Cycle", relation="produces", target="Glucose"),
        ],
    }
