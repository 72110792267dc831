"""Per-task LLM registry via OpenRouter.

All models are accessed through OpenRouter's OpenAI-compatible API. Every
pipeline stage that talks to a model has its own task entry so temperature
and output budget can be tuned per stage.
"""

from __future__ import annotations

from dataclasses import dataclass

from langchain_openai import ChatOpenAI

from conceptmap.config import Settings
from conceptmap.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ModelSpec:
    slug: str
    temperature: float
    purpose: str
    max_tokens: int | None = None


MODEL_CONFIG: dict[str, ModelSpec] = {
    "concept_extraction": ModelSpec(
        slug="google/gemini-2.5-flash",
        temperature=0.3,
        purpose="Key concept extraction from source text",
        max_tokens=8192,
    ),
    "relationship_extraction": ModelSpec(
        slug="google/gemini-2.5-flash",
        temperature=0.3,
        purpose="Labeled relationships between extracted concepts",
        max_tokens=8192,
    ),
    "refinement": ModelSpec(
        slug="google/gemini-2.5-flash",
        temperature=0.3,
        purpose="Synonym merging and isolated concept recovery",
        max_tokens=8192,
    ),
    "simplification": ModelSpec(
        slug="openai/gpt-4.1-mini",
        temperature=0.2,
        purpose="Condensing verbose concept and relation labels",
        max_tokens=4096,
    ),
}

FALLBACK_CHAINS: dict[str, list[str]] = {
    "google/gemini-2.5-flash": ["openai/gpt-4.1-mini", "anthropic/claude-sonnet-4.6"],
    "openai/gpt-4.1-mini": ["google/gemini-2.5-flash", "anthropic/claude-sonnet-4.6"],
}


class LLMRegistry:
    """Manages LLM instances via OpenRouter with fallback support."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._models: dict[str, ChatOpenAI] = {}
        self._slug_cache: dict[str, ChatOpenAI] = {}
        self._call_stats: dict[str, dict] = {}

        for task_name, spec in MODEL_CONFIG.items():
            self._models[task_name] = self._build_model(spec)
            self._call_stats[task_name] = {"calls": 0, "tokens": 0}

    def _build_model(self, spec: ModelSpec) -> ChatOpenAI:
        cache_key = f"{spec.slug}:{spec.temperature}:{spec.max_tokens}"
        if cache_key in self._slug_cache:
            return self._slug_cache[cache_key]

        kwargs: dict = {
            "model": spec.slug,
            "openai_api_key": self._settings.OPENROUTER_API_KEY,
            "openai_api_base": self._settings.OPENROUTER_BASE_URL,
            "temperature": spec.temperature,
            # Retries are owned by GenerationClient
            "max_retries": 0,
            "default_headers": {
                "HTTP-Referer": "https://conceptmap.local",
                "X-Title": "conceptmap",
            },
        }
        if spec.max_tokens is not None:
            kwargs["max_tokens"] = spec.max_tokens

        model = ChatOpenAI(**kwargs)
        self._slug_cache[cache_key] = model
        return model

    def get_model(self, task: str) -> ChatOpenAI:
        """Get the primary model assigned to a task."""
        if task not in self._models:
            raise KeyError(f"No model registered for task '{task}'")
        return self._models[task]

    def get_fallback_chain(self, task: str) -> list[ChatOpenAI]:
        """Return all fallback models for a task, in order."""
        spec = MODEL_CONFIG.get(task)
        if spec is None:
            return []
        chain = FALLBACK_CHAINS.get(spec.slug, [])
        result: list[ChatOpenAI] = []
        for slug in chain:
            fb_spec = ModelSpec(
                slug=slug,
                temperature=spec.temperature,
                max_tokens=spec.max_tokens,
                purpose=f"Fallback for {task}",
            )
            result.append(self._build_model(fb_spec))
        return result

    def record_usage(self, task: str, tokens: int) -> None:
        if task in self._call_stats:
            self._call_stats[task]["calls"] += 1
            self._call_stats[task]["tokens"] += tokens

    @property
    def stats(self) -> dict[str, dict]:
        return {task: dict(values) for task, values in self._call_stats.items()}
