"""Routes each generation task through its primary model, then its fallbacks."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, Iterator

from langsmith import traceable

from conceptmap.models.llm_registry import LLMRegistry
from conceptmap.utils.exceptions import LLMError
from conceptmap.utils.logging import get_logger

if TYPE_CHECKING:
    from langchain_core.messages import BaseMessage
    from langchain_openai import ChatOpenAI

logger = get_logger(__name__)


def total_tokens(response: Any) -> int:
    """Total token count from a response's ``usage_metadata``, 0 when absent."""
    usage = getattr(response, "usage_metadata", None)
    if isinstance(usage, dict):
        return int(usage.get("total_tokens") or 0)
    return 0


class ModelRouter:
    """Invokes task models in chain order and records usage on the registry."""

    def __init__(self, registry: LLMRegistry) -> None:
        self._registry = registry

    def _chain(self, task: str) -> Iterator[tuple[int, ChatOpenAI]]:
        yield 0, self._registry.get_model(task)
        for position, model in enumerate(self._registry.get_fallback_chain(task), start=1):
            yield position, model

    @traceable(run_type="chain", name="model_router_invoke")
    async def invoke(self, task: str, messages: list[BaseMessage]) -> object:
        """Return the first successful response for ``task``.

        Raises:
            LLMError: every model in the chain failed. The last underlying
                error is chained as ``__cause__``.
        """
        failures = 0
        last_error: Exception | None = None
        for position, model in self._chain(task):
            start = time.monotonic()
            try:
                response = await model.ainvoke(messages)
            except Exception as exc:
                failures += 1
                last_error = exc
                logger.error(
                    "model_invoke_failed",
                    task=task,
                    position=position,
                    model=model.model_name,
                    error=str(exc),
                )
                continue

            tokens = total_tokens(response)
            self._registry.record_usage(task, tokens)
            log = logger.warning if position else logger.debug
            log(
                "model_fallback_used" if position else "model_invoked",
                task=task,
                model=model.model_name,
                tokens=tokens,
                elapsed_ms=int((time.monotonic() - start) * 1000),
            )
            return response

        raise LLMError(f"All {failures} model(s) failed for task '{task}': {last_error}") from last_error
