"""Text generation client: the one shared handle to the external model service.

Pipeline components depend on the ``TextGenerator`` protocol, never on this
module's concrete client, so tests can pass a scripted stub instead.
"""

from __future__ import annotations

import asyncio
from typing import Any, Protocol, runtime_checkable

from langchain_core.messages import HumanMessage

from conceptmap.config import Settings
from conceptmap.models.model_router import ModelRouter
from conceptmap.utils.exceptions import GenerationError
from conceptmap.utils.logging import get_logger
from conceptmap.utils.rate_limiter import TokenBucketRateLimiter
from conceptmap.utils.retry import async_retry

logger = get_logger(__name__)

DEFAULT_TASK = "concept_extraction"


@runtime_checkable
class TextGenerator(Protocol):
    async def generate(self, prompt: str, *, task: str = DEFAULT_TASK) -> str:
        """Return the raw completion text for ``prompt``.

        Raises GenerationError once transient failures are exhausted.
        """
        ...


def _message_text(response: Any) -> str:
    content = getattr(response, "content", response)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    return "" if content is None else str(content)


class GenerationClient:
    """Bounded, retrying text generation over the model router.

    At most ``max_concurrent`` requests are in flight across every pipeline
    run sharing this client; each attempt also draws from the rate limiter.
    """

    def __init__(
        self,
        router: ModelRouter,
        *,
        max_attempts: int = 3,
        base_delay: float = 2.0,
        max_concurrent: int = 2,
        rate_limiter: TokenBucketRateLimiter | None = None,
    ) -> None:
        self._router = router
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._rate_limiter = rate_limiter
        self._invoke_with_retry = async_retry(
            max_attempts=max_attempts,
            base_delay=base_delay,
        )(self._invoke)

    @classmethod
    def from_settings(cls, settings: Settings, router: ModelRouter) -> GenerationClient:
        return cls(
            router,
            max_attempts=settings.GENERATION_MAX_RETRIES,
            base_delay=settings.GENERATION_RETRY_BASE_DELAY,
            max_concurrent=settings.GENERATION_MAX_CONCURRENT,
            rate_limiter=TokenBucketRateLimiter.per_minute(settings.GENERATION_RATE_LIMIT_PER_MIN),
        )

    async def _invoke(self, task: str, prompt: str) -> Any:
        if self._rate_limiter is not None:
            await self._rate_limiter.acquire()
        return await self._router.invoke(task, [HumanMessage(content=prompt)])

    async def generate(self, prompt: str, *, task: str = DEFAULT_TASK) -> str:
        async with self._semaphore:
            try:
                response = await self._invoke_with_retry(task, prompt)
            except Exception as exc:
                logger.error("generation_failed", task=task, error=str(exc))
                raise GenerationError(f"Text generation failed for task '{task}': {exc}") from exc

        text = _message_text(response)
        logger.debug("generation_complete", task=task, chars=len(text))
        return text
