"""Agent base abstractions for pipeline graph nodes.

BaseAgent is the protocol all nodes implement. GenerationAgent and ToolNode
are the two concrete bases: nodes that call the text generation service and
pure code nodes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from conceptmap.models.generation_client import TextGenerator


class BaseAgent(ABC):
    """Abstract base for pipeline graph nodes. Single Responsibility: execute one step."""

    name: str = ""

    @abstractmethod
    async def run(self, state: dict[str, Any]) -> dict[str, Any]:
        """Process state, return updates."""
        ...


class GenerationAgent(BaseAgent):
    """Base for agents that prompt the text generation service."""

    task: str = ""

    def __init__(self, *, client: TextGenerator) -> None:
        self._client = client

    async def _generate(self, prompt: str) -> str:
        return await self._client.generate(prompt, task=self.task)


class ToolNode(BaseAgent):
    """Base for pure code nodes (no model calls) like the validator and assembler."""
