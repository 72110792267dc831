"""Unit tests for the model router with fallback logic."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.messages import HumanMessage

from conceptmap.models.model_router import ModelRouter, total_tokens
from conceptmap.utils.exceptions import LLMError


@pytest.mark.asyncio
async def test_router_invokes_primary_model(mock_registry):
    mock_result = MagicMock()
    mock_result.content = "test"
    mock_result.usage_metadata = {"total_tokens": 42}
    mock_registry.get_model("concept_extraction").ainvoke = AsyncMock(return_value=mock_result)

    router = ModelRouter(mock_registry)
    result = await router.invoke("concept_extraction", [HumanMessage(content="test")])

    assert result is mock_result
    assert mock_registry.stats["concept_extraction"] == {"calls": 1, "tokens": 42}


@pytest.mark.asyncio
async def test_router_falls_back_on_failure(mock_registry):
    mock_registry.get_model("refinement").ainvoke = AsyncMock(side_effect=RuntimeError("timeout"))

    fallback_result = MagicMock()
    fallback_result.content = "fallback response"
    fallback_result.usage_metadata = None

    fallback_model = MagicMock()
    fallback_model.ainvoke = AsyncMock(return_value=fallback_result)
    fallback_model.model_name = "fallback"
    mock_registry.get_fallback_chain = MagicMock(return_value=[fallback_model])

    router = ModelRouter(mock_registry)
    result = await router.invoke("refinement", [HumanMessage(content="test")])

    assert result is fallback_result
    assert mock_registry.stats["refinement"] == {"calls": 1, "tokens": 0}


@pytest.mark.asyncio
async def test_router_raises_when_all_models_fail(mock_registry):
    mock_registry.get_model("simplification").ainvoke = AsyncMock(side_effect=RuntimeError("down"))

    router = ModelRouter(mock_registry)

    with pytest.raises(LLMError, match="All 1 model") as exc_info:
        await router.invoke("simplification", [HumanMessage(content="test")])

    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_total_tokens_reads_usage_metadata():
    assert total_tokens(MagicMock(usage_metadata={"total_tokens": 7})) == 7
    assert total_tokens(MagicMock(usage_metadata=None)) == 0
    assert total_tokens(object()) == 0
