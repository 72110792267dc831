"""Unit tests for logging helpers."""

from __future__ import annotations

import structlog

from conceptmap.utils.logging import bound_context


def test_bound_context_binds_and_clears():
    with bound_context(run_id="abc"):
        assert structlog.contextvars.get_contextvars()["run_id"] == "abc"

    assert "run_id" not in structlog.contextvars.get_contextvars()
