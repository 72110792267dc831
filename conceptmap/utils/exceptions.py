"""Custom exception hierarchy for the concept map pipeline."""

from __future__ import annotations


class ConceptMapError(Exception):
    """Base exception for all concept map errors."""


class LLMError(ConceptMapError):
    """Base for model-related failures."""


class GenerationError(LLMError):
    """Text generation failed permanently (retries and fallbacks exhausted)."""


class PipelineOptionsError(ConceptMapError):
    """Invalid options passed to the pipeline entry point."""
