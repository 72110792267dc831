"""Text cleaning, deduplication, and normalization utilities."""

from __future__ import annotations

import re
from typing import Hashable, Iterable, TypeVar

T = TypeVar("T", bound=Hashable)

_FENCE_LANG_RE = re.compile(r"```json\n?", re.IGNORECASE)
_FENCE_RE = re.compile(r"```\n?")
_WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def strip_code_fences(text: str) -> str:
    """Remove markdown code-fence markers (```json ... ```) from a model response."""
    text = _FENCE_LANG_RE.sub("", text)
    text = _FENCE_RE.sub("", text)
    return text.strip()


def truncate_content(text: str, max_chars: int) -> str:
    """Hard cut to max_chars. Prompts embed the excerpt as-is, so no marker is added."""
    return text[:max_chars]


def unique_in_order(items: Iterable[T]) -> list[T]:
    """Drop repeated items, keeping the first occurrence of each."""
    seen: set[T] = set()
    result: list[T] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result
