"""Lenient JSON recovery for model responses.

Models are asked for bare JSON but regularly wrap it in code fences, prefix
it with prose, or truncate it. Recovery runs in three stages and reports
which one produced the value:

    PARSED     the fence-stripped response parsed directly
    RECOVERED  the first bracketed span inside the response parsed
    EMPTY      nothing usable; ``value`` is an empty container
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from conceptmap.utils.text_processing import strip_code_fences

_ARRAY_SPAN_RE = re.compile(r"\[[\s\S]*\]")
_OBJECT_SPAN_RE = re.compile(r"\{[\s\S]*\}")


class RecoveryStatus(str, Enum):
    PARSED = "parsed"
    RECOVERED = "recovered"
    EMPTY = "empty"


@dataclass(frozen=True)
class JsonRecovery:
    status: RecoveryStatus
    value: Any

    @property
    def is_empty(self) -> bool:
        return self.status is RecoveryStatus.EMPTY


def _recover(text: str | None, expected: type, span_re: re.Pattern[str]) -> JsonRecovery:
    if not isinstance(text, str) or not text.strip():
        return JsonRecovery(RecoveryStatus.EMPTY, expected())

    cleaned = strip_code_fences(text)
    try:
        value = json.loads(cleaned)
    except json.JSONDecodeError:
        pass
    else:
        if isinstance(value, expected):
            return JsonRecovery(RecoveryStatus.PARSED, value)

    match = span_re.search(cleaned)
    if match:
        try:
            value = json.loads(match.group(0))
        except json.JSONDecodeError:
            pass
        else:
            if isinstance(value, expected):
                return JsonRecovery(RecoveryStatus.RECOVERED, value)

    return JsonRecovery(RecoveryStatus.EMPTY, expected())


def recover_json_array(text: str | None) -> JsonRecovery:
    """Recover a JSON array from a model response. ``value`` is always a list."""
    return _recover(text, list, _ARRAY_SPAN_RE)


def recover_json_object(text: str | None) -> JsonRecovery:
    """Recover a JSON object from a model response. ``value`` is always a dict."""
    return _recover(text, dict, _OBJECT_SPAN_RE)
