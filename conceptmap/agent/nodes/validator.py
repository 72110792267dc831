"""Content Validator node — admissibility gate before any model call (no LLM)."""

from __future__ import annotations

import math
import re
from typing import Any

from langgraph.config import get_stream_writer

from conceptmap.agent.base import ToolNode
from conceptmap.models.schemas import ValidationAnalysis, ValidationResult
from conceptmap.utils.logging import get_logger

logger = get_logger(__name__)

MIN_CHAR_COUNT = 100
MIN_WORD_COUNT = 15
MIN_UNIQUE_WORDS = 10
MAX_ESTIMATED_CONCEPTS = 30

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "is", "are", "was", "were", "be", "been",
    "being", "have", "has", "had", "do", "does", "did", "will", "would",
    "could", "should", "may", "might", "must", "shall", "can", "need",
    "it", "its", "this", "that", "these", "those", "i", "you", "he", "she",
    "we", "they", "what", "which", "who", "whom", "when", "where", "why",
    "how", "all", "each", "every", "both", "few", "more", "most", "other",
    "some", "such", "no", "not", "only", "own", "same", "so", "than", "too",
    "very", "just", "also", "now", "here", "there", "then", "once", "if",
    "as", "into", "about", "up", "down", "out", "off", "over", "under",
})

_WORD_RE = re.compile(r"[a-z]+", re.IGNORECASE)
_NO_LETTERS_RE = re.compile(r"[^a-zA-Z]*")
_REPEATED_CHAR_RE = re.compile(r"(.)\1{5,}")
_PLACEHOLDER_RE = re.compile(r"asdf|qwerty|zxcv|lorem ipsum", re.IGNORECASE)
_NUMBERS_ONLY_RE = re.compile(r"[\d\s.,\-+*/=%]+")
_URL_RE = re.compile(r"https?://\S+", re.IGNORECASE)
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\n+")

_NONSENSE_SUGGESTIONS = [
    "Please provide meaningful content about a topic",
    "Paste an article, notes, or write about a subject",
    'Avoid placeholder text like "lorem ipsum"',
]


def _looks_like_nonsense(text: str) -> bool:
    return bool(
        _NO_LETTERS_RE.fullmatch(text)
        or _REPEATED_CHAR_RE.search(text)
        or _PLACEHOLDER_RE.search(text)
    )


def _is_urls_only(text: str) -> bool:
    tokens = text.split()
    return bool(tokens) and all(_URL_RE.fullmatch(token) for token in tokens)


def _failure(error: str, suggestions: list[str], **analysis: Any) -> ValidationResult:
    return ValidationResult(
        is_valid=False,
        error=error,
        suggestions=suggestions,
        analysis=ValidationAnalysis(**analysis),
    )


def calculate_quality_score(text: str, word_count: int, unique_words: int) -> int:
    """Content quality score in [0, 100] from four capped sub-scores."""
    score = 0

    # Length (max 30)
    score += min(30, word_count // 10)

    # Vocabulary diversity (max 30)
    diversity_ratio = unique_words / word_count if word_count else 0.0
    score += min(30, math.floor(diversity_ratio * 100))

    # Sentence structure (max 20)
    sentences = [s for s in _SENTENCE_SPLIT_RE.split(text) if len(s.strip()) > 10]
    score += min(20, len(sentences) * 2)

    # Paragraphs (max 20)
    paragraphs = [p for p in _PARAGRAPH_SPLIT_RE.split(text) if p.strip()]
    score += min(20, len(paragraphs) * 5)

    return min(100, score)


def validate_content(text: Any) -> ValidationResult:
    """Check that text can yield a meaningful concept graph.

    Checks run in order and the first failing one decides the result.
    """
    if not isinstance(text, str) or not text:
        return _failure(
            f"No content provided (minimum length is {MIN_CHAR_COUNT} characters)",
            ["Please enter some text or upload a document"],
            word_count=0,
            char_count=0,
        )

    trimmed = text.strip()

    if len(trimmed) < MIN_CHAR_COUNT:
        if _PLACEHOLDER_RE.search(trimmed) or _REPEATED_CHAR_RE.search(trimmed):
            return _failure(
                "Content appears to be placeholder or random text, and is below "
                f"the minimum length of {MIN_CHAR_COUNT} characters",
                _NONSENSE_SUGGESTIONS,
                char_count=len(trimmed),
                min_required=MIN_CHAR_COUNT,
                pattern="nonsense_detected",
            )
        return _failure(
            "Content is too short to generate a meaningful concept map "
            f"(minimum length is {MIN_CHAR_COUNT} characters)",
            [
                f"Please provide at least {MIN_CHAR_COUNT} characters of content",
                "Try adding more details, context, or explanations",
                "Consider expanding on the main topic with examples",
            ],
            char_count=len(trimmed),
            min_required=MIN_CHAR_COUNT,
        )

    words = _WORD_RE.findall(trimmed.lower())
    word_count = len(words)

    if word_count < MIN_WORD_COUNT:
        return _failure(
            "Not enough words to extract meaningful concepts",
            [
                f"Please provide at least {MIN_WORD_COUNT} words",
                "Add more descriptive content about your topic",
                "Include related concepts or subtopics",
            ],
            word_count=word_count,
            min_required=MIN_WORD_COUNT,
        )

    unique_meaningful = {w for w in words if w not in STOP_WORDS and len(w) > 2}

    if len(unique_meaningful) < MIN_UNIQUE_WORDS:
        return _failure(
            "Content lacks variety - too few unique concepts",
            [
                "Add more diverse topics or concepts",
                "Include different aspects of your subject",
                "Avoid repeating the same words too often",
            ],
            unique_meaningful_words=len(unique_meaningful),
            min_required=MIN_UNIQUE_WORDS,
            word_count=word_count,
        )

    if _looks_like_nonsense(trimmed):
        return _failure(
            "Content appears to be placeholder or random text",
            _NONSENSE_SUGGESTIONS,
            pattern="nonsense_detected",
        )

    if _NUMBERS_ONLY_RE.fullmatch(trimmed):
        return _failure(
            "Content contains only numbers",
            [
                "Add text descriptions to explain the numbers",
                "Include context about what the data represents",
                "Provide labels or categories for the values",
            ],
            content_type="numbers_only",
        )

    if _is_urls_only(trimmed):
        return _failure(
            "Content contains only URLs",
            [
                "Copy the actual content from those web pages",
                "Add descriptions of what each link contains",
                "Provide context about the linked resources",
            ],
            content_type="urls_only",
        )

    unique_count = len(unique_meaningful)
    analysis = ValidationAnalysis(
        char_count=len(trimmed),
        word_count=word_count,
        unique_meaningful_words=unique_count,
        estimated_concepts=min(MAX_ESTIMATED_CONCEPTS, unique_count // 2),
        quality=calculate_quality_score(trimmed, word_count, unique_count),
    )

    suggestions: list[str] = []
    if analysis.quality < 50:
        suggestions.append("Consider adding more detailed explanations for better results")
    if analysis.estimated_concepts < 5:
        suggestions.append("Adding more content may produce a richer concept map")

    return ValidationResult(is_valid=True, suggestions=suggestions, analysis=analysis)


def format_validation_error(result: ValidationResult) -> str | None:
    """Render a failed validation as a user-facing message; None when valid."""
    if result.is_valid:
        return None

    lines = [result.error or "Content validation failed"]
    if result.suggestions:
        lines.append("")
        lines.append("Suggestions:")
        lines.extend(f"- {s}" for s in result.suggestions)
    return "\n".join(lines)


class ContentValidator(ToolNode):
    """Admissibility gate. Failure is terminal for the run and never retried."""

    name = "validate"

    def validate(self, text: Any) -> ValidationResult:
        return validate_content(text)

    async def run(self, state: dict[str, Any]) -> dict[str, Any]:
        writer = get_stream_writer()
        writer({"node": self.name, "status": "started"})

        result = self.validate(state.get("text"))

        if result.is_valid:
            logger.info(
                "content_validated",
                quality=result.analysis.quality,
                estimated_concepts=result.analysis.estimated_concepts,
            )
            writer({"node": self.name, "status": "complete", "quality": result.analysis.quality})
            return {"validation": result}

        logger.info(
            "content_rejected",
            error=result.error,
            analysis=result.analysis.model_dump(exclude_none=True),
        )
        writer({"node": self.name, "status": "rejected", "message": format_validation_error(result)})
        return {
            "validation": result,
            "error": result.error,
            "suggestions": list(result.suggestions),
            "analysis": result.analysis,
        }
