"""Unit tests for the Content Validator node."""

from __future__ import annotations

import pytest

from conceptmap.agent.nodes.validator import (
    MIN_CHAR_COUNT,
    ContentValidator,
    calculate_quality_score,
    format_validation_error,
    validate_content,
)


def test_valid_text_passes_with_analysis(sample_text):
    result = validate_content(sample_text)

    assert result.is_valid
    assert result.error is None
    assert result.analysis.char_count == len(sample_text.strip())
    assert result.analysis.word_count >= 15
    assert 0 <= result.analysis.quality <= 100
    assert result.analysis.estimated_concepts <= 30


@pytest.mark.parametrize("text", [None, "", 42])
def test_missing_content_fails(text):
    result = validate_content(text)

    assert not result.is_valid
    assert str(MIN_CHAR_COUNT) in result.error
    assert result.analysis.char_count == 0


def test_lorem_ipsum_is_flagged_as_placeholder():
    result = validate_content("Lorem ipsum dolor sit amet consectetur")

    assert not result.is_valid
    assert "placeholder" in result.error
    assert "minimum length" in result.error
    assert result.analysis.pattern == "nonsense_detected"


@pytest.mark.parametrize("length", [1, 50, 99])
def test_short_text_reports_minimum_length(length):
    short = ("word " * 40)[:length]
    result = validate_content(short)

    assert not result.is_valid
    assert "minimum length" in result.error
    assert result.analysis.min_required == MIN_CHAR_COUNT


def test_too_few_words():
    text = "Supercalifragilistic " * 6

    result = validate_content(text)

    assert not result.is_valid
    assert result.error == "Not enough words to extract meaningful concepts"
    assert result.analysis.min_required == 15


def test_low_variety():
    text = "the cat and the cat and the dog and the dog " * 4

    result = validate_content(text)

    assert not result.is_valid
    assert result.error == "Content lacks variety - too few unique concepts"


def test_repeated_characters_in_long_text_are_nonsense():
    text = (
        "Rivers carry sediment toward deltas where currents slow and deposits build "
        "wide fertile plains supporting farming communities aaaaaaaaa everywhere nearby"
    )

    result = validate_content(text)

    assert not result.is_valid
    assert result.error == "Content appears to be placeholder or random text"
    assert result.analysis.pattern == "nonsense_detected"


def test_urls_only():
    urls = " ".join(f"https://example.com/articles/{word}" for word in [
        "alpha", "bravo", "charlie", "delta", "echo", "foxtrot", "golf", "hotel",
        "india", "juliet", "kilo", "lima", "mike", "november", "oscar",
    ])

    result = validate_content(urls)

    assert not result.is_valid
    assert result.error == "Content contains only URLs"
    assert result.analysis.content_type == "urls_only"


def test_short_low_quality_text_gets_advisory_suggestions():
    text = (
        "Volcanoes form where magma rises through cracks in the crust and erupts "
        "as lava, ash and gas across nearby valleys and towns"
    )

    result = validate_content(text)

    assert result.is_valid
    assert "Consider adding more detailed explanations for better results" in result.suggestions


def test_quality_score_is_capped():
    text = "A sentence that is long enough. " * 500 + "\n\n".join(["para"] * 10)

    assert calculate_quality_score(text, word_count=5000, unique_words=5000) == 100


def test_format_validation_error():
    result = validate_content("")

    message = format_validation_error(result)

    assert message.startswith("No content provided")
    assert "Suggestions:" in message
    assert "- Please enter some text or upload a document" in message


def test_format_validation_error_valid_is_none(sample_text):
    assert format_validation_error(validate_content(sample_text)) is None


@pytest.mark.asyncio
async def test_validator_node_rejection_sets_error(no_stream_writer):
    result = await ContentValidator().run({"text": "Lorem ipsum dolor sit amet"})

    assert result["validation"].is_valid is False
    assert "placeholder" in result["error"]
    assert result["suggestions"]
    assert result["analysis"].pattern == "nonsense_detected"


@pytest.mark.asyncio
async def test_validator_node_success_has_no_error(no_stream_writer, sample_text):
    result = await ContentValidator().run({"text": sample_text})

    assert result["validation"].is_valid
    assert "error" not in result
