"""Prompts for the Refinement node: synonym merging and isolated concept recovery."""

MERGE_PROMPT = """\
You are a concept refinement agent. Analyze these concepts and merge similar or
redundant ones.

## Rules

1. Merge concepts that are synonyms or near-duplicates.
2. Keep the most specific, descriptive version of each merged group.
3. Preserve important distinctions; do not merge merely related concepts.
4. Do not invent new concepts.

## Concepts

{concepts_json}

## Output Format

Return ONLY a valid JSON array of the refined concepts. No markdown, no explanation.
"""

ISOLATE_CHECK_PROMPT = """\
You are a relationship validator agent. The isolated concepts below have no
connections yet. Using the source text, suggest relationships that connect
them to the other concepts.

## Isolated Concepts

{isolated_json}

## All Concepts

{concepts_json}

## Text

<text>
{text}
</text>

## Output Format

Return ONLY a valid JSON array of new relationships. No markdown, no explanation.
Format: [{{"source": "A", "relation": "verb", "target": "B"}}]
"""
