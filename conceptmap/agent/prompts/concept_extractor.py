"""Concept extraction prompt for the Concept Extractor node."""

CONCEPT_EXTRACTION_PROMPT = """\
{diagram_context}

Your task is to identify and extract the KEY concepts from the provided text,
optimized for {diagram_name} visualization.

## Rules

1. Extract only the most important concepts. Be selective.
2. Focus on: {extraction_focus}
3. Do not summarize or explain.
4. Return at most {max_concepts} concepts.
5. Each concept MUST be a short noun phrase of 1-4 words (e.g. "AI Engine", "Vector DB").
6. No duplicates. Merge concepts that mean the same thing.
7. Never return generic filler words as concepts ("the", "a", "example", "thing", "layer").
8. Order by importance, central concept first.

## Text

<text>
{text}
</text>

## Output Format

Return ONLY a valid JSON array of strings. No markdown, no explanation.
Example: ["AI Engine", "Data Input", "Vector DB", "Response"]
"""
