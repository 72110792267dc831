"""Prompts for the model-assisted label Simplifier node."""

CONCEPT_SIMPLIFICATION_PROMPT = """\
You are a text simplification expert for graph visualization. Condense each
concept into a SHORT label for a diagram node.

## Rules

1. At most {max_words} words per label; 1-4 words is ideal.
2. Remove filler words (the, a, an, of, for, with, ...).
3. Use common abbreviations: Database -> DB, Application -> App, Information -> Info.
4. Keep the essential meaning only. No sentences, no punctuation.
5. Title case ("AI Engine", "User Input").

## Examples

- "Large Language Model Foundation" -> "LLM"
- "Vector Database Storage" -> "Vector DB"
- "User Prompts and Queries" -> "User Query"

## Concepts To Simplify

{concepts_json}

## Output Format

Return ONLY a valid JSON object mapping each original concept to its label. No markdown.
Format: {{"original concept": "Short Label"}}
"""

RELATION_SIMPLIFICATION_PROMPT = """\
Simplify relationship labels for graph edges.

## Rules

1. At most {max_words} words; a single verb is best.
2. Prefer: uses, has, feeds, sends, gets, creates, needs, enables.

## Examples

- "is responsible for" -> "manages"
- "is a necessary precondition for" -> "enables"
- "depends on the output of" -> "needs"

## Relations To Simplify

{relations_json}

## Output Format

Return ONLY a valid JSON object mapping each original relation to its label. No markdown.
Format: {{"original relation": "verb"}}
"""
