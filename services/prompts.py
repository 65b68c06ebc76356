"""Prompt template for document simplification.

The wording is configuration, not logic. What must stay stable is the output
contract: a single JSON object with exactly `simplifiedText` and `glossary`.
"""
from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class PromptOptions:
    """Knobs for the simplification prompt."""
    min_sentences_per_idea: int = 3
    max_sentences_per_idea: int = 5
    preserve_paragraphs: bool = True
    numbers_first_glossary: bool = True
    exhaustive_glossary: bool = True


DEFAULT_PROMPT_OPTIONS = PromptOptions()

_ROLE = """You are an expert at making government and legal documents easy to understand for common people.

Read the ENTIRE document. Rewrite it in very simple, everyday language while keeping EVERY piece of information."""

_PRESERVATION_RULES = """KEEP EVERYTHING:
- Include the subject/title at the beginning.
- Copy every number, date, reference number, circular/file code, amount, percentage and time period EXACTLY as written, then explain what it means.
- Keep every department name, role, address and administrative detail, then explain it simply.
- Do not skip, merge away or condense any line of the original."""

_STYLE_RULES = """HOW TO WRITE:
- Short sentences and words a child can understand.
- Explain each idea in {min_sentences}-{max_sentences} sentences with everyday examples and context (the why, how, when, who).
- Use connecting phrases such as "which means", "in other words", "for example", "this is important because".
- Conversational, like explaining to a neighbour. No greetings, no sign-offs, no markdown formatting.
- Make it longer and more detailed than the original, never shorter."""

_PARAGRAPH_RULES = """STRUCTURE:
- Keep the same paragraphs in the same order as the original: one simplified paragraph for each original paragraph.
- Keep paragraph breaks as "\\n\\n" inside simplifiedText."""

_GLOSSARY_RULES = """GLOSSARY:
- {coverage}
- Write every term exactly as it appears in the document; do not change its spelling.
- Give each term a short, clear one-sentence definition in simple language.
{ordering}"""

_OUTPUT_CONTRACT = """OUTPUT FORMAT (MUST BE VALID JSON, NOTHING ELSE):
{
  "simplifiedText": "the full simplified document",
  "glossary": [
    {"term": "exact number or word from the document", "definition": "short and clear meaning"}
  ]
}
Respond with ONLY this JSON object. No markdown, no code fences, no text before or after it."""


def build_system_prompt(options: PromptOptions = DEFAULT_PROMPT_OPTIONS) -> str:
    """Assemble the system prompt from the configured rule blocks."""
    coverage = (
        "List EVERY important number, date, code, reference, department, role, acronym and "
        "administrative or legal term. If unsure whether something is important, include it."
        if options.exhaustive_glossary
        else "List the most important numbers, dates, codes and difficult terms."
    )
    ordering = (
        "- List ALL numbers, dates and codes first, then ALL words and terms."
        if options.numbers_first_glossary
        else ""
    )

    blocks: List[str] = [
        _ROLE,
        _PRESERVATION_RULES,
        _STYLE_RULES.format(
            min_sentences=options.min_sentences_per_idea,
            max_sentences=options.max_sentences_per_idea,
        ),
    ]
    if options.preserve_paragraphs:
        blocks.append(_PARAGRAPH_RULES)
    blocks.append(_GLOSSARY_RULES.format(coverage=coverage, ordering=ordering).rstrip())
    blocks.append(_OUTPUT_CONTRACT)
    return "\n\n".join(blocks)


def build_user_prompt(text: str, language_name: str) -> str:
    return (
        "Please simplify the following government/legal document text. "
        f"ALL output, including glossary definitions, must be in {language_name}.\n\n"
        f"{text}"
    )


def build_messages(
    text: str,
    language_name: str,
    options: PromptOptions = DEFAULT_PROMPT_OPTIONS,
) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": build_system_prompt(options)},
        {"role": "user", "content": build_user_prompt(text, language_name)},
    ]
