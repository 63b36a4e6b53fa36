"""Parsing utilities for LLM replies.

Contains:
- parse_suggestions: Extract numbered commit message candidates
- is_language_minority: Check whether a reply ignores the target language
"""

import re

from diffscribe.config import LanguageProfile

# Share of non-blank lines that may lack a target-language character
LANGUAGE_MINORITY_THRESHOLD = 0.6

_NUMBERED_LINE_RE = re.compile(r"^\d+\.\s+")
# Optional "N. " numbering plus a "type(scope)!: " prefix, which is always ASCII
_COMMIT_PREFIX_RE = re.compile(r"^\s*(?:\d+\.\s+)?[A-Za-z]+(?:\([^)]*\))?!?:\s*")


def parse_suggestions(response: str) -> list[str]:
    """Extract commit message candidates from a model reply.

    Every trimmed line starting with '<digits>.<whitespace>' contributes its
    remainder. If no line is numbered, the whole trimmed reply becomes the only
    candidate. Never raises.

    Args:
        response: The raw reply text.

    Returns:
        The candidates in reply order; empty for a blank reply.
    """
    if not response:
        return []

    suggestions = []
    for line in response.split("\n"):
        line = line.strip()
        match = _NUMBERED_LINE_RE.match(line)
        if not match:
            continue
        message = line[match.end():].strip()
        if message:
            suggestions.append(message)

    # Best effort: the model ignored the numbered format
    if not suggestions and response.strip():
        suggestions.append(response.strip())

    return suggestions


def _description(line: str) -> str:
    return _COMMIT_PREFIX_RE.sub("", line, count=1)


def is_language_minority(text: str, language: LanguageProfile) -> bool:
    """Check whether a reply is mostly not written in the target language.

    A line counts as written in the language when it contains at least one
    character of the language's character class. For conventional commit
    lines only the description after "type(scope): " is inspected, so the
    ASCII prefix does not satisfy Latin-script languages.

    Args:
        text: The reply text.
        language: The target language.

    Returns:
        True if more than 60% of the non-blank lines contain no such character.
        False for blank text.
    """
    if not text:
        return False

    lines = [line for line in text.split("\n") if line.strip()]
    if not lines:
        return False

    pattern = re.compile(language.char_pattern)
    foreign = sum(1 for line in lines if not pattern.search(_description(line)))
    return foreign / len(lines) > LANGUAGE_MINORITY_THRESHOLD
