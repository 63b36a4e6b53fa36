"""Prompt templates for LLM commit message suggestions.

Contains:
- USER_PROMPT_TEMPLATE: The strict-format suggestion prompt
- CORRECTIVE_SYSTEM_PROMPT: System instruction for the language retry
- build_prompt: Render the suggestion prompt for a diff
- build_corrective_messages: Messages for the one-shot language retry
- render_numbered: Render items as a numbered list
"""

from typing import Optional, Sequence

from diffscribe.analysis.models import AnalysisSummary
from diffscribe.config import LanguageProfile
from diffscribe.llm.base import Message

COMMIT_TYPES = ("feat", "fix", "docs", "style", "refactor", "test", "chore")

MIN_DESCRIPTION_LENGTH = 12
MAX_DESCRIPTION_LENGTH = 60

NO_FILES_PLACEHOLDER = "(no file information)"
TEMPLATE_PLACEHOLDER = "[commit message]"

USER_PROMPT_TEMPLATE = """You are an excellent developer and an expert in git commit messages. Analyze the git diff below and produce commit message candidates that follow the Conventional Commits rules.

You must follow the instructions below 100%.
### Mandatory rules
- Format: type(scope?): description
- type: choose only from {types}
- description: 100% {language}, imperative mood / present tense, {min_length}-{max_length} characters, no trailing period (.)
- Any output that is not in {language} is invalid; rewrite it in {language} only
- Output exactly {count} lines, no text other than the numbered list

### Output examples (format reference only)
{examples}
{hints}
### Changed files
{files}

### Git Diff
```
{diff}
```

### Final output template (answer in exactly this format)
{template}"""

HINTS_TEMPLATE = """
### Analysis hints
- Intent: {intent}
- Scope: {scope}
- Key changes:
{key_changes}
"""

CORRECTIVE_SYSTEM_PROMPT = (
    "The previous output violated the rules. This time output only the "
    "specified format, written 100% in {language}."
)


def render_numbered(items: Sequence[str]) -> str:
    """Render items as '1. a\\n2. b' (the format parse_suggestions reads back)."""
    return "\n".join(f"{index}. {item}" for index, item in enumerate(items, start=1))


def _format_hints(summary: Optional[AnalysisSummary]) -> str:
    if summary is None or summary.is_empty:
        return ""

    key_changes = "\n".join(f"  - {change}" for change in summary.key_changes) or "  - (none)"
    return HINTS_TEMPLATE.format(
        intent=summary.primary_intent.value,
        scope=summary.scope,
        key_changes=key_changes,
    )


def build_prompt(
    diff: str,
    files: Sequence[str],
    max_suggestions: int,
    language: LanguageProfile,
    summary: Optional[AnalysisSummary] = None,
) -> str:
    """Build the suggestion prompt for a diff.

    Args:
        diff: The raw unified diff.
        files: Changed file paths.
        max_suggestions: Exact number of numbered lines the model must return.
        language: Target language of the descriptions.
        summary: Optional heuristic analysis, rendered as hints.

    Returns:
        The full prompt text.
    """
    files_block = "\n".join(f"- {path}" for path in files) or f"- {NO_FILES_PLACEHOLDER}"
    template = render_numbered([TEMPLATE_PLACEHOLDER] * max_suggestions)

    return USER_PROMPT_TEMPLATE.format(
        types=", ".join(COMMIT_TYPES),
        language=language.name,
        min_length=MIN_DESCRIPTION_LENGTH,
        max_length=MAX_DESCRIPTION_LENGTH,
        count=max_suggestions,
        examples=render_numbered(language.examples),
        hints=_format_hints(summary),
        files=files_block,
        diff=diff,
        template=template,
    )


def build_corrective_messages(prompt: str, language: LanguageProfile) -> list[Message]:
    """Build the messages for the language-compliance retry.

    Args:
        prompt: The original prompt, repeated verbatim.
        language: Target language the reply must be written in.

    Returns:
        A system instruction followed by the original prompt as user message.
    """
    return [
        Message(role="system", content=CORRECTIVE_SYSTEM_PROMPT.format(language=language.name)),
        Message(role="user", content=prompt),
    ]
