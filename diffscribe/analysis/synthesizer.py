"""Heuristic commit message synthesis (no model call).

Builds up to three one-line conventional commit messages from an
AnalysisSummary. Used when no LLM provider is available or when the user
asks for heuristic output.
"""

from diffscribe.analysis.models import AnalysisSummary, Intent

MAX_MESSAGES = 3

# Checked in order; the first substring found in a key change wins
CHANGE_PHRASES = (
    ("method added", "add method"),
    ("class added", "add class"),
    ("configuration added", "add configuration"),
    ("modified", "modify code"),
)
DEFAULT_CHANGE_PHRASE = "improve code"

INTENT_PHRASES = {
    Intent.TOOL_AUTO_DISCOVERY: "add automatic tool discovery",
    Intent.COMPONENT_AUTO_REGISTRATION: "register components automatically",
    Intent.PROVIDER_CONFIGURATION: "configure providers",
    Intent.ANNOTATION_BASED_FEATURE: "add annotation-based feature",
}
DEFAULT_INTENT_PHRASE = "improve functionality"

FALLBACK_DESCRIPTION = "code improvement"


def guess_type(summary: AnalysisSummary) -> str:
    # Evaluated before any complexity rule, so large changes never force "feat"
    if "fix" in summary.primary_intent.value:
        return "fix"
    return "feat"


def simplify_change(change: str) -> str:
    for needle, phrase in CHANGE_PHRASES:
        if needle in change:
            return phrase
    return DEFAULT_CHANGE_PHRASE


def simplify_intent(intent: Intent) -> str:
    return INTENT_PHRASES.get(intent, DEFAULT_INTENT_PHRASE)


def synthesize_messages(summary: AnalysisSummary) -> list[str]:
    """Produce heuristic commit messages for a summary.

    Args:
        summary: The analysis of the pending changes.

    Returns:
        At most three distinct messages of the form 'type(scope): description'.
    """
    commit_type = guess_type(summary)
    prefix = f"{commit_type}({summary.scope})"

    candidates: list[str] = []
    if summary.key_changes:
        candidates.append(f"{prefix}: {simplify_change(summary.key_changes[0])}")
    if not summary.is_empty:
        candidates.append(f"{prefix}: {simplify_intent(summary.primary_intent)}")
    if not candidates:
        candidates.append(f"{prefix}: {FALLBACK_DESCRIPTION}")

    messages: list[str] = []
    for candidate in candidates:
        if candidate not in messages:
            messages.append(candidate)
    return messages[:MAX_MESSAGES]
