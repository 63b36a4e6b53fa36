"""Change analysis for diffscribe.

Aggregates parsed ChangeRecords into an AnalysisSummary:
- identify_pattern: Overall shape of the change set
- infer_intent: What the change set is trying to achieve
- determine_scope: Which area of the code it touches
- extract_key_changes: Up to five significant changes, in diff order
- calculate_complexity: Deterministic 1-10 score
- extract_keywords: Keywords found in change targets
"""

import re
from collections import Counter
from typing import Mapping, Optional, Sequence

from diffscribe.analysis.models import (
    AnalysisSummary,
    ChangeKind,
    ChangePattern,
    ChangeRecord,
    Intent,
)

MAX_KEY_CHANGES = 5
MAX_COMPLEXITY = 10

# Added weight per change kind; unlisted kinds weigh 1
COMPLEXITY_WEIGHTS = {
    ChangeKind.METHOD_ADDED: 2,
    ChangeKind.CLASS_ADDED: 2,
    ChangeKind.CONFIGURATION_ADDED: 3,
    ChangeKind.ANNOTATION_ADDED: 1,
}

KEY_CHANGE_TEMPLATES = {
    ChangeKind.METHOD_ADDED: "method added: {target}",
    ChangeKind.CONFIGURATION_ADDED: "configuration added: {target}",
    ChangeKind.ANNOTATION_ADDED: "annotation applied: {target}",
}

# Annotations too common to count as a significant change
IGNORED_ANNOTATIONS = ("Override",)

TRIGGER_KEYWORDS = ("tool", "callback", "provider", "config", "bean")

_CAPITALIZED_WORD_RE = re.compile(r"\b[A-Z]\w+")


def identify_pattern(records: Sequence[ChangeRecord]) -> ChangePattern:
    """Classify the overall shape of a change set."""
    counts = Counter(record.kind for record in records)
    methods = counts[ChangeKind.METHOD_ADDED]
    annotations = counts[ChangeKind.ANNOTATION_ADDED]
    configs = counts[ChangeKind.CONFIGURATION_ADDED]

    if configs > 0 and methods > 0:
        return ChangePattern.FEATURE_WITH_CONFIG
    if annotations > 0 and methods > 0:
        return ChangePattern.ANNOTATION_DRIVEN_FEATURE
    if methods > 0:
        return ChangePattern.NEW_FUNCTIONALITY
    if configs > 0:
        return ChangePattern.CONFIGURATION_CHANGE
    return ChangePattern.MISC_CHANGES


def infer_intent(records: Sequence[ChangeRecord], pattern: ChangePattern) -> Intent:
    """Infer the purpose of a change set from its targets."""
    content = " ".join(record.target for record in records)

    if "Tool" in content and "ApplicationContext" in content:
        return Intent.TOOL_AUTO_DISCOVERY
    if "scan" in content and "Bean" in content:
        return Intent.COMPONENT_AUTO_REGISTRATION
    if "Provider" in content and "Callback" in content:
        return Intent.PROVIDER_CONFIGURATION
    if pattern is ChangePattern.ANNOTATION_DRIVEN_FEATURE:
        return Intent.ANNOTATION_BASED_FEATURE
    return Intent.GENERAL_IMPROVEMENT


def determine_scope(
    records: Sequence[ChangeRecord],
    module_markers: Optional[Mapping[str, str]] = None,
) -> str:
    """Pick a scope label for a change set.

    Args:
        records: The change records.
        module_markers: File path substring -> scope label; checked first.
            Defaults to the configured SCOPE_MARKERS.

    Returns:
        A short scope label such as "tool", "app" or "core".
    """
    if module_markers is None:
        from diffscribe import config
        module_markers = config.SCOPE_MARKERS

    files = [record.file for record in records]
    for marker, label in module_markers.items():
        if any(marker in path for path in files):
            return label

    if any("Tool" in record.target for record in records):
        return "tool"
    if any("Application" in path for path in files):
        return "app"
    return "core"


def _is_significant(record: ChangeRecord) -> bool:
    if record.kind is ChangeKind.ANNOTATION_ADDED:
        return not any(name in record.target for name in IGNORED_ANNOTATIONS)
    return record.kind in (ChangeKind.METHOD_ADDED, ChangeKind.CONFIGURATION_ADDED)


def extract_key_changes(records: Sequence[ChangeRecord]) -> tuple[str, ...]:
    """Summarize significant changes, deduplicated, first five in diff order."""
    key_changes: list[str] = []
    for record in records:
        if not _is_significant(record):
            continue
        summary = KEY_CHANGE_TEMPLATES[record.kind].format(target=record.target)
        if summary not in key_changes:
            key_changes.append(summary)
        if len(key_changes) == MAX_KEY_CHANGES:
            break
    return tuple(key_changes)


def calculate_complexity(records: Sequence[ChangeRecord]) -> int:
    """Score a change set from 1 to 10.

    1 + min(count, 5) + the per-kind weight of every record, clamped to 10.
    """
    complexity = 1 + min(len(records), 5)
    for record in records:
        complexity += COMPLEXITY_WEIGHTS.get(record.kind, 1)
    return min(complexity, MAX_COMPLEXITY)


def extract_keywords(target: str) -> list[str]:
    """Extract lower-cased keywords from a change target.

    Capitalized words (class and annotation names) are always included;
    trigger words like "tool" or "bean" are added when they appear anywhere.
    """
    keywords = [word.lower() for word in _CAPITALIZED_WORD_RE.findall(target)]
    lowered = target.lower()
    keywords.extend(word for word in TRIGGER_KEYWORDS if word in lowered)
    return keywords


def build_metadata(records: Sequence[ChangeRecord], pattern: ChangePattern) -> dict:
    keywords: list[str] = []
    for record in records:
        for keyword in extract_keywords(record.target):
            if keyword not in keywords:
                keywords.append(keyword)

    return {
        "total_changes": len(records),
        "pattern": pattern.name,
        "changes_by_type": dict(Counter(record.kind.value for record in records)),
        "changes_by_file": dict(Counter(record.file for record in records)),
        "keywords": keywords,
    }


def analyze_changes(
    records: Sequence[ChangeRecord],
    module_markers: Optional[Mapping[str, str]] = None,
) -> AnalysisSummary:
    """Aggregate change records into a semantic summary.

    Args:
        records: Parsed change records, in diff order.
        module_markers: Optional scope marker override (see determine_scope).

    Returns:
        The AnalysisSummary. An empty input yields the fixed "no_changes"
        summary with complexity 0.
    """
    if not records:
        return AnalysisSummary(
            primary_intent=Intent.NO_CHANGES,
            scope="none",
            key_changes=(),
            complexity=0,
            metadata={},
        )

    pattern = identify_pattern(records)
    return AnalysisSummary(
        primary_intent=infer_intent(records, pattern),
        scope=determine_scope(records, module_markers),
        key_changes=extract_key_changes(records),
        complexity=calculate_complexity(records),
        metadata=build_metadata(records, pattern),
    )
