"""Data models for the diffscribe analysis pipeline.

Contains:
- ChangeKind: Kind of structural edit detected on a diff line
- ChangeRecord: One detected structural edit
- ChangePattern: Overall shape of a change set
- Intent: Inferred purpose of a change set
- AnalysisSummary: Aggregated semantic summary of a change set
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ChangeKind(Enum):
    """Kinds of structural edits recognised by the diff parser."""

    METHOD_ADDED = "method-added"
    METHOD_REMOVED = "method-removed"
    METHOD_MODIFIED = "method-modified"
    CLASS_ADDED = "class-added"
    CLASS_REMOVED = "class-removed"
    CLASS_MODIFIED = "class-modified"
    ANNOTATION_ADDED = "annotation-added"
    ANNOTATION_REMOVED = "annotation-removed"
    IMPORT_ADDED = "import-added"
    IMPORT_REMOVED = "import-removed"
    FIELD_ADDED = "field-added"
    FIELD_REMOVED = "field-removed"
    CONFIGURATION_ADDED = "configuration-added"
    CONFIGURATION_MODIFIED = "configuration-modified"


@dataclass(frozen=True)
class ChangeRecord:
    """A single structural edit detected on one +/- diff line.

    Exactly one of ``before_snippet`` (removals) and ``after_snippet``
    (additions) is set.
    """

    kind: ChangeKind
    target: str
    file: str
    details: tuple[str, ...] = ()
    before_snippet: Optional[str] = None
    after_snippet: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.target} in {self.file}"


class ChangePattern(Enum):
    """Overall shape of a change set, checked in declaration order."""

    FEATURE_WITH_CONFIG = "feature_with_config"
    ANNOTATION_DRIVEN_FEATURE = "annotation_driven_feature"
    NEW_FUNCTIONALITY = "new_functionality"
    CONFIGURATION_CHANGE = "configuration_change"
    MISC_CHANGES = "misc_changes"


class Intent(Enum):
    """Inferred purpose of a change set."""

    NO_CHANGES = "no_changes"
    TOOL_AUTO_DISCOVERY = "tool_auto_discovery"
    COMPONENT_AUTO_REGISTRATION = "component_auto_registration"
    PROVIDER_CONFIGURATION = "provider_configuration"
    ANNOTATION_BASED_FEATURE = "annotation_based_feature"
    GENERAL_IMPROVEMENT = "general_improvement"
    OTHER = "other"


@dataclass(frozen=True)
class AnalysisSummary:
    """Semantic summary of an ordered sequence of change records."""

    primary_intent: Intent
    scope: str
    key_changes: tuple[str, ...] = ()
    complexity: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.primary_intent is Intent.NO_CHANGES
