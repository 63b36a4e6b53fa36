"""Diff analysis pipeline for diffscribe.

This package turns raw diff text into commit message material:
- models: ChangeKind, ChangeRecord, ChangePattern, Intent, AnalysisSummary
- matchers: Line classifiers used by the parser
- parser: parse_diff, extract_file_path
- analyzer: analyze_changes
- synthesizer: synthesize_messages
"""

from diffscribe.analysis.models import (
    AnalysisSummary,
    ChangeKind,
    ChangePattern,
    ChangeRecord,
    Intent,
)
from diffscribe.analysis.parser import extract_file_path, parse_diff
from diffscribe.analysis.analyzer import analyze_changes
from diffscribe.analysis.synthesizer import synthesize_messages


__all__ = [
    # Models
    "AnalysisSummary",
    "ChangeKind",
    "ChangePattern",
    "ChangeRecord",
    "Intent",
    # Parser
    "extract_file_path",
    "parse_diff",
    # Analyzer
    "analyze_changes",
    # Synthesizer
    "synthesize_messages",
]
