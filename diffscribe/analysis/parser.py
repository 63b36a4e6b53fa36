"""Unified diff parser for diffscribe.

Contains:
- parse_diff: Turn raw unified diff text into an ordered list of ChangeRecords
- extract_file_path: Read the new-side path from a 'diff --git' header
- WINDOW_RADIUS / RECENT_CONTEXT_LIMIT: Fixed context sizes
"""

from collections import deque
from typing import Optional

from diffscribe.analysis.matchers import Direction, LineContext, classify_line
from diffscribe.analysis.models import ChangeRecord

# Lines inspected on each side of a change line
WINDOW_RADIUS = 5
# Unchanged lines remembered per file
RECENT_CONTEXT_LIMIT = 10

UNKNOWN_FILE = "unknown"

_HEADER_PREFIXES = ("diff --git", "+++", "---", "@@", "index ")


def extract_file_path(header: str) -> str:
    """Extract the file path from a diff header.

    Example: "diff --git a/src/App.java b/src/App.java" -> "src/App.java"

    Args:
        header: A line starting with 'diff --git'.

    Returns:
        The new-side path without its 'b/' prefix, or "unknown".
    """
    parts = header.split(" ")
    if not header.startswith("diff --git") or len(parts) < 4:
        return UNKNOWN_FILE

    path = parts[3]
    return path[2:] if path.startswith("b/") else path


def _source_text(line: str) -> Optional[str]:
    """Return the source text of a diff line, or None for header lines."""
    if line.startswith(_HEADER_PREFIXES):
        return None
    if line[:1] in ("+", "-", " "):
        return line[1:]
    return line


def parse_diff(diff_text: str) -> list[ChangeRecord]:
    """Parse a unified diff into structural change records.

    Lines starting with '+' (not '+++') are additions and lines starting
    with '-' (not '---') are removals. Each one is classified against the
    surrounding lines; unrecognised lines produce no record. Never raises:
    malformed input simply yields fewer records.

    Args:
        diff_text: Raw output of 'git diff'.

    Returns:
        Change records in diff order.
    """
    records: list[ChangeRecord] = []
    if not diff_text or not diff_text.strip():
        return records

    lines = diff_text.split("\n")
    sources = [_source_text(line) for line in lines]
    current_file = UNKNOWN_FILE
    recent: deque[str] = deque(maxlen=RECENT_CONTEXT_LIMIT)

    for index, line in enumerate(lines):
        if line.startswith("diff --git"):
            current_file = extract_file_path(line)
            recent.clear()
            continue

        if line.startswith("+") and not line.startswith("+++"):
            direction = Direction.ADDED
        elif line.startswith("-") and not line.startswith("---"):
            direction = Direction.REMOVED
        else:
            # Unchanged source lines (headers excluded) feed the recent context
            if sources[index] is not None:
                recent.append(sources[index])
            continue

        context = LineContext(
            before=_window(sources, index - WINDOW_RADIUS, index),
            after=_window(sources, index + 1, index + 1 + WINDOW_RADIUS),
            recent=tuple(recent),
        )
        record = classify_line(line[1:].strip(), direction, current_file, context)
        if record is not None:
            records.append(record)

    return records


def _window(sources: list[Optional[str]], start: int, end: int) -> tuple[str, ...]:
    return tuple(
        text for text in sources[max(0, start):end] if text is not None
    )
