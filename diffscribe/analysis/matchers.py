"""Line classifiers for the diff parser.

Each matcher inspects one added or removed source line and returns a
ChangeRecord or None. The parser tries them in MATCHERS order and keeps the
first hit, so a line that looks like both a method call and an annotation is
always reported as a method.

Detection is purely line-pattern based (no grammar), tuned for Java-like
sources, and will produce false positives and negatives.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from diffscribe.analysis.models import ChangeKind, ChangeRecord


class Direction(Enum):
    """Whether a diff line was added or removed."""

    ADDED = "+"
    REMOVED = "-"


@dataclass(frozen=True)
class LineContext:
    """Source lines surrounding a change line.

    before/after hold up to WINDOW_RADIUS lines on each side of the change
    line (diff markers stripped); recent holds the latest unchanged lines of
    the current file, oldest first.
    """

    before: tuple[str, ...] = ()
    after: tuple[str, ...] = ()
    recent: tuple[str, ...] = ()

    @property
    def window(self) -> tuple[str, ...]:
        return self.before + self.after


ACCESS_MODIFIERS = ("public", "private", "protected")

_ACCESS_METHOD_RE = re.compile(r"\b(public|private|protected)\s+.*\w+\s*\([^)]*\)")
_BARE_METHOD_RE = re.compile(r"\w+\s*\([^)]*\)")
_METHOD_NAME_RE = re.compile(r"\b(\w+)\s*\(")
_RETURN_TYPE_RE = re.compile(
    r"\b(public|private|protected)?\s*(static)?\s*([\w<>\[\]]+)\s+\w+\s*\("
)
_ANNOTATION_RE = re.compile(r"@(\w+)")
_CLASS_RE = re.compile(r"\b(class|interface|enum)\s+(\w+)")
_FIELD_ACCESS_RE = re.compile(r"(private|public|protected)\s+\w+\s+\w+.*;")
_FIELD_INIT_RE = re.compile(r"\w+\s+\w+\s*=.*;")
_FIELD_NAME_RE = re.compile(r"\b(private|public|protected)?\s*\w+\s+(\w+)\s*[=;]")


# ============================================================
# Pattern helpers
# ============================================================


def is_method_signature(line: str) -> bool:
    """Check whether a line looks like a method signature (or call)."""
    return bool(_ACCESS_METHOD_RE.search(line) or _BARE_METHOD_RE.search(line))


def extract_method_name(line: str) -> str:
    """Return the last identifier followed by '(' (return types come first)."""
    names = _METHOD_NAME_RE.findall(line)
    return names[-1] if names else "unknown"


def extract_return_type(line: str) -> str:
    """Guess the return type of a method signature.

    Only capitalized, non-void type tokens count; anything else is "unknown".

    Examples:
        "public String getName()" -> "String"
        "public void run()" -> "unknown"
    """
    match = _RETURN_TYPE_RE.search(line.strip())
    if not match:
        return "unknown"
    return_type = match.group(3)
    if return_type == "void" or not return_type[0].isupper():
        return "unknown"
    return return_type


def extract_parameters(line: str) -> str:
    """Return the parameter types of a signature as a comma-separated list.

    Returns "none" for an empty parameter list and "" when there are no
    parentheses at all.
    """
    start = line.find("(")
    end = line.rfind(")")
    if start == -1 or end == -1 or start >= end:
        return ""

    params = line[start + 1:end].strip()
    if not params:
        return "none"
    return ", ".join(param.strip().split()[0] for param in params.split(",") if param.strip())


def extract_annotation(line: str) -> str:
    match = _ANNOTATION_RE.search(line)
    if match:
        return f"@{match.group(1)}"
    return line.strip()


def extract_class_name(line: str) -> str:
    match = _CLASS_RE.search(line)
    return match.group(2) if match else "unknown"


def extract_import_name(line: str) -> str:
    return line.replace("import", "").replace(";", "").strip()


def is_field_declaration(line: str) -> bool:
    """Check for 'modifier Type name ...;' or 'Type name = ...;'."""
    trimmed = line.strip()
    return bool(_FIELD_ACCESS_RE.search(trimmed) or _FIELD_INIT_RE.search(trimmed))


def extract_field_name(line: str) -> str:
    match = _FIELD_NAME_RE.search(line.strip())
    if match:
        return match.group(2)

    # Fall back to the token right before '=' or ';'
    parts = line.strip().split()
    for following in parts[1:]:
        if ";" in following or "=" in following:
            return re.sub(r"[=;].*", "", following)

    return "unknown"


def annotations_in(lines: tuple[str, ...]) -> list[str]:
    return [extract_annotation(line) for line in lines if line.strip().startswith("@")]


def find_annotation_target(context: LineContext) -> str:
    """Find the element an annotation applies to.

    Scans the lines following the annotation first, then the most recent
    unchanged lines, newest first.
    """
    for line in (*context.after, *reversed(context.recent)):
        if is_method_signature(line):
            return f"method {extract_method_name(line)}"
        if "class " in line:
            return f"class {extract_class_name(line)}"
    return "unknown"


def _snippets(line: str, direction: Direction) -> dict[str, str]:
    if direction is Direction.ADDED:
        return {"after_snippet": line}
    return {"before_snippet": line}


def _method_details(line: str, annotations: list[str]) -> tuple[str, ...]:
    details = [f"name: {extract_method_name(line)}"]

    for modifier in ACCESS_MODIFIERS:
        if modifier in line:
            details.append(f"access: {modifier}")
            break

    return_type = extract_return_type(line)
    if return_type != "unknown":
        details.append(f"returns: {return_type}")

    parameters = extract_parameters(line)
    if parameters:
        details.append(f"parameters: {parameters}")

    if annotations:
        details.append(f"annotations: {', '.join(annotations)}")

    return tuple(details)


# ============================================================
# Matchers (in priority order)
# ============================================================


def match_method(
    line: str, direction: Direction, file: str, context: LineContext
) -> Optional[ChangeRecord]:
    if not is_method_signature(line):
        return None

    kind = ChangeKind.METHOD_ADDED if direction is Direction.ADDED else ChangeKind.METHOD_REMOVED
    return ChangeRecord(
        kind=kind,
        target=extract_method_name(line),
        file=file,
        details=_method_details(line, annotations_in(context.window)),
        **_snippets(line, direction),
    )


def match_annotation(
    line: str, direction: Direction, file: str, context: LineContext
) -> Optional[ChangeRecord]:
    if not line.strip().startswith("@"):
        return None

    annotation = extract_annotation(line)
    target = find_annotation_target(context)
    if direction is Direction.ADDED:
        return ChangeRecord(
            kind=ChangeKind.ANNOTATION_ADDED,
            target=f"{annotation} on {target}",
            file=file,
            details=(f"Added {annotation} to {target}",),
            after_snippet=line,
        )
    return ChangeRecord(
        kind=ChangeKind.ANNOTATION_REMOVED,
        target=f"{annotation} from {target}",
        file=file,
        details=(f"Removed {annotation} from {target}",),
        before_snippet=line,
    )


def match_class(
    line: str, direction: Direction, file: str, context: LineContext
) -> Optional[ChangeRecord]:
    if not any(keyword in line for keyword in ("class ", "interface ", "enum ")):
        return None

    class_name = extract_class_name(line)
    match = _CLASS_RE.search(line)
    keyword = match.group(1) if match else "class"
    if direction is Direction.ADDED:
        kind, verb = ChangeKind.CLASS_ADDED, "Added"
    else:
        kind, verb = ChangeKind.CLASS_REMOVED, "Removed"
    return ChangeRecord(
        kind=kind,
        target=class_name,
        file=file,
        details=(f"{verb} {keyword} {class_name}",),
        **_snippets(line, direction),
    )


def match_import(
    line: str, direction: Direction, file: str, context: LineContext
) -> Optional[ChangeRecord]:
    if not line.strip().startswith("import "):
        return None

    import_name = extract_import_name(line)
    if direction is Direction.ADDED:
        kind, verb = ChangeKind.IMPORT_ADDED, "Added"
    else:
        kind, verb = ChangeKind.IMPORT_REMOVED, "Removed"
    return ChangeRecord(
        kind=kind,
        target=import_name,
        file=file,
        details=(f"{verb} import: {import_name}",),
        **_snippets(line, direction),
    )


def _bean_type(line: str) -> str:
    if "ToolCallbackProvider" in line:
        return "ToolCallbackProvider"
    if "Provider" in line:
        return "Provider"

    return_type = extract_return_type(line)
    if return_type != "unknown":
        return return_type
    return "Bean"


def match_configuration(
    line: str, direction: Direction, file: str, context: LineContext
) -> Optional[ChangeRecord]:
    if direction is not Direction.ADDED:
        return None
    if "@Bean" not in line and not ("return" in line and "Provider" in line):
        return None

    bean_type = _bean_type(line)
    return ChangeRecord(
        kind=ChangeKind.CONFIGURATION_ADDED,
        target=f"{bean_type} Bean",
        file=file,
        details=(f"Added Bean configuration for {bean_type}",),
        after_snippet=line,
    )


def match_field(
    line: str, direction: Direction, file: str, context: LineContext
) -> Optional[ChangeRecord]:
    if direction is not Direction.REMOVED or not is_field_declaration(line):
        return None

    field_name = extract_field_name(line)
    return ChangeRecord(
        kind=ChangeKind.FIELD_REMOVED,
        target=field_name,
        file=file,
        details=(f"Removed field: {field_name}",),
        before_snippet=line,
    )


Matcher = Callable[[str, Direction, str, LineContext], Optional[ChangeRecord]]

MATCHERS: tuple[Matcher, ...] = (
    match_method,
    match_annotation,
    match_class,
    match_import,
    match_configuration,
    match_field,
)


def classify_line(
    line: str, direction: Direction, file: str, context: LineContext
) -> Optional[ChangeRecord]:
    """Run the matchers in priority order and return the first record."""
    for matcher in MATCHERS:
        record = matcher(line, direction, file, context)
        if record is not None:
            return record
    return None
