"""
Import classifier.

Decides, one line at a time, whether a line of bundled-in source is an
import this project resolves and which strategy applies:

    HELPER       "from common.helpers import A, B"   -> selective extraction
    SAME_FAMILY  "from .script import run"           -> sibling script
    ADJACENT     "from groupA.scriptB.utils import x" -> file of another script

Classification order is fixed: the helper marker is checked first, so a
helper line is never re-classified as an adjacent import.

Lines are matched textually; nothing is parsed into an AST.
"""

import re
from typing import FrozenSet, Iterable, Iterator, List, Optional, Tuple

from scriptbundle.config import Settings
from scriptbundle.model import ImportKind, ImportStatement, ResolutionContext, ScriptPaths


_IMPORT_LINE_RE = re.compile(r"^(?:import|from)\s")
_FROM_IMPORT_RE = re.compile(r"from\s+\S+\s+import\s+(.+)")
_SEGMENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def is_import_line(line: str) -> bool:
    """True if the line starts (at column 0) with an import keyword."""
    return bool(_IMPORT_LINE_RE.match(line))


def logical_lines(source: Iterable[str]) -> Iterator[Tuple[str, List[str]]]:
    """
    Group physical lines into logical lines.

    An import line that opens a parenthesis without closing it continues
    until the line holding the closing parenthesis:

        from common.helpers import (
            CONST_X,
            helper_fn,
        )

    is yielded as one logical line "from common.helpers import ( CONST_X,
    helper_fn, )". Comments are stripped from the joined text. Every other
    line is its own logical line.

    Yields:
        (logical line, physical lines it was built from)
    """
    lines = iter(source)
    for line in lines:
        if not is_import_line(line) or not _opens_group(line):
            yield line, [line]
            continue

        physical = [line]
        for continuation in lines:
            physical.append(continuation)
            if ")" in _strip_comment(continuation):
                break
        yield " ".join(_strip_comment(part).strip() for part in physical), physical


def _strip_comment(line: str) -> str:
    return line.split("#", 1)[0]


def _opens_group(line: str) -> bool:
    code = _strip_comment(line)
    return "(" in code and ")" not in code


def extract_symbol_names(line: str) -> FrozenSet[str]:
    """
    Requested names of a "from <module> import <names>" line.

    Names are split on commas and trimmed. Surrounding parentheses and a
    trailing comment are ignored.

    Returns:
        Set of names; empty if the line has no import clause
    """
    match = _FROM_IMPORT_RE.search(line)
    if not match:
        return frozenset()

    clause = match.group(1).split("#", 1)[0]
    clause = clause.replace("(", "").replace(")", "")
    return frozenset(name.strip() for name in clause.split(",") if name.strip())


def imported_module(line: str) -> Optional[str]:
    """Module token of an import line ("x.y" in "from x.y import z")."""
    tokens = line.split()
    if len(tokens) < 2:
        return None
    return tokens[1].rstrip(",")


def is_same_family_import(line: str, marker: str) -> bool:
    """
    True if the imported module names the same-family script.

    The marker must end the module token, so ".script" matches
    "from .script import run" but not "from groupA.scriptB.utils import x".
    """
    module = imported_module(line)
    return module is not None and (module == marker.lstrip(".") or module.endswith(marker))


def dotted_import_path(line: str) -> Optional[str]:
    """
    The "<group>.<script>.<file>" path of an import line, if it has one.

    The path is the second whitespace-separated token. It must have at least
    three identifier segments; any extra segments are ignored later.
    """
    module = imported_module(line)
    if module is None:
        return None

    segments = module.split(".")
    if len(segments) < 3 or not all(_SEGMENT_RE.match(s) for s in segments):
        return None
    return module


def adjacent_address(dotted_path: str, paths: ScriptPaths) -> str:
    """
    Address of an adjacent script from its dotted import path.

    Built from the project root only; the requesting script's own group
    and script name never enter the address.

    Example:
        "groupA.scriptB.utils" with project "/r" -> "/r/groupA/scriptB/utils.py"
    """
    group, script, file_name = dotted_path.split(".")[:3]
    return f"{paths.project}/{group}/{script}/{file_name}.{paths.extension}"


def classify_line(line: str, context: ResolutionContext, settings: Settings) -> Optional[ImportStatement]:
    """
    Classify one source line.

    Args:
        line: Raw source line
        context: Nesting level the line is being resolved at
        settings: Supplies the helper module name and same-family marker

    Returns:
        None if the line passes through unchanged, otherwise an
        ImportStatement. Kind MALFORMED marks a project import that matches
        no shape allowed in this context; such lines are dropped.
    """
    if not is_import_line(line):
        return None

    if settings.helper_module in line:
        symbols = extract_symbol_names(line)
        if not symbols:
            return ImportStatement(raw=line, kind=ImportKind.MALFORMED)
        return ImportStatement(raw=line, kind=ImportKind.HELPER, symbols=symbols)

    if context is ResolutionContext.ADJACENT:
        return None

    same_family = is_same_family_import(line, settings.same_family_marker)
    if context is ResolutionContext.ENTRY and same_family:
        return ImportStatement(raw=line, kind=ImportKind.SAME_FAMILY)

    dotted = dotted_import_path(line)
    if dotted is not None:
        return ImportStatement(raw=line, kind=ImportKind.ADJACENT, dotted_path=dotted)

    if same_family:
        return ImportStatement(raw=line, kind=ImportKind.MALFORMED)

    return None


__all__ = [
    "classify_line",
    "logical_lines",
    "extract_symbol_names",
    "dotted_import_path",
    "adjacent_address",
    "is_import_line",
    "is_same_family_import",
]
