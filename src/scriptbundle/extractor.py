"""
Symbol extractor for the shared helper module.

Copies only the requested functions and upper-case constants out of the
helper module, using indentation as the block boundary signal. Works on raw
text lines; the helper module is never parsed or imported.

The scanner has two states:

    Idle                 lines are skipped
    Capturing(baseline)  lines are emitted; baseline = header indentation

Transitions:

    top-level header, requested     -> Capturing(0)
    top-level header, not requested -> Idle
    indented header                 -> no change
    blank line, indent <= baseline  -> Idle (after the blank line is emitted)

BLOCK CLOSING RULE:
    A block ends only at a blank line no deeper than its header. Dedented
    non-blank code does not end a block, so top-level statements following
    a requested definition without a blank line in between are captured
    with it. Helper modules are expected to separate definitions with
    blank lines.
"""

import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Tuple

from scriptbundle.model import ExtractedBlock


_DEF_RE = re.compile(r"^(?P<indent>\s*)def\s+(?P<name>\w+)\s*\(")
_CONST_RE = re.compile(r"^(?P<indent>\s*)(?P<name>[A-Z_][A-Z0-9_]*)\s*=(?!=)")


def indentation(line: str) -> int:
    """Number of leading whitespace characters (whole length for blank lines)."""
    return len(line) - len(line.lstrip())


def match_header(line: str) -> Optional[Tuple[str, int]]:
    """
    Match a definition header.

    Returns:
        (name, indentation) for "def name(" or "NAME =" lines, else None
    """
    match = _DEF_RE.match(line) or _CONST_RE.match(line)
    if match is None:
        return None
    return match.group("name"), len(match.group("indent"))


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Capturing:
    symbol: str
    baseline: int


@dataclass(frozen=True)
class Step:
    """Result of feeding one line to the scanner."""
    state: object
    emit: bool
    opens_block: bool = False


def scan_line(state, line: str, symbols: FrozenSet[str]) -> Step:
    """
    Advance the scanner by one line.

    Only a header at column 0 (the top level of the module) re-evaluates
    the state. An indented header belongs to whatever encloses it: inside a
    captured block it is a nested definition and is emitted with the block,
    inside a skipped function or class it is skipped too.
    """
    header = match_header(line)
    opens_block = False

    if header is not None:
        name, indent = header
        if indent == 0:
            state = Capturing(name, indent) if name in symbols else Idle()
            opens_block = isinstance(state, Capturing)

    if isinstance(state, Idle):
        return Step(state, emit=False)

    if not line.strip() and indentation(line) <= state.baseline:
        return Step(Idle(), emit=True, opens_block=opens_block)
    return Step(state, emit=True, opens_block=opens_block)


def extract_blocks(lines: Iterable[str], symbols: Iterable[str]) -> List[ExtractedBlock]:
    """
    Extract the blocks of the requested symbols, in module order.

    Args:
        lines: Lines of the helper module
        symbols: Requested function / constant names

    Returns:
        One ExtractedBlock per captured definition. Symbols that are not
        defined produce nothing; a symbol defined twice produces two blocks.
    """
    wanted = frozenset(symbols)
    blocks: List[ExtractedBlock] = []
    state = Idle()

    for index, line in enumerate(lines):
        step = scan_line(state, line, wanted)
        if step.opens_block:
            blocks.append(ExtractedBlock(symbol=match_header(line)[0], start=index))
        if step.emit:
            blocks[-1].lines.append(line)
        state = step.state

    return blocks


def extract_symbols(lines: Iterable[str], symbols: Iterable[str]) -> List[str]:
    """Lines of the requested symbols, in the order they appear in the module."""
    output: List[str] = []
    for block in extract_blocks(lines, symbols):
        output.extend(block.lines)
    return output


__all__ = ["extract_blocks", "extract_symbols", "scan_line", "match_header", "indentation", "Idle", "Capturing"]
