"""
Core Bundle Model Objects

Defines the data structures that flow through the bundler:
    - ScriptPaths (the addresses computed once per requested script)
    - ImportStatement (a classified import line)
    - ExtractedBlock (one symbol's line range from the helper module)
    - BundledDocument (one flattened entry script)
    - ScriptResult / BundleOutput (per-script outcomes of a run)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about HTTP or zip files
        - Carry lines as plain strings, never parsed code
        - Preserve source line order
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Optional


class ImportKind(Enum):
    """Resolution strategies for a classified import line."""
    HELPER = "helper"              # selective symbols from the shared helper module
    SAME_FAMILY = "same_family"    # sibling script of the same group/script pair
    ADJACENT = "adjacent"          # file of another group/script pair
    MALFORMED = "malformed"        # project import matching no shape; dropped


class ResolutionContext(Enum):
    """
    Nesting level a line is classified in.

    Each level resolves fewer import kinds:
        ENTRY:       helper, same-family, adjacent
        SAME_FAMILY: helper, adjacent
        ADJACENT:    helper only
    """
    ENTRY = "entry"
    SAME_FAMILY = "same_family"
    ADJACENT = "adjacent"


@dataclass(frozen=True)
class ScriptPaths:
    """
    Addresses describing one requested script.

    Computed once per requested script and passed down unchanged through
    every recursive resolution call.

    Properties:
        entry: Address of the entry script (e.g. ".../group/script/download.py")
        sibling: Address of the same-family script (".../group/script/script.py")
        helpers: Address of the shared helper module (".../common/helpers.py")
        project: Project root used to build adjacent-script addresses
        extension: File extension appended to adjacent-script addresses
    """

    entry: str
    sibling: str
    helpers: str
    project: str
    extension: str = "py"


@dataclass(frozen=True)
class ImportStatement:
    """
    A single source line classified as an import.

    Properties:
        raw: The line exactly as it appeared in the source
        kind: Which resolution strategy applies
        symbols: Requested names (HELPER only, order-irrelevant)
        dotted_path: The "<group>.<script>.<file>" path (ADJACENT only)
    """

    raw: str
    kind: ImportKind
    symbols: FrozenSet[str] = frozenset()
    dotted_path: Optional[str] = None


@dataclass
class ExtractedBlock:
    """
    Contiguous line range of one requested symbol in the helper module.

    Properties:
        symbol: Function or upper-case constant name
        start: 0-based index of the block's header line
        lines: Lines of the block, including a closing blank line if any
    """

    symbol: str
    start: int
    lines: List[str] = field(default_factory=list)


@dataclass
class BundledDocument:
    """
    Flattened entry script.

    Properties:
        script_name: Name the script was requested under
        lines: Original lines with every resolved import spliced in place
        sources: Addresses fetched while building the document, in fetch order
    """

    script_name: str
    lines: List[str] = field(default_factory=list)
    sources: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass
class ScriptResult:
    """Outcome of bundling one requested script: a document or an error."""

    script_name: str
    document: Optional[BundledDocument] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.document is not None


@dataclass
class BundleOutput:
    """
    Named collection of per-script results for one run.

    Results keep the order scripts were requested in, duplicates included.
    """

    group: str
    results: List[ScriptResult] = field(default_factory=list)

    @property
    def documents(self) -> List[BundledDocument]:
        return [r.document for r in self.results if r.ok]

    @property
    def failures(self) -> List[ScriptResult]:
        return [r for r in self.results if not r.ok]

    @property
    def complete(self) -> bool:
        """True when every requested script was bundled."""
        return bool(self.results) and not self.failures

    def get_result(self, script_name: str) -> Optional[ScriptResult]:
        """
        Retrieve the first result for a script name.

        Args:
            script_name: Requested script name

        Returns:
            ScriptResult or None if the script was not requested
        """
        for result in self.results:
            if result.script_name == script_name:
                return result
        return None
