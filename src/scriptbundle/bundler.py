"""
Bundling engine.

Flattens one entry script: walks its lines, passes ordinary lines through
and replaces each project import with the lines it resolves to.

Resolution per nesting level:

    entry script        helper, same-family and adjacent imports
    same-family script  helper and adjacent imports
    adjacent script     helper imports only; everything else verbatim

Recursion stops after those levels, so a run never fans out further than
entry -> same-family -> adjacent. The chain of expanded addresses is still
tracked so a sibling or adjacent address pointing back up the chain fails
with CycleDetected instead of being inlined into itself.
"""
from __future__ import annotations

import logging
import threading
import warnings
from typing import List, Optional, Tuple

from scriptbundle.classifier import adjacent_address, classify_line, logical_lines
from scriptbundle.config import Settings
from scriptbundle.errors import BundleCancelled, CycleDetected, MalformedImportWarning
from scriptbundle.extractor import extract_symbols
from scriptbundle.fetcher import Fetch
from scriptbundle.model import (
    BundledDocument,
    ImportKind,
    ImportStatement,
    ResolutionContext,
    ScriptPaths,
)

logger = logging.getLogger(__name__)


class BundlingEngine:
    """
    Resolves the imports of entry scripts through a fetcher.

    The engine holds no per-script state; one instance can bundle several
    scripts, from several threads, as long as the fetcher is reentrant.

    Args:
        fetch: Callable returning the lines at an address
        settings: Helper module name, same-family marker and file names
        cancel: Optional event; once set, the next fetch raises BundleCancelled
    """

    def __init__(self, fetch: Fetch, settings: Settings, cancel: Optional[threading.Event] = None):
        self.fetch = fetch
        self.settings = settings
        self.cancel = cancel

    def build_bundle(self, script_name: str, paths: ScriptPaths) -> BundledDocument:
        """
        Flatten one entry script.

        Args:
            script_name: Name the script was requested under
            paths: Addresses computed for this script

        Returns:
            BundledDocument with resolved imports spliced in place

        Raises:
            FetchError: If any source cannot be fetched
            CycleDetected: If resolution re-enters an address on its chain
            BundleCancelled: If the cancellation token is set
        """
        document = BundledDocument(script_name=script_name)
        chain: Tuple[str, ...] = (paths.entry,)
        source = self._fetch(paths.entry, document)
        document.lines = self._resolve_lines(source, ResolutionContext.ENTRY, paths, chain, document)
        logger.info("Bundled %s: %d lines from %d sources", script_name, len(document.lines), len(document.sources))
        return document

    def _fetch(self, address: str, document: BundledDocument) -> List[str]:
        if self.cancel is not None and self.cancel.is_set():
            raise BundleCancelled(f"Cancelled before fetching {address}")
        lines = self.fetch(address)
        document.sources.append(address)
        return lines

    def _resolve_lines(
        self,
        source: List[str],
        context: ResolutionContext,
        paths: ScriptPaths,
        chain: Tuple[str, ...],
        document: BundledDocument,
    ) -> List[str]:
        output: List[str] = []

        for line, physical in logical_lines(source):
            statement = classify_line(line, context, self.settings)
            if statement is None:
                output.extend(physical)
                continue

            logger.debug("%s import in %s: %s", statement.kind.value, chain[-1], line.strip())
            output.extend(self._resolve_import(statement, context, paths, chain, document))

        return output

    def _resolve_import(
        self,
        statement: ImportStatement,
        context: ResolutionContext,
        paths: ScriptPaths,
        chain: Tuple[str, ...],
        document: BundledDocument,
    ) -> List[str]:
        if statement.kind is ImportKind.HELPER:
            helper_lines = self._fetch(paths.helpers, document)
            extracted = extract_symbols(helper_lines, statement.symbols)
            if not extracted:
                logger.debug("No symbols of %s found in %s", sorted(statement.symbols), paths.helpers)
            return extracted

        if statement.kind is ImportKind.SAME_FAMILY:
            return self._expand(paths.sibling, ResolutionContext.SAME_FAMILY, paths, chain, document)

        if statement.kind is ImportKind.ADJACENT:
            address = adjacent_address(statement.dotted_path, paths)
            return self._expand(address, ResolutionContext.ADJACENT, paths, chain, document)

        warnings.warn(
            f"Unresolvable import in {chain[-1]} dropped: {statement.raw.strip()}",
            MalformedImportWarning,
        )
        return []

    def _expand(
        self,
        address: str,
        context: ResolutionContext,
        paths: ScriptPaths,
        chain: Tuple[str, ...],
        document: BundledDocument,
    ) -> List[str]:
        if address in chain:
            raise CycleDetected(chain + (address,))
        source = self._fetch(address, document)
        return self._resolve_lines(source, context, paths, chain + (address,), document)


def build_bundle(fetch: Fetch, settings: Settings, script_name: str, paths: ScriptPaths) -> BundledDocument:
    """Flatten one entry script with a throwaway engine."""
    return BundlingEngine(fetch, settings).build_bundle(script_name, paths)


__all__ = ["BundlingEngine", "build_bundle"]
