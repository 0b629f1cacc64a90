"""
Run orchestration: bundle every requested script of a group.

Each requested script is an independent computation with its own result.
Failures are collected per script instead of aborting the run, unless
fail_fast is set, in which case the first failure cancels pending work and
is re-raised.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

from scriptbundle.archive import create_archive
from scriptbundle.bundler import BundlingEngine
from scriptbundle.config import Settings
from scriptbundle.errors import BundleCancelled, BundleError
from scriptbundle.fetcher import Fetch, RemoteFetcher
from scriptbundle.model import BundleOutput, ScriptResult
from scriptbundle.paths import describe_paths

logger = logging.getLogger(__name__)


def parse_script_names(value: str) -> List[str]:
    """Split a comma-separated script list, trimming whitespace and dropping empties."""
    return [name.strip() for name in value.split(",") if name.strip()]


def _bundle_one(engine: BundlingEngine, settings: Settings, group: str, script_name: str) -> ScriptResult:
    paths = describe_paths(settings, group, script_name)
    try:
        document = engine.build_bundle(script_name, paths)
    except BundleError as e:
        if not isinstance(e, BundleCancelled):
            logger.warning("Failed to bundle %s/%s: %s", group, script_name, e)
        if settings.fail_fast and engine.cancel is not None:
            engine.cancel.set()
        return ScriptResult(script_name=script_name, error=e)
    return ScriptResult(script_name=script_name, document=document)


def bundle_scripts(
    group: str,
    script_names: Iterable[str],
    settings: Settings,
    fetch: Optional[Fetch] = None,
) -> BundleOutput:
    """
    Bundle each requested script of a group.

    Args:
        group: Group every script belongs to
        script_names: Requested scripts, in output order (duplicates kept)
        settings: Resolved settings
        fetch: Fetcher to use; defaults to a RemoteFetcher with the
            configured timeout

    Returns:
        BundleOutput with one ScriptResult per requested name

    Raises:
        BundleError: The first failure, when settings.fail_fast is set
    """
    names = list(script_names)
    owned = None
    if fetch is None:
        owned = fetch = RemoteFetcher(timeout=settings.timeout)

    engine = BundlingEngine(fetch, settings, cancel=threading.Event())
    output = BundleOutput(group=group)

    try:
        if settings.max_workers > 1 and len(names) > 1:
            workers = min(settings.max_workers, len(names))
            logger.debug("Bundling %d scripts with %d workers", len(names), workers)
            with ThreadPoolExecutor(max_workers=workers) as pool:
                futures = [pool.submit(_bundle_one, engine, settings, group, name) for name in names]
                output.results = [f.result() for f in futures]
        else:
            for name in names:
                result = _bundle_one(engine, settings, group, name)
                output.results.append(result)
                if settings.fail_fast and not result.ok:
                    break
    finally:
        if owned is not None:
            owned.close()

    if settings.fail_fast:
        for result in output.results:
            if result.error is not None and not isinstance(result.error, BundleCancelled):
                raise result.error

    logger.info(
        "Bundled %d of %d scripts in group %s",
        len(output.documents), len(names), group,
    )
    return output


def package_output(output: BundleOutput, settings: Settings) -> Optional[bytes]:
    """
    Archive the successfully bundled documents.

    Returns:
        Zip bytes, or None when no script was bundled
    """
    documents = output.documents
    if not documents:
        return None
    return create_archive(documents, extension=settings.file_extension)


__all__ = ["bundle_scripts", "package_output", "parse_script_names"]
