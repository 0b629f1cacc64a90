"""
Command line interface.

    python -m scriptbundle GROUP SCRIPT[,SCRIPT...] [options]

Bundles each script of GROUP and prints the base64-encoded zip archive to
stdout, or writes the raw archive with --output.

Exit codes:
    0  every script bundled
    1  some scripts failed; the archive holds the rest
    2  nothing bundled, or invalid configuration
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from scriptbundle import __version__
from scriptbundle.archive import encode_archive, write_archive
from scriptbundle.config import load_settings
from scriptbundle.errors import BundleError, ConfigError
from scriptbundle.pipeline import bundle_scripts, package_output, parse_script_names
from scriptbundle.serialization import save_report

logger = logging.getLogger("scriptbundle")

EXIT_OK = 0
EXIT_PARTIAL = 1
EXIT_FAILED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scriptbundle",
        description="Flatten remote scripts and their helper imports into a zip archive.",
    )
    parser.add_argument("group", help="Group the scripts belong to")
    parser.add_argument("scripts", help="Comma-separated script names")
    parser.add_argument("--dev", action="store_true", help="Print every bundled script to stdout")
    parser.add_argument("-o", "--output", help="Write the zip archive here instead of printing base64")
    parser.add_argument("--config", help="YAML config file")
    parser.add_argument("--root", dest="root_directory", help="Remote project root (overrides ROOT_DIRECTORY)")
    parser.add_argument("--ext", dest="file_extension", help="File extension of remote sources")
    parser.add_argument("--workers", dest="max_workers", type=int, help="Scripts bundled in parallel")
    parser.add_argument("--timeout", type=float, help="Per-fetch timeout in seconds")
    parser.add_argument("--fail-fast", action="store_true", default=None,
                        help="Stop at the first failing script and produce no archive")
    parser.add_argument("--report", help="Write a run report (.json or .yaml)")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose, args.quiet)

    try:
        settings = load_settings(
            args.config,
            root_directory=args.root_directory,
            file_extension=args.file_extension,
            max_workers=args.max_workers,
            timeout=args.timeout,
            fail_fast=args.fail_fast,
        )
    except ConfigError as e:
        logger.error("%s", e)
        return EXIT_FAILED

    script_names: List[str] = parse_script_names(args.scripts)
    if not script_names:
        logger.error("No script names given")
        return EXIT_FAILED

    try:
        output = bundle_scripts(args.group, script_names, settings)
    except BundleError as e:
        logger.error("Aborted: %s", e)
        return EXIT_FAILED

    if args.report:
        save_report(output, args.report)

    if args.dev:
        for document in output.documents:
            for line in document.lines:
                print(line)

    archive = package_output(output, settings)
    if archive is None:
        logger.error("No scripts bundled; no archive produced")
        return EXIT_FAILED

    if args.output:
        write_archive(archive, args.output)
        logger.info("Wrote %s", args.output)
    else:
        print(encode_archive(archive))

    if not output.complete:
        failed = ", ".join(r.script_name for r in output.failures)
        logger.warning("Archive is partial; failed scripts: %s", failed)
        return EXIT_PARTIAL
    return EXIT_OK


__all__ = ["main", "build_parser"]
