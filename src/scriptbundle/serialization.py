"""
Serialization helpers for bundle run reports.

Renders a BundleOutput as a stable dict, JSON or YAML summary: which
scripts were bundled, from which sources, and why the others failed.
Document lines are not included; they live in the archive.
"""
from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from scriptbundle.model import BundleOutput, ScriptResult


def result_to_dict(r: ScriptResult) -> Dict[str, Any]:
    if r.ok:
        return {
            "script": r.script_name,
            "status": "ok",
            "lines": len(r.document.lines),
            "sources": list(r.document.sources),
            "error": None,
        }
    return {
        "script": r.script_name,
        "status": "failed",
        "lines": 0,
        "sources": [],
        "error": {"type": type(r.error).__name__, "message": str(r.error)},
    }


def output_to_dict(o: BundleOutput) -> Dict[str, Any]:
    return {
        "group": o.group,
        "requested": len(o.results),
        "bundled": len(o.documents),
        "failed": len(o.failures),
        "complete": o.complete,
        "scripts": [result_to_dict(r) for r in o.results],
    }


def output_to_json(o: BundleOutput) -> str:
    return json.dumps(output_to_dict(o), sort_keys=True)


def output_to_yaml(o: BundleOutput) -> str:
    return yaml.safe_dump(output_to_dict(o), sort_keys=False)


def save_report(o: BundleOutput, filename: str) -> None:
    """
    Write a run report; JSON for ".json" files, YAML otherwise.

    Args:
        o: Output of a bundle run
        filename: Report path
    """
    text = output_to_json(o) if filename.lower().endswith(".json") else output_to_yaml(o)
    with open(filename, "w", encoding="utf-8") as f:
        f.write(text)


__all__ = ["output_to_dict", "output_to_json", "output_to_yaml", "result_to_dict", "save_report"]
