"""
Configuration for the bundler.

Settings are layered, lowest precedence first:
    defaults -> YAML config file -> environment variables -> explicit overrides

Environment variables:
    ROOT_DIRECTORY          Remote project root (required)
    BUNDLE_FILE_EXTENSION   Extension of bundled files (default "py")
    BUNDLE_TIMEOUT          Per-fetch timeout in seconds (default 30)
    BUNDLE_MAX_WORKERS      Scripts bundled in parallel (default 1)
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

import yaml

from scriptbundle.errors import ConfigError

logger = logging.getLogger(__name__)

ENV_VARS = {
    "ROOT_DIRECTORY": "root_directory",
    "BUNDLE_FILE_EXTENSION": "file_extension",
    "BUNDLE_TIMEOUT": "timeout",
    "BUNDLE_MAX_WORKERS": "max_workers",
}


@dataclass(frozen=True)
class Settings:
    """
    Resolved bundler settings.

    Properties:
        root_directory: Remote project root every address is built from
        file_extension: Extension of remote source files and archive entries
        entry_file: File name (no extension) of each script's entry point
        sibling_file: File name of the same-family script
        helper_module: Dotted module name of the shared helper module
        same_family_marker: Text marking an import of the same-family script
        timeout: Per-fetch timeout in seconds
        max_workers: Requested scripts bundled concurrently
        fail_fast: Abort the whole run on the first failing script
    """

    root_directory: str = ""
    file_extension: str = "py"
    entry_file: str = "download"
    sibling_file: str = "script"
    helper_module: str = "common.helpers"
    same_family_marker: str = ".script"
    timeout: float = 30.0
    max_workers: int = 1
    fail_fast: bool = False

    @property
    def helper_path(self) -> str:
        """Helper module as a path relative to the root ("common/helpers")."""
        return self.helper_module.replace(".", "/")


def _coerce(name: str, value: Any) -> Any:
    """Convert a raw config value to the type of the named field."""
    if name == "timeout":
        try:
            value = float(value)
        except (TypeError, ValueError):
            raise ConfigError(f"timeout must be a number, got {value!r}")
        if value <= 0:
            raise ConfigError(f"timeout must be positive, got {value}")
        return value
    if name == "max_workers":
        try:
            value = int(value)
        except (TypeError, ValueError):
            raise ConfigError(f"max_workers must be an integer, got {value!r}")
        if value < 1:
            raise ConfigError(f"max_workers must be at least 1, got {value}")
        return value
    if name == "fail_fast":
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)
    if value is None:
        raise ConfigError(f"{name} must not be empty")
    return str(value)


def _apply(settings: Settings, values: Mapping[str, Any]) -> Settings:
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {unknown}")
    return replace(settings, **{k: _coerce(k, v) for k, v in values.items()})


def read_config_file(path: str) -> Dict[str, Any]:
    """
    Read a YAML configuration file.

    Args:
        path: Path to the YAML file

    Returns:
        Mapping of setting names to raw values

    Raises:
        ConfigError: If the file is missing, unparsable or not a mapping
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}")
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_settings(
    config_file: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> Settings:
    """
    Build Settings from defaults, a config file, the environment and overrides.

    Overrides whose value is None are ignored, so CLI flags can be passed
    through unconditionally.

    Raises:
        ConfigError: If any layer is invalid or no root directory is set
    """
    environ = os.environ if environ is None else environ
    settings = Settings()

    if config_file:
        settings = _apply(settings, read_config_file(config_file))
        logger.debug("Loaded config file %s", config_file)

    env_values = {attr: environ[var] for var, attr in ENV_VARS.items() if environ.get(var)}
    settings = _apply(settings, env_values)

    settings = _apply(settings, {k: v for k, v in overrides.items() if v is not None})

    if not settings.root_directory:
        raise ConfigError("ROOT_DIRECTORY not set")
    return replace(settings, root_directory=settings.root_directory.rstrip("/"))


__all__ = ["Settings", "load_settings", "read_config_file"]
