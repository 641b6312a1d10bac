"""Configuration loading — JSON config file merged over AnalysisConfig defaults."""

from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any

from find_unused.models import AnalysisConfig, ReachabilityPolicy

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "find-unused.json"

# JSON keys may use either spelling
_KEY_ALIASES = {
    "dryRun": "dry_run",
    "failOnUnused": "fail_on_unused",
    "entryFile": "entries",
    "entry": "entries",
}
_LIST_KEYS = {"include", "exclude", "entries", "extensions"}
_BOOL_KEYS = {"dry_run", "fail_on_unused"}


class ConfigError(ValueError):
    """Raised for unreadable or invalid configuration."""


def find_config_file(root: Path) -> Path | None:
    candidate = root / CONFIG_FILE_NAME
    return candidate if candidate.is_file() else None


def load_config_data(path: Path) -> dict[str, Any]:
    """Read a JSON config file into a dict of raw values."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return data


def build_config(
    data: dict[str, Any] | None = None,
    *,
    base: AnalysisConfig | None = None,
    **overrides: Any,
) -> AnalysisConfig:
    """Merge raw values and keyword overrides over defaults.

    None-valued overrides are ignored so unset CLI options keep file values.
    """
    config = base or AnalysisConfig()
    values: dict[str, Any] = {}
    for key, value in (data or {}).items():
        values[_KEY_ALIASES.get(key, key)] = value
    for key, value in overrides.items():
        if value is not None:
            values[key] = value

    known = {f.name for f in dataclasses.fields(AnalysisConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")

    return dataclasses.replace(config, **{k: _coerce(k, v) for k, v in values.items()})


def load_config(
    root: Path | None = None,
    path: Path | None = None,
    **overrides: Any,
) -> AnalysisConfig:
    """Load configuration for a project root.

    An explicit path must exist; otherwise ``find-unused.json`` in the root is
    used when present.
    """
    root = Path(root) if root is not None else Path(".")
    config_path = path or find_config_file(root)
    data: dict[str, Any] = {}
    if config_path is not None:
        logger.debug("Loading config from %s", config_path)
        data = load_config_data(config_path)
    # A root in the file is relative to the project root
    data["root"] = str(root / data["root"]) if "root" in data else str(root)
    return build_config(data, **overrides)


def _coerce(key: str, value: Any) -> Any:
    if key == "root":
        return Path(value)
    if key == "policy":
        if isinstance(value, ReachabilityPolicy):
            return value
        try:
            return ReachabilityPolicy(value)
        except ValueError:
            choices = ", ".join(p.value for p in ReachabilityPolicy)
            raise ConfigError(f"Invalid policy {value!r}; expected one of: {choices}") from None
    if key == "alias":
        if not isinstance(value, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in value.items()
        ):
            raise ConfigError("alias must map strings to strings")
        return dict(value)
    if key in _LIST_KEYS:
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"{key} must be a string or a list of strings")
        return list(value)
    if key in _BOOL_KEYS:
        if not isinstance(value, bool):
            raise ConfigError(f"{key} must be true or false")
        return value
    if key == "concurrency":
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigError("concurrency must be a positive integer")
        return value
    return value
