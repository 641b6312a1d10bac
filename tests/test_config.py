"""Tests for configuration loading."""

import json
from pathlib import Path

import pytest

from find_unused.config import ConfigError, build_config, load_config
from find_unused.models import AnalysisConfig, ReachabilityPolicy


def _write_config(root: Path, data) -> Path:
    path = root / "find-unused.json"
    path.write_text(json.dumps(data))
    return path


def test_defaults():
    config = AnalysisConfig()
    assert config.include == ["src/**/*"]
    assert config.exclude == ["src/**/*.d.ts"]
    assert config.alias == {"@": "src"}
    assert config.policy is ReachabilityPolicy.EDGE_TARGET
    assert config.dry_run is True
    assert config.fail_on_unused is False


def test_load_without_file_uses_defaults(tmp_path):
    config = load_config(tmp_path)
    assert config.root == tmp_path
    assert config.include == ["src/**/*"]


def test_load_discovers_config_file(tmp_path):
    _write_config(tmp_path, {
        "include": ["app/**/*.{ts,vue}"],
        "alias": {"~": "app"},
        "entryFile": "app/main.ts",
        "dryRun": False,
        "failOnUnused": True,
        "policy": "entry-rooted",
    })
    config = load_config(tmp_path)
    assert config.include == ["app/**/*.{ts,vue}"]
    assert config.alias == {"~": "app"}
    assert config.entries == ["app/main.ts"]
    assert config.dry_run is False
    assert config.fail_on_unused is True
    assert config.policy is ReachabilityPolicy.ENTRY_ROOTED


def test_root_in_file_is_relative_to_project(tmp_path):
    _write_config(tmp_path, {"root": "frontend"})
    assert load_config(tmp_path).root == tmp_path / "frontend"


def test_overrides_beat_file_values_and_none_is_ignored(tmp_path):
    _write_config(tmp_path, {"include": ["a/**/*"], "exclude": ["a/x.ts"]})
    config = load_config(tmp_path, include=["b/**/*"], exclude=None)
    assert config.include == ["b/**/*"]
    assert config.exclude == ["a/x.ts"]


def test_explicit_config_path(tmp_path):
    other = tmp_path / "other.json"
    other.write_text(json.dumps({"concurrency": 2}))
    assert load_config(tmp_path, other).concurrency == 2


@pytest.mark.parametrize("data, message", [
    ({"bogus": 1}, "Unknown config key"),
    ({"policy": "everything"}, "Invalid policy"),
    ({"alias": ["@", "src"]}, "alias"),
    ({"include": 3}, "include"),
    ({"dryRun": "no"}, "dry_run"),
    ({"concurrency": 0}, "concurrency"),
])
def test_invalid_values(tmp_path, data, message):
    _write_config(tmp_path, data)
    with pytest.raises(ConfigError, match=message):
        load_config(tmp_path)


def test_invalid_json(tmp_path):
    (tmp_path / "find-unused.json").write_text("{not json")
    with pytest.raises(ConfigError, match="Invalid JSON"):
        load_config(tmp_path)


def test_non_object_json(tmp_path):
    _write_config(tmp_path, ["src/**/*"])
    with pytest.raises(ConfigError, match="JSON object"):
        load_config(tmp_path)


def test_build_config_from_base():
    base = AnalysisConfig(include=["x/**/*"])
    config = build_config({"exclude": "x/skip.ts"}, base=base)
    assert config.include == ["x/**/*"]
    assert config.exclude == ["x/skip.ts"]
    assert base.exclude == ["src/**/*.d.ts"]
