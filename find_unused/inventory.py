"""File inventory — turns include/exclude globs into the candidate file list."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from pathlib import Path

import pathspec

from find_unused.resolver import normalize_path

ALWAYS_SKIP_DIRS = {"node_modules", ".git"}

_BRACE_RE = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> list[str]:
    """Expand shell-style braces: ``src/*.{ts,tsx}`` -> ``src/*.ts``, ``src/*.tsx``."""
    m = _BRACE_RE.search(pattern)
    if m is None:
        return [pattern]
    expanded: list[str] = []
    for option in m.group(1).split(","):
        expanded.extend(expand_braces(pattern[:m.start()] + option + pattern[m.end():]))
    return expanded


def build_spec(patterns: Iterable[str]) -> pathspec.PathSpec:
    lines: list[str] = []
    for pattern in patterns:
        lines.extend(expand_braces(pattern.replace("\\", "/").removeprefix("./")))
    return pathspec.GitIgnoreSpec.from_lines(lines)


def collect_files(
    root: Path,
    include: Iterable[str],
    exclude: Iterable[str] = (),
) -> list[Path]:
    """Every file under root matching include and not exclude.

    Returns absolute, normalized paths sorted by their root-relative form.
    """
    root = normalize_path(root)
    include_spec = build_spec(include)
    exclude_spec = build_spec(exclude)

    matched: list[tuple[str, Path]] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in ALWAYS_SKIP_DIRS)
        for name in filenames:
            path = Path(dirpath) / name
            rel = path.relative_to(root).as_posix()
            if include_spec.match_file(rel) and not exclude_spec.match_file(rel):
                matched.append((rel, normalize_path(path)))

    matched.sort(key=lambda m: m[0])
    return [path for _, path in matched]
