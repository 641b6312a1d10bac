"""Path resolver — turns a raw specifier into an existing file on disk.

Resolution order, first success wins:

1. alias substitution (``@/utils`` -> ``<root>/src/utils``)
2. absolute file-system path, retried relative to the project root
3. path relative to the referencing file's directory
4. anything else is a bare (package) specifier and is never resolved

A candidate base path is then matched against the file system: verbatim when
it carries a known extension, then with each known extension appended in
priority order, then as a directory holding ``index.<ext>``.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from pathlib import Path

from find_unused.scanner.language_map import DEFAULT_EXTENSIONS, rank_extensions


def normalize_path(path: str | os.PathLike[str]) -> Path:
    """Absolute, normalized path without resolving symlinks."""
    return Path(os.path.normpath(os.path.abspath(path)))


def strip_query(specifier: str) -> str:
    """Drop ``?query`` and ``#hash`` suffixes (``./a.svg?raw``, ``font.eot#iefix``)."""
    for sep in ("?", "#"):
        idx = specifier.find(sep)
        if idx > 0:
            specifier = specifier[:idx]
    return specifier


class AliasTable:
    """Ordered prefix substitutions; the longest matching key wins, ties by order.

    A key matches a specifier equal to it or followed by ``/``, so ``@`` matches
    ``@/utils`` but not the scoped package ``@vue/runtime-core``.
    """

    def __init__(self, aliases: Mapping[str, str] | Iterable[tuple[str, str]], root: Path):
        items = aliases.items() if isinstance(aliases, Mapping) else aliases
        self.root = root
        self._entries: list[tuple[str, Path]] = []
        for key, target in items:
            key = key.rstrip("/") or key
            self._entries.append((key, normalize_path(root / target)))

    def __len__(self) -> int:
        return len(self._entries)

    def match(self, specifier: str) -> Path | None:
        best: tuple[str, Path] | None = None
        for key, target in self._entries:
            if specifier == key or specifier.startswith(key + "/"):
                if best is None or len(key) > len(best[0]):
                    best = (key, target)
        if best is None:
            return None
        key, target = best
        rest = specifier[len(key):].lstrip("/")
        return normalize_path(target / rest) if rest else target


class PathResolver:
    """Resolve specifiers against the file system. Holds no per-run state."""

    def __init__(
        self,
        root: Path,
        alias: Mapping[str, str] | None = None,
        extensions: Iterable[str] | None = None,
    ):
        self.root = normalize_path(root)
        self.aliases = AliasTable(alias or {}, self.root)
        self.extensions = rank_extensions(extensions or DEFAULT_EXTENSIONS)
        self._known = set(self.extensions)

    def is_local(self, specifier: str) -> bool:
        """True when the specifier names a project file rather than a package."""
        spec = strip_query(specifier)
        return (
            self.aliases.match(spec) is not None
            or os.path.isabs(spec)
            or spec.startswith(("./", "../"))
            or spec in (".", "..")
        )

    def base_paths(self, specifier: str, referrer: Path) -> list[Path]:
        """Candidate base paths before extension inference; empty for bare specifiers."""
        spec = strip_query(specifier)

        aliased = self.aliases.match(spec)
        if aliased is not None:
            return [aliased]

        if os.path.isabs(spec):
            candidates = [normalize_path(spec)]
            from_root = normalize_path(self.root / spec.lstrip("/\\"))
            if from_root != candidates[0]:
                candidates.append(from_root)
            return candidates

        if spec.startswith(("./", "../")) or spec in (".", ".."):
            return [normalize_path(referrer.parent / spec)]

        return []

    def resolve(self, specifier: str, referrer: Path) -> Path | None:
        """Resolve a specifier found in referrer to an existing file, or None."""
        for base in self.base_paths(specifier, referrer):
            found = self.locate(base)
            if found is not None:
                return found
        return None

    def locate(self, base: Path) -> Path | None:
        """Match a base path against the file system."""
        if base.suffix in self._known and base.is_file():
            return base

        for ext in self.extensions:
            candidate = Path(f"{base}{ext}")
            if candidate.is_file():
                return candidate

        if base.is_dir():
            for ext in self.extensions:
                candidate = base / f"index{ext}"
                if candidate.is_file():
                    return candidate

        # Existing file with an extension outside the known set (./data.json)
        if base.suffix and base.is_file():
            return base
        return None
