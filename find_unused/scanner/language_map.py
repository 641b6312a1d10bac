"""Shared extension tables: file category, stylesheet dialect, resolution priority."""

from __future__ import annotations

import re
from collections.abc import Iterable

from find_unused.models import FileCategory, StyleDialect

EXT_TO_CATEGORY: dict[str, FileCategory] = {
    ".js": FileCategory.SCRIPT,
    ".jsx": FileCategory.SCRIPT,
    ".mjs": FileCategory.SCRIPT,
    ".cjs": FileCategory.SCRIPT,
    ".ts": FileCategory.SCRIPT,
    ".tsx": FileCategory.SCRIPT,
    ".mts": FileCategory.SCRIPT,
    ".cts": FileCategory.SCRIPT,
    ".vue": FileCategory.COMPONENT,
    ".svelte": FileCategory.COMPONENT,
    ".html": FileCategory.COMPONENT,
    ".htm": FileCategory.COMPONENT,
    ".css": FileCategory.STYLESHEET,
    ".scss": FileCategory.STYLESHEET,
    ".sass": FileCategory.STYLESHEET,
    ".less": FileCategory.STYLESHEET,
}

EXT_TO_DIALECT: dict[str, StyleDialect] = {
    ".css": StyleDialect.CSS,
    ".scss": StyleDialect.SCSS,
    ".sass": StyleDialect.SASS,
    ".less": StyleDialect.LESS,
}

# Lower rank wins when several files satisfy one specifier
EXTENSION_RANK: dict[str, int] = {
    # component / template
    ".vue": 0,
    ".svelte": 1,
    # script with JSX
    ".tsx": 10,
    ".jsx": 11,
    # plain script
    ".ts": 20,
    ".mts": 21,
    ".cts": 22,
    ".js": 23,
    ".mjs": 24,
    ".cjs": 25,
    # stylesheet
    ".scss": 30,
    ".sass": 31,
    ".less": 32,
    ".css": 33,
}

DEFAULT_EXTENSIONS: tuple[str, ...] = (
    ".vue", ".tsx", ".jsx", ".ts", ".js",
    ".scss", ".less", ".css",
    ".png", ".jpg", ".jpeg", ".gif", ".svg",
)

_EXT_IN_PATTERN_RE = re.compile(r"\.\{\w+(?:,\w+)*\}|\.\w+")


def category_for(suffix: str) -> FileCategory:
    """Category of a file, by its extension."""
    return EXT_TO_CATEGORY.get(suffix.lower(), FileCategory.OPAQUE)


def dialect_for(suffix_or_lang: str | None) -> StyleDialect:
    """Stylesheet dialect from an extension or a `<style lang=...>` value."""
    if not suffix_or_lang:
        return StyleDialect.CSS
    key = suffix_or_lang.lower()
    if not key.startswith("."):
        key = "." + key
    if key == ".postcss":
        return StyleDialect.CSS
    return EXT_TO_DIALECT.get(key, StyleDialect.CSS)


def rank_extensions(extensions: Iterable[str]) -> list[str]:
    """Order extensions by priority; unranked ones keep discovery order, last."""
    seen: list[str] = []
    for ext in extensions:
        ext = ext if ext.startswith(".") else f".{ext}"
        if ext not in seen:
            seen.append(ext)
    unranked = len(EXTENSION_RANK) * 100
    return sorted(seen, key=lambda e: EXTENSION_RANK.get(e, unranked))


def extensions_from_patterns(patterns: Iterable[str]) -> list[str]:
    """Derive known extensions from include globs such as `src/**/*.{ts,tsx}`.

    Falls back to DEFAULT_EXTENSIONS when no pattern names an extension.
    """
    found: list[str] = []
    for pattern in patterns:
        tail = pattern.rsplit("/", 1)[-1]
        for token in _EXT_IN_PATTERN_RE.findall(tail):
            if token.startswith(".{"):
                parts = token[2:-1].split(",")
            else:
                parts = [token[1:]]
            for part in parts:
                ext = f".{part}"
                if ext not in found:
                    found.append(ext)
    return rank_extensions(found or DEFAULT_EXTENSIONS)
