"""Scanner registry and dispatcher."""

from __future__ import annotations

from pathlib import Path

from find_unused.models import ExtractionResult, FileCategory, StyleDialect
from find_unused.scanner.base import BaseScanner, is_external
from find_unused.scanner.component_scanner import ComponentScanner
from find_unused.scanner.language_map import category_for, dialect_for
from find_unused.scanner.script_scanner import ScriptScanner
from find_unused.scanner.stylesheet_scanner import StylesheetScanner

_SCANNERS: dict[FileCategory, BaseScanner] = {
    FileCategory.SCRIPT: ScriptScanner(),
    FileCategory.COMPONENT: ComponentScanner(),
}
_STYLESHEET_SCANNERS: dict[StyleDialect, StylesheetScanner] = {
    dialect: StylesheetScanner(dialect) for dialect in StyleDialect
}


def get_scanner(
    category: FileCategory,
    dialect: StyleDialect = StyleDialect.CSS,
) -> BaseScanner | None:
    """Scanner for a category; None for opaque files."""
    if category is FileCategory.STYLESHEET:
        return _STYLESHEET_SCANNERS[dialect]
    return _SCANNERS.get(category)


def extract_specifiers(
    category: FileCategory,
    text: str,
    dialect: StyleDialect = StyleDialect.CSS,
) -> ExtractionResult:
    """Extract raw specifiers from text of the given category."""
    scanner = get_scanner(category, dialect)
    if scanner is None:
        return ExtractionResult()
    return scanner.extract(text)


def extract_file_specifiers(path: Path, text: str) -> ExtractionResult:
    """Extract specifiers from a file's text, dispatching on its extension."""
    category = category_for(path.suffix)
    return extract_specifiers(category, text, dialect_for(path.suffix))


__all__ = [
    "BaseScanner",
    "ScriptScanner",
    "ComponentScanner",
    "StylesheetScanner",
    "category_for",
    "extract_specifiers",
    "extract_file_specifiers",
    "get_scanner",
    "is_external",
]
