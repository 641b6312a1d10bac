"""JavaScript/TypeScript scanner using regex patterns."""

from __future__ import annotations

import re

from find_unused.models import ExtractionResult, FileCategory
from find_unused.scanner.base import BaseScanner

# A string literal is matched first and kept, so "/admin/*" never opens a comment
_COMMENT_OR_STRING_RE = re.compile(
    r"""("(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*'|`(?:\\.|[^`\\])*`)|/\*.*?\*/""",
    re.DOTALL,
)
_LINE_COMMENT_RE = re.compile(r"^[ \t]*//.*$", re.MULTILINE)

# import x from "a"; export { y } from "a"; import type { Z } from "a"
_FROM_RE = re.compile(r"""\b(?:import|export)\b[^;'"`]*?\bfrom\s*(['"])([^'"\n]+)\1""")
# import "a";
_SIDE_EFFECT_IMPORT_RE = re.compile(r"""\bimport\s*(['"])([^'"\n]+)\1""")
# import("a") / import(`a`) without interpolation
_DYNAMIC_IMPORT_RE = re.compile(r"""\bimport\s*\(\s*(['"`])([^'"`$\n]+)\1\s*[,)]""")
_REQUIRE_RE = re.compile(r"""\brequire(?:\.resolve)?\s*\(\s*(['"`])([^'"`$\n]+)\1\s*\)""")
# React.lazy(() => import("./Page")), defineAsyncComponent(() => import(...))
_LAZY_RE = re.compile(
    r"""\b(?:lazy|defineAsyncComponent|loadable)\s*\(\s*(?:async\s*)?\(\s*\)\s*=>\s*"""
    r"""\{?\s*(?:return\s+)?import\s*\(\s*(['"`])([^'"`$\n]+)\1\s*\)""",
)
# <img src="./logo.png" /> and friends inside JSX / template strings; attributes
# take no spaces around "=", assignments such as `img.src = "x"` do
_ATTR_RE = re.compile(r"""(?<=\s)(?:src|href|poster)=(['"])([^'"\n]+)\1""")
# url() inside CSS-in-JS
_URL_RE = re.compile(r"""\burl\(\s*(['"]?)([^'")\s]+)\1\s*\)""")

_PATTERNS = (
    _FROM_RE,
    _SIDE_EFFECT_IMPORT_RE,
    _DYNAMIC_IMPORT_RE,
    _REQUIRE_RE,
    _LAZY_RE,
    _ATTR_RE,
    _URL_RE,
)


def scan_expression(expression: str, result: ExtractionResult) -> None:
    """Collect import()/require() targets from a template expression."""
    found: list[tuple[int, str]] = []
    for pattern in (_DYNAMIC_IMPORT_RE, _REQUIRE_RE):
        for m in pattern.finditer(expression):
            found.append((m.start(2), m.group(2)))
    found.sort(key=lambda f: f[0])
    for _, spec in found:
        BaseScanner._collect(result, spec)


def strip_script_comments(source: str) -> str:
    """Drop block comments and whole-line `//` comments.

    Trailing `//` comments are left alone; `//` also starts protocol-relative
    URLs inside string literals.
    """
    source = _LINE_COMMENT_RE.sub("", source)
    return _COMMENT_OR_STRING_RE.sub(_keep_strings, source)


def _keep_strings(m: re.Match[str]) -> str:
    if m.group(1) is not None:
        return m.group(1)
    return "\n" * m.group(0).count("\n")


class ScriptScanner(BaseScanner):
    category = FileCategory.SCRIPT
    extensions = (".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx", ".mts", ".cts")

    def scan_text(self, text: str, result: ExtractionResult) -> None:
        source = strip_script_comments(text)
        found: list[tuple[int, str]] = []
        for pattern in _PATTERNS:
            for m in pattern.finditer(source):
                found.append((m.start(2), m.group(2)))

        # Report in source order regardless of which pattern matched
        found.sort(key=lambda f: f[0])
        for _, spec in found:
            self._collect(result, spec)
