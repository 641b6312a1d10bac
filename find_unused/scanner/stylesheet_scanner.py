"""Stylesheet scanner — @import/@use/@forward targets and url() references."""

from __future__ import annotations

import re

from find_unused.models import ExtractionResult, FileCategory, StyleDialect
from find_unused.scanner.base import BaseScanner

# Quoted strings are matched first and kept; content: "/*" is not a comment
_COMMENT_OR_STRING_RE = re.compile(
    r"""("(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*')|/\*.*?\*/""",
    re.DOTALL,
)
# Line comments exist only in the preprocessor dialects
_LINE_COMMENT_RE = re.compile(r"^[ \t]*//.*$", re.MULTILINE)

# @import "a", "b" screen;  @import url("a.css");  @import (reference) "a.less";
_IMPORT_RULE_RE = re.compile(
    r"""@(import|use|forward)\s+(?:\([^)]*\)\s*)?([^;{}\n]*)""",
)
_QUOTED_RE = re.compile(r"""(['"])([^'"\n]+)\1""")
_URL_RE = re.compile(r"""\burl\(\s*(['"]?)([^'")\s]+)\1\s*\)""")
# Indented Sass: @import partials/reset, theme
_BARE_IMPORT_TARGET_RE = re.compile(r"^[\w./@~-][\w./@~-]*$")


class StylesheetScanner(BaseScanner):
    category = FileCategory.STYLESHEET
    extensions = (".css", ".scss", ".sass", ".less")

    def __init__(self, dialect: StyleDialect = StyleDialect.CSS):
        self.dialect = dialect

    def scan_text(self, text: str, result: ExtractionResult) -> None:
        source = text
        if self.dialect is not StyleDialect.CSS:
            source = _LINE_COMMENT_RE.sub("", source)
        source = _COMMENT_OR_STRING_RE.sub(_keep_strings, source)

        found: list[tuple[int, str]] = []
        for m in _IMPORT_RULE_RE.finditer(source):
            rule, params = m.group(1), m.group(2)
            offset = m.start(2)
            if rule in ("use", "forward") and self.dialect not in (StyleDialect.SCSS, StyleDialect.SASS):
                continue
            quoted = list(_QUOTED_RE.finditer(params))
            if quoted:
                for q in quoted:
                    # url("a.css") is picked up by the url() pass below
                    if params[:q.start()].rstrip().endswith("url("):
                        continue
                    found.append((offset + q.start(2), q.group(2)))
            elif self.dialect is StyleDialect.SASS:
                for part in params.split(","):
                    target = part.strip()
                    if _BARE_IMPORT_TARGET_RE.match(target):
                        found.append((offset + params.find(target), target))

        for m in _URL_RE.finditer(source):
            found.append((m.start(2), m.group(2)))

        found.sort(key=lambda f: f[0])
        for _, spec in found:
            self._collect(result, _strip_loader_prefix(spec))


def _keep_strings(m: re.Match[str]) -> str:
    if m.group(1) is not None:
        return m.group(1)
    return "\n" * m.group(0).count("\n")


def _strip_loader_prefix(spec: str) -> str:
    # webpack-style "~@/styles/x" module prefix
    if spec.startswith("~") and not spec.startswith("~/"):
        return spec[1:]
    return spec
