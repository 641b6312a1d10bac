"""Component scanner — single-file components (.vue, .svelte) and HTML pages.

A component is split into regions: every <script> block goes through the
script rules, every <style> block through the stylesheet rules of its `lang`
dialect, and the remaining markup is walked for resource attributes
(`src`, `href`, `:src`, `v-bind:src`, `srcset`, ...).
"""

from __future__ import annotations

import re
from html.parser import HTMLParser

from find_unused.models import ExtractionResult, FileCategory
from find_unused.scanner.base import BaseScanner
from find_unused.scanner.language_map import dialect_for
from find_unused.scanner.script_scanner import ScriptScanner, scan_expression
from find_unused.scanner.stylesheet_scanner import StylesheetScanner

# Script types that do not contain executable JS
_NON_JS_TYPES = {"application/json", "application/ld+json", "importmap"}

_REGION_OPEN_RE = re.compile(r"<(script|style)(?=[\s/>])([^>]*)>", re.IGNORECASE)
_ATTR_RE = re.compile(r"""([^\s=/>]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s>]+)))?""")
_QUOTED_LITERAL_RE = re.compile(r"""^\s*(['"`])([^'"`$]+)\1\s*$""")

_RESOURCE_ATTRS = {"src", "href", "poster", "data", "xlink:href"}
_SRCSET_ATTRS = {"srcset"}
_HREF_TAGS = {"link", "use", "image"}
_BIND_PREFIXES = (":", "v-bind:")


class _Region:
    """A located <script> or <style> block."""

    __slots__ = ("tag", "attrs", "content", "terminated")

    def __init__(self, tag: str, attrs: dict[str, str | None], content: str, terminated: bool):
        self.tag = tag
        self.attrs = attrs
        self.content = content
        self.terminated = terminated


def _parse_attrs(raw: str) -> dict[str, str | None]:
    attrs: dict[str, str | None] = {}
    for m in _ATTR_RE.finditer(raw):
        name = m.group(1).lower()
        value = next((g for g in m.group(2, 3, 4) if g is not None), None)
        attrs[name] = value
    return attrs


def split_regions(text: str) -> tuple[list[_Region], str]:
    """Split a component into script/style regions and the leftover markup."""
    regions: list[_Region] = []
    markup: list[str] = []
    pos = 0
    while True:
        m = _REGION_OPEN_RE.search(text, pos)
        if m is None:
            markup.append(text[pos:])
            break
        tag = m.group(1).lower()
        markup.append(text[pos:m.start()])
        close_re = re.compile(rf"</{tag}\s*>", re.IGNORECASE)
        close = close_re.search(text, m.end())
        if close is None:
            # Unterminated block: salvage everything up to end of file
            regions.append(_Region(tag, _parse_attrs(m.group(2)), text[m.end():], False))
            break
        regions.append(_Region(tag, _parse_attrs(m.group(2)), text[m.end():close.start()], True))
        pos = close.end()
    return regions, "".join(markup)


class _MarkupAttributeFinder(HTMLParser):
    """HTMLParser subclass that collects resource attribute values."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.literals: list[str] = []
        self.expressions: list[str] = []

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]):
        for name, value in attrs:
            if value is None:
                continue
            bound = name.startswith(_BIND_PREFIXES)
            base = name.split(":", 1)[1] if name.startswith("v-bind:") else name.lstrip(":")
            # <a href> points at routes and pages, not at bundled resources
            if base == "href" and tag not in _HREF_TAGS:
                continue
            if base in _SRCSET_ATTRS and not bound:
                for candidate in value.split(","):
                    url = candidate.strip().split(" ", 1)[0]
                    if url:
                        self.literals.append(url)
            elif base in _RESOURCE_ATTRS:
                if bound:
                    self.expressions.append(value)
                elif "{" not in value:
                    self.literals.append(value)

    handle_startendtag = handle_starttag


class ComponentScanner(BaseScanner):
    category = FileCategory.COMPONENT
    extensions = (".vue", ".svelte", ".html", ".htm")

    def __init__(self):
        self._script = ScriptScanner()

    def scan_text(self, text: str, result: ExtractionResult) -> None:
        regions, markup = split_regions(text)

        for region in regions:
            if not region.terminated:
                result.warnings.append(f"unterminated <{region.tag}> block")
            self._collect(result, region.attrs.get("src"))

            if region.tag == "script":
                script_type = (region.attrs.get("type") or "").lower()
                if script_type in _NON_JS_TYPES:
                    continue
                result.merge(self._script.extract(region.content))
            else:
                dialect = dialect_for(region.attrs.get("lang"))
                result.merge(StylesheetScanner(dialect).extract(region.content))

        self._scan_markup(markup, result)

    def _scan_markup(self, markup: str, result: ExtractionResult) -> None:
        finder = _MarkupAttributeFinder()
        try:
            finder.feed(markup)
            finder.close()
        except (AssertionError, ValueError) as e:
            result.warnings.append(f"markup parse error: {e}")

        for value in finder.literals:
            self._collect(result, value)
        for expression in finder.expressions:
            m = _QUOTED_LITERAL_RE.match(expression)
            if m:
                self._collect(result, m.group(2))
            else:
                scan_expression(expression, result)

        # import() inside template expressions, e.g. {{ import('./x') }}
        scan_expression(markup, result)
