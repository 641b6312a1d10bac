"""Abstract base scanner."""

from __future__ import annotations

import abc
import re

from find_unused.models import ExtractionResult, FileCategory

# Network locations and inline data are never graph edges
_EXTERNAL_RE = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.-]*:|//)")
_WINDOWS_DRIVE_RE = re.compile(r"^[a-zA-Z]:[\\/]")


def is_external(specifier: str) -> bool:
    """True for data URIs, absolute URLs (http:, https:, mailto:, ...) and `//host` forms."""
    if _WINDOWS_DRIVE_RE.match(specifier):
        return False
    return bool(_EXTERNAL_RE.match(specifier))


class BaseScanner(abc.ABC):
    """Base class for category-specific specifier scanners.

    A scanner turns the text of one file into the ordered list of raw
    specifiers it references. It never touches the file system and never
    raises on malformed input; problems are reported as warnings on the
    returned ExtractionResult.
    """

    category: FileCategory
    extensions: tuple[str, ...]

    @abc.abstractmethod
    def scan_text(self, text: str, result: ExtractionResult) -> None:
        """Append every specifier found in text to result."""

    def extract(self, text: str) -> ExtractionResult:
        result = ExtractionResult()
        try:
            self.scan_text(text, result)
        except (ValueError, IndexError, RecursionError) as e:
            result.warnings.append(f"{type(self).__name__} stopped early: {e}")
        return result

    @staticmethod
    def _collect(result: ExtractionResult, raw: str | None) -> None:
        if raw is None:
            return
        spec = raw.strip()
        if not spec or is_external(spec) or spec.startswith("#"):
            return
        result.add(spec)
