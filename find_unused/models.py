"""Data models for the find-unused analysis."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from find_unused.analysis.graph_models import DependencyGraph


class FileCategory(enum.Enum):
    SCRIPT = "script"
    COMPONENT = "component"
    STYLESHEET = "stylesheet"
    OPAQUE = "opaque"


class StyleDialect(enum.Enum):
    CSS = "css"
    SCSS = "scss"
    SASS = "sass"
    LESS = "less"


class ReachabilityPolicy(enum.Enum):
    EDGE_TARGET = "edge-target"
    ENTRY_ROOTED = "entry-rooted"


@dataclass(frozen=True)
class UnresolvedReference:
    """A local-looking specifier that matched no file on disk."""
    specifier: str
    referrer: Path
    reason: str

    def __str__(self) -> str:
        return f"{self.specifier} in {self.referrer}: {self.reason}"


@dataclass
class ExtractionResult:
    """Result from a scanner: ordered specifiers plus non-fatal warnings."""
    specifiers: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add(self, specifier: str) -> None:
        if specifier not in self.specifiers:
            self.specifiers.append(specifier)

    def merge(self, other: ExtractionResult) -> None:
        for spec in other.specifiers:
            self.add(spec)
        self.warnings.extend(other.warnings)


@dataclass
class AnalysisConfig:
    """Configuration for one analysis run."""
    root: Path = field(default_factory=lambda: Path("."))
    include: list[str] = field(default_factory=lambda: ["src/**/*"])
    exclude: list[str] = field(default_factory=lambda: ["src/**/*.d.ts"])
    alias: dict[str, str] = field(default_factory=lambda: {"@": "src"})
    entries: list[str] = field(default_factory=list)
    policy: ReachabilityPolicy = ReachabilityPolicy.EDGE_TARGET
    extensions: list[str] | None = None  # None = derive from include patterns
    dry_run: bool = True
    fail_on_unused: bool = False
    concurrency: int = 16


@dataclass
class AnalysisResult:
    """Everything a run produced, handed to reporting or deletion."""
    root: Path
    inventory: list[Path]
    graph: DependencyGraph
    unused: list[Path]
    policy: ReachabilityPolicy
    entries: list[Path] = field(default_factory=list)
    unresolved: list[UnresolvedReference] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    deleted: list[Path] = field(default_factory=list)
    delete_failures: dict[Path, str] = field(default_factory=dict)

    @property
    def used(self) -> list[Path]:
        unused = set(self.unused)
        return [p for p in self.inventory if p not in unused]

    def relative(self, path: Path) -> str:
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": self.root.as_posix(),
            "policy": self.policy.value,
            "entries": [self.relative(p) for p in self.entries],
            "total_files": len(self.inventory),
            "unused": [self.relative(p) for p in self.unused],
            "unresolved": [
                {
                    "specifier": ref.specifier,
                    "file": self.relative(ref.referrer),
                    "reason": ref.reason,
                }
                for ref in self.unresolved
            ],
            "warnings": list(self.warnings),
            "deleted": [self.relative(p) for p in self.deleted],
            "delete_failures": {
                self.relative(p): msg for p, msg in self.delete_failures.items()
            },
        }
