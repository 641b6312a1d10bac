"""Data models for the file dependency graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from find_unused.models import UnresolvedReference


@dataclass
class DependencyEdge:
    source: Path
    target: Path
    specifier: str = ""  # first specifier that produced the edge


@dataclass
class DependencyGraph:
    """File-level adjacency.

    A key in ``forward`` means the file has been claimed for a visit; a key
    with an empty set means it was visited and references nothing resolvable.
    """
    forward: dict[Path, set[Path]] = field(default_factory=dict)  # source -> {targets}
    reverse: dict[Path, set[Path]] = field(default_factory=dict)  # target -> {sources}
    edges: list[DependencyEdge] = field(default_factory=list)

    def has_node(self, path: Path) -> bool:
        return path in self.forward

    def add_node(self, path: Path) -> bool:
        """Insert path with no edges; False if it was already present."""
        if path in self.forward:
            return False
        self.forward[path] = set()
        return True

    def add_edge(self, source: Path, target: Path, specifier: str = "") -> bool:
        """Add source -> target; duplicate edges collapse. Returns True if new."""
        targets = self.forward.setdefault(source, set())
        if target in targets:
            return False
        targets.add(target)
        self.reverse.setdefault(target, set()).add(source)
        self.edges.append(DependencyEdge(source=source, target=target, specifier=specifier))
        return True

    def targets(self) -> set[Path]:
        """Every file that is the target of at least one edge."""
        return set(self.reverse)

    def __len__(self) -> int:
        return len(self.forward)


@dataclass
class BuildResult:
    graph: DependencyGraph
    unresolved: list[UnresolvedReference] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
