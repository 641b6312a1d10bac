"""Graph building and unused-file analysis."""

from __future__ import annotations

from find_unused.analysis.dead_code import detect_unused_files, used_files
from find_unused.analysis.dependency_graph import (
    ContentCache,
    DependencyGraphBuilder,
    detect_cycles,
    reachable_from,
)
from find_unused.analysis.graph_models import BuildResult, DependencyEdge, DependencyGraph

__all__ = [
    "BuildResult",
    "ContentCache",
    "DependencyEdge",
    "DependencyGraph",
    "DependencyGraphBuilder",
    "detect_cycles",
    "detect_unused_files",
    "reachable_from",
    "used_files",
]
