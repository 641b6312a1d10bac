"""Unused-file detector — partitions the inventory into used and unused files."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from find_unused.analysis.dependency_graph import reachable_from
from find_unused.analysis.graph_models import DependencyGraph
from find_unused.models import ReachabilityPolicy


def used_files(
    graph: DependencyGraph,
    policy: ReachabilityPolicy,
    entries: Iterable[Path] = (),
) -> set[Path]:
    """Files considered used under a policy.

    EDGE_TARGET: every file targeted by some edge, whether or not the source
    of that edge is itself used. Files that only reference each other count
    as used; this is an approximation, not reachability.

    ENTRY_ROOTED: every file reachable from the declared entries.

    Declared entries are always used.
    """
    entries = set(entries)
    if policy is ReachabilityPolicy.ENTRY_ROOTED:
        return reachable_from(graph, sorted(entries))
    return graph.targets() | entries


def detect_unused_files(
    inventory: Iterable[Path],
    graph: DependencyGraph,
    policy: ReachabilityPolicy = ReachabilityPolicy.EDGE_TARGET,
    entries: Iterable[Path] = (),
) -> list[Path]:
    """Inventory files that are not used, in inventory order, without duplicates."""
    used = used_files(graph, policy, entries)
    unused: list[Path] = []
    seen: set[Path] = set()
    for path in inventory:
        if path in used or path in seen:
            continue
        seen.add(path)
        unused.append(path)
    return unused
