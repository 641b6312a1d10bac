"""Analysis pipeline: inventory -> graph -> unused set -> delete -> policy check."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable

from find_unused.analysis.dead_code import detect_unused_files
from find_unused.analysis.dependency_graph import DependencyGraphBuilder
from find_unused.cleaner import delete_files_async
from find_unused.inventory import collect_files
from find_unused.models import AnalysisConfig, AnalysisResult, ReachabilityPolicy
from find_unused.resolver import PathResolver, normalize_path
from find_unused.scanner.language_map import extensions_from_patterns, rank_extensions

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], None]


class UnusedFilesError(Exception):
    """Unused files were found while fail_on_unused is enabled."""

    def __init__(self, result: AnalysisResult):
        self.result = result
        self.count = len(result.unused)
        super().__init__(f"Found {self.count} unused files")


def build_resolver(config: AnalysisConfig) -> PathResolver:
    """Resolver for a config; extensions come from the include globs unless given."""
    extensions = (
        rank_extensions(config.extensions)
        if config.extensions
        else extensions_from_patterns(config.include)
    )
    return PathResolver(normalize_path(config.root), config.alias, extensions)


def resolve_entries(config: AnalysisConfig) -> tuple[list[Path], list[str]]:
    """Existing entry files, plus a warning for each one that is missing."""
    root = normalize_path(config.root)
    entries: list[Path] = []
    warnings: list[str] = []
    for entry in config.entries:
        path = normalize_path(root / entry)
        if path.is_file():
            entries.append(path)
        else:
            logger.warning("Entry file not found: %s", path)
            warnings.append(f"entry file not found: {path}")
    return entries, warnings


async def run_analysis_async(
    config: AnalysisConfig,
    progress: ProgressCallback | None = None,
) -> AnalysisResult:
    """Run one full analysis. Raises UnusedFilesError only after everything else is done."""
    root = normalize_path(config.root)
    logger.info("Analyzing unused files in %s", root)

    # Stage 1: Inventory
    if progress:
        progress("Collecting files", 0, 1)
    inventory = await asyncio.to_thread(collect_files, root, config.include, config.exclude)
    if progress:
        progress("Collecting files", 1, 1)
    logger.debug("Inventory: %d file(s)", len(inventory))

    resolver = build_resolver(config)
    entries, warnings = resolve_entries(config)

    rootless = config.policy is ReachabilityPolicy.ENTRY_ROOTED and not entries
    if rootless:
        logger.warning("entry-rooted policy without entries: every file will be reported unused")
    elif config.policy is ReachabilityPolicy.EDGE_TARGET:
        logger.debug("edge-target policy: files referenced only by unused files count as used")

    # Stage 2: Graph
    if progress:
        progress("Building graph", 0, 1)
    builder = DependencyGraphBuilder(resolver, concurrency=config.concurrency)
    build = await builder.build_async(inventory, entries=entries)
    if progress:
        progress("Building graph", 1, 1)

    # Stage 3: Unused set
    unused = detect_unused_files(inventory, build.graph, config.policy, entries)
    result = AnalysisResult(
        root=root,
        inventory=inventory,
        graph=build.graph,
        unused=unused,
        policy=config.policy,
        entries=entries,
        unresolved=build.unresolved,
        warnings=warnings + build.warnings,
    )
    logger.info(
        "%d of %d file(s) unused, %d unresolved reference(s)",
        len(unused), len(inventory), len(build.unresolved),
    )

    # Stage 4: Delete
    if not config.dry_run and unused and rootless:
        logger.warning("Not deleting: entry-rooted policy has no entry files")
        result.warnings.append("deletion skipped: entry-rooted policy without entry files")
    elif not config.dry_run and unused:
        if progress:
            progress("Deleting", 0, len(unused))
        result.deleted, result.delete_failures = await delete_files_async(unused)
        if progress:
            progress("Deleting", len(unused), len(unused))

    logger.info("Unused files analysis complete.")

    # Stage 5: Policy check
    if config.fail_on_unused and unused:
        raise UnusedFilesError(result)
    return result


def run_analysis(
    config: AnalysisConfig,
    progress: ProgressCallback | None = None,
) -> AnalysisResult:
    """Synchronous wrapper around run_analysis_async."""
    return asyncio.run(run_analysis_async(config, progress))
