"""Dependency graph builder — walks files, extracts specifiers, resolves edges.

The traversal is a work queue drained by a bounded pool of asyncio workers.
A file is claimed (inserted into the graph with an empty edge set) before it
is queued, and claiming never suspends, so two branches can never both decide
to visit the same path; this is also what breaks import cycles. File reads and
existence checks run in worker threads.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Iterable
from pathlib import Path

from find_unused.analysis.graph_models import BuildResult, DependencyGraph
from find_unused.models import FileCategory, UnresolvedReference
from find_unused.resolver import PathResolver
from find_unused.scanner import category_for, extract_file_specifiers

logger = logging.getLogger(__name__)


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


class ContentCache:
    """Per-run file text cache; concurrent readers of one path share a single read."""

    def __init__(self):
        self._texts: dict[Path, str] = {}
        self._pending: dict[Path, asyncio.Task[str]] = {}

    def __contains__(self, path: Path) -> bool:
        return path in self._texts

    def __len__(self) -> int:
        return len(self._texts)

    async def read(self, path: Path) -> str:
        if path in self._texts:
            return self._texts[path]
        task = self._pending.get(path)
        if task is None:
            task = asyncio.ensure_future(asyncio.to_thread(_read_text, path))
            self._pending[path] = task
        try:
            text = await task
        finally:
            self._pending.pop(path, None)
        self._texts[path] = text
        return text


class _BuildRun:
    """State owned by a single build: graph, cache, diagnostics, work queue."""

    def __init__(self, resolver: PathResolver, concurrency: int):
        self.resolver = resolver
        self.concurrency = max(1, concurrency)
        self.graph = DependencyGraph()
        self.cache = ContentCache()
        self.unresolved: list[UnresolvedReference] = []
        self.warnings: list[str] = []
        self.queue: asyncio.Queue[Path] = asyncio.Queue()
        self._failure: BaseException | None = None

    def claim(self, path: Path) -> None:
        if self.graph.add_node(path):
            self.queue.put_nowait(path)

    async def execute(self, frontier: Iterable[Path]) -> BuildResult:
        for path in frontier:
            self.claim(path)

        workers = [asyncio.create_task(self._worker()) for _ in range(self.concurrency)]
        try:
            await self.queue.join()
        finally:
            for worker in workers:
                worker.cancel()
            await asyncio.gather(*workers, return_exceptions=True)

        if self._failure is not None:
            raise self._failure

        # Worker scheduling must not leak into the reported order
        self.unresolved.sort(key=lambda r: (str(r.referrer), r.specifier))
        self.warnings.sort()
        return BuildResult(graph=self.graph, unresolved=self.unresolved, warnings=self.warnings)

    async def _worker(self) -> None:
        while True:
            path = await self.queue.get()
            try:
                if self._failure is None:
                    await self.visit(path)
            except Exception as e:
                self._failure = e
            finally:
                self.queue.task_done()

    async def visit(self, path: Path) -> None:
        if category_for(path.suffix) is FileCategory.OPAQUE:
            return

        try:
            text = await self.cache.read(path)
        except OSError as e:
            logger.warning("Could not read file: %s (%s)", path, e)
            self.warnings.append(f"could not read {path}: {e.strerror or e}")
            return

        extraction = extract_file_specifiers(path, text)
        for warning in extraction.warnings:
            logger.warning("%s: %s", path, warning)
            self.warnings.append(f"{path}: {warning}")

        for specifier in extraction.specifiers:
            if not self.resolver.is_local(specifier):
                continue
            target = await asyncio.to_thread(self.resolver.resolve, specifier, path)
            if target is None:
                self._record_unresolved(specifier, path)
                continue
            self.graph.add_edge(path, target, specifier)
            self.claim(target)

    def _record_unresolved(self, specifier: str, referrer: Path) -> None:
        bases = self.resolver.base_paths(specifier, referrer)
        reason = "no file matches " + " or ".join(b.as_posix() for b in bases)
        logger.debug("Could not resolve: %s in %s", specifier, referrer)
        self.unresolved.append(UnresolvedReference(specifier, referrer, reason))


class DependencyGraphBuilder:
    """Build a file dependency graph starting from every file in an inventory."""

    def __init__(self, resolver: PathResolver, concurrency: int = 16):
        self.resolver = resolver
        self.concurrency = concurrency

    async def build_async(
        self,
        files: Iterable[Path],
        entries: Iterable[Path] = (),
    ) -> BuildResult:
        """Traverse entries and files; entries join the frontier even outside the inventory."""
        run = _BuildRun(self.resolver, self.concurrency)
        return await run.execute([*entries, *files])

    def build(self, files: Iterable[Path], entries: Iterable[Path] = ()) -> BuildResult:
        return asyncio.run(self.build_async(files, entries))


def reachable_from(graph: DependencyGraph, roots: Iterable[Path]) -> set[Path]:
    """BFS over outgoing edges; roots are included."""
    visited: set[Path] = set()
    queue = deque(roots)
    while queue:
        current = queue.popleft()
        if current in visited:
            continue
        visited.add(current)
        for neighbor in graph.forward.get(current, ()):
            if neighbor not in visited:
                queue.append(neighbor)
    return visited


def detect_cycles(graph: DependencyGraph) -> list[list[Path]]:
    """Detect import cycles with an iterative DFS.

    Each cycle is reported once, as the path from the first file of the cycle
    back to itself.
    """
    cycles: list[list[Path]] = []
    visited: set[Path] = set()

    for start in sorted(graph.forward):
        if start in visited:
            continue
        path: list[Path] = [start]
        on_stack: set[Path] = {start}
        stack = [iter(sorted(graph.forward.get(start, ())))]
        visited.add(start)

        while stack:
            neighbor = next(stack[-1], None)
            if neighbor is None:
                stack.pop()
                on_stack.discard(path.pop())
                continue
            if neighbor in on_stack:
                idx = path.index(neighbor)
                cycles.append(path[idx:] + [neighbor])
            elif neighbor not in visited:
                visited.add(neighbor)
                path.append(neighbor)
                on_stack.add(neighbor)
                stack.append(iter(sorted(graph.forward.get(neighbor, ()))))

    return cycles
