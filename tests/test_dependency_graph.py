"""Tests for graph building, reachability, and cycle detection."""

import asyncio
from pathlib import Path

import pytest

from find_unused.analysis.dependency_graph import (
    ContentCache,
    DependencyGraphBuilder,
    detect_cycles,
    reachable_from,
)
from find_unused.analysis.graph_models import DependencyGraph
from find_unused.inventory import collect_files
from find_unused.resolver import PathResolver, normalize_path
from find_unused.scanner.language_map import DEFAULT_EXTENSIONS

FIXTURES = Path(__file__).parent / "fixtures"
PROJECT = normalize_path(FIXTURES / "project")


def _write(root: Path, name: str, text: str = "") -> Path:
    path = root / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return normalize_path(path)


def _builder(root: Path, concurrency: int = 4) -> DependencyGraphBuilder:
    resolver = PathResolver(root, {"@": "src"}, DEFAULT_EXTENSIONS)
    return DependencyGraphBuilder(resolver, concurrency=concurrency)


@pytest.fixture
def fixture_build():
    inventory = collect_files(PROJECT, ["src/**/*"], ["src/**/*.d.ts"])
    return inventory, _builder(PROJECT).build(inventory)


# ── Graph model ───────────────────────────────────────────────

def test_add_edge_collapses_duplicates():
    graph = DependencyGraph()
    a, b = Path("/p/a.ts"), Path("/p/b.ts")
    assert graph.add_edge(a, b, "./b")
    assert not graph.add_edge(a, b, "./b.ts")
    assert graph.forward[a] == {b}
    assert graph.reverse[b] == {a}
    assert len(graph.edges) == 1
    assert graph.targets() == {b}


def test_add_node_reports_presence():
    graph = DependencyGraph()
    a = Path("/p/a.ts")
    assert graph.add_node(a)
    assert not graph.add_node(a)
    assert graph.forward[a] == set()


# ── Builder ───────────────────────────────────────────────────

def test_builder_visits_every_inventory_file(fixture_build):
    inventory, build = fixture_build
    for path in inventory:
        assert build.graph.has_node(path)


def test_builder_resolves_script_component_and_style_edges(fixture_build):
    _, build = fixture_build
    forward = build.graph.forward
    src = PROJECT / "src"

    assert forward[src / "main.ts"] == {
        src / "utils/lazy-shim.ts",
        src / "App.vue",
        src / "styles/global.scss",
        src / "pages/Lazy.jsx",
    }
    assert forward[src / "App.vue"] == {
        src / "assets/logo.png",
        src / "components/Widget.tsx",
        src / "styles/theme.scss",
    }
    assert forward[src / "components/Widget.tsx"] == {src / "utils/index.ts"}
    assert forward[src / "styles/global.scss"] == {src / "assets/bg.png"}
    assert forward[src / "assets/logo.png"] == set()


def test_builder_records_unresolved_reference(fixture_build):
    _, build = fixture_build
    assert len(build.unresolved) == 1
    ref = build.unresolved[0]
    assert ref.specifier == "./missing"
    assert ref.referrer == PROJECT / "src/orphan.ts"
    assert "missing" in ref.reason
    # The referencing file is still a normal node
    assert build.graph.forward[PROJECT / "src/orphan.ts"] == set()


def test_builder_ignores_network_and_bare_specifiers(fixture_build):
    _, build = fixture_build
    assert not any("cdn.example.com" in r.specifier for r in build.unresolved)
    assert not any(r.specifier in ("vue", "react") for r in build.unresolved)


def test_builder_terminates_on_cycles(tmp_path):
    a = _write(tmp_path, "src/a.ts", 'import { b } from "./b";\n')
    b = _write(tmp_path, "src/b.ts", 'import { a } from "./a";\n')
    build = _builder(normalize_path(tmp_path)).build([a, b])
    assert build.graph.forward == {a: {b}, b: {a}}


def test_builder_follows_edges_outside_inventory(tmp_path):
    root = normalize_path(tmp_path)
    main = _write(tmp_path, "src/main.ts", 'import "./lib/util";\n')
    util = _write(tmp_path, "src/lib/util.ts", 'import "./deep";\n')
    deep = _write(tmp_path, "src/lib/deep.ts")
    build = _builder(root).build([main])
    assert build.graph.forward[util] == {deep}
    assert build.graph.has_node(deep)


def test_builder_entries_join_the_frontier(tmp_path):
    root = normalize_path(tmp_path)
    entry = _write(tmp_path, "index.ts", 'import "./src/a";\n')
    a = _write(tmp_path, "src/a.ts")
    build = _builder(root).build([a], entries=[entry])
    assert build.graph.forward[entry] == {a}


def test_builder_read_failure_is_a_warning(tmp_path):
    root = normalize_path(tmp_path)
    ghost = root / "src/ghost.ts"
    build = _builder(root).build([ghost])
    assert build.graph.forward[ghost] == set()
    assert len(build.warnings) == 1
    assert "could not read" in build.warnings[0]


def test_builder_is_deterministic(tmp_path):
    root = normalize_path(tmp_path)
    files = [
        _write(tmp_path, f"src/f{i}.ts", f'import "./missing{i}";\nimport "./f{(i + 1) % 8}";\n')
        for i in range(8)
    ]
    first = _builder(root, concurrency=8).build(files)
    second = _builder(root, concurrency=1).build(list(reversed(files)))
    assert first.graph.forward == second.graph.forward
    assert first.unresolved == second.unresolved


def test_builder_runs_are_isolated(tmp_path):
    root = normalize_path(tmp_path)
    a = _write(tmp_path, "src/a.ts", 'import "./b";\n')
    b = _write(tmp_path, "src/b.ts")
    builder = _builder(root)
    first = builder.build([a])
    b.unlink()
    second = builder.build([a])
    assert first.graph.forward[a] == {b}
    assert second.graph.forward[a] == set()
    assert [r.specifier for r in second.unresolved] == ["./b"]


# ── Content cache ─────────────────────────────────────────────

def test_content_cache_shares_concurrent_reads(tmp_path, monkeypatch):
    path = _write(tmp_path, "a.ts", "export const a = 1;\n")
    calls = []

    import find_unused.analysis.dependency_graph as dg
    original = dg._read_text

    def counting_read(p):
        calls.append(p)
        return original(p)

    monkeypatch.setattr(dg, "_read_text", counting_read)

    async def read_many():
        cache = ContentCache()
        texts = await asyncio.gather(*(cache.read(path) for _ in range(5)))
        again = await cache.read(path)
        return texts, again, cache

    texts, again, cache = asyncio.run(read_many())
    assert texts == ["export const a = 1;\n"] * 5
    assert again == texts[0]
    assert calls == [path]
    assert path in cache


# ── Reachability / cycles ─────────────────────────────────────

def test_reachable_from_includes_roots():
    graph = DependencyGraph()
    a, b, c, d = (Path(f"/p/{n}.ts") for n in "abcd")
    graph.add_edge(a, b)
    graph.add_edge(b, c)
    graph.add_node(d)
    assert reachable_from(graph, [a]) == {a, b, c}
    assert reachable_from(graph, []) == set()


def test_detect_cycles():
    graph = DependencyGraph()
    a, b, c = (Path(f"/p/{n}.ts") for n in "abc")
    graph.add_edge(a, b)
    graph.add_edge(b, a)
    graph.add_edge(b, c)
    cycles = detect_cycles(graph)
    assert cycles == [[a, b, a]]


def test_detect_cycles_handles_long_chains():
    graph = DependencyGraph()
    nodes = [Path(f"/p/n{i:05d}.ts") for i in range(5000)]
    for src, dst in zip(nodes, nodes[1:]):
        graph.add_edge(src, dst)
    assert detect_cycles(graph) == []
    assert len(reachable_from(graph, nodes[:1])) == len(nodes)
