"""Click CLI with scan, graph, and serve subcommands."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from find_unused.analysis.dependency_graph import DependencyGraphBuilder, detect_cycles
from find_unused.config import ConfigError, load_config
from find_unused.inventory import collect_files
from find_unused.models import AnalysisConfig, AnalysisResult, ReachabilityPolicy
from find_unused.pipeline import UnusedFilesError, build_resolver, resolve_entries, run_analysis
from find_unused.resolver import normalize_path

_POLICY_CHOICES = [p.value for p in ReachabilityPolicy]


def _parse_aliases(values: tuple[str, ...]) -> dict[str, str] | None:
    if not values:
        return None
    aliases: dict[str, str] = {}
    for value in values:
        key, sep, target = value.partition("=")
        if not sep or not key or not target:
            raise click.BadParameter(f"expected KEY=PATH, got {value!r}", param_hint="--alias")
        aliases[key] = target
    return aliases


def _load(
    root: Path,
    config_path: Path | None,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
    alias: tuple[str, ...],
    entry: tuple[str, ...],
    policy: str | None,
    **flags,
) -> AnalysisConfig:
    try:
        return load_config(
            root,
            config_path,
            include=list(include) or None,
            exclude=list(exclude) or None,
            alias=_parse_aliases(alias),
            entries=list(entry) or None,
            policy=policy,
            **flags,
        )
    except ConfigError as e:
        raise click.ClickException(str(e))


def _config_options(func):
    options = [
        click.argument("root", type=click.Path(exists=True, file_okay=False, path_type=Path), default="."),
        click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="JSON config file (default: ROOT/find-unused.json)"),
        click.option("--include", "-i", multiple=True, help="Glob of files to analyze (repeatable)"),
        click.option("--exclude", "-x", multiple=True, help="Glob of files to skip (repeatable)"),
        click.option("--alias", "-a", multiple=True, metavar="KEY=PATH", help="Import alias, e.g. @=src (repeatable)"),
        click.option("--entry", "-e", multiple=True, help="Entry file relative to ROOT (repeatable)"),
        click.option("--policy", type=click.Choice(_POLICY_CHOICES), help="edge-target: referenced by any file (approximate); entry-rooted: reachable from an entry"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.version_option(version="0.1.0")
@click.option("--verbose", "-v", count=True, help="Increase log verbosity (-v, -vv)")
def cli(verbose: int):
    """find-unused: Find files no import, template, or stylesheet reaches."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@_config_options
@click.option("--delete", "delete", is_flag=True, help="Delete unused files instead of only reporting them")
@click.option("--fail-on-unused", is_flag=True, help="Exit with status 1 when unused files are found")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def scan(
    root: Path,
    config_path: Path | None,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
    alias: tuple[str, ...],
    entry: tuple[str, ...],
    policy: str | None,
    delete: bool,
    fail_on_unused: bool,
    as_json: bool,
):
    """Report (or delete) files nothing references."""
    config = _load(
        root, config_path, include, exclude, alias, entry, policy,
        dry_run=False if delete else None,
        fail_on_unused=True if fail_on_unused else None,
    )

    failure: UnusedFilesError | None = None
    try:
        result = run_analysis(config)
    except UnusedFilesError as e:
        failure = e
        result = e.result

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _print_report(result, dry_run=config.dry_run)

    if failure is not None:
        raise click.ClickException(str(failure))


def _print_report(result: AnalysisResult, dry_run: bool) -> None:
    click.echo(f"\nAnalyzed {len(result.inventory)} file(s) ({result.policy.value} policy)\n")

    if not result.unused:
        click.echo(click.style("No unused files found.", fg="green"))
    else:
        label = "Unused files" if dry_run else "Unused files (deleted)"
        click.echo(click.style(f"{label}: {len(result.unused)}", fg="yellow", bold=True))
        for path in result.unused:
            click.echo(f"  {result.relative(path)}")

    if result.unresolved:
        click.echo()
        click.echo(click.style(
            f"Unresolved references: {len(result.unresolved)} (target missing, possibly already deleted)",
            fg="red",
        ))
        for ref in result.unresolved:
            click.echo(
                f"  {click.style(ref.specifier, fg='cyan')}  "
                f"in {result.relative(ref.referrer)}"
            )

    if result.delete_failures:
        click.echo()
        click.echo(click.style(f"Could not delete {len(result.delete_failures)} file(s):", fg="red"))
        for path, message in result.delete_failures.items():
            click.echo(f"  {result.relative(path)}: {message}")

    if result.warnings:
        click.echo()
        click.echo(click.style(f"Warnings: {len(result.warnings)}", dim=True))
        for warning in result.warnings:
            click.echo(click.style(f"  {warning}", dim=True))
    click.echo()


@cli.command()
@_config_options
@click.option("--cycles/--no-cycles", default=True, help="Report import cycles")
def graph(
    root: Path,
    config_path: Path | None,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
    alias: tuple[str, ...],
    entry: tuple[str, ...],
    policy: str | None,
    cycles: bool,
):
    """Print the file dependency graph."""
    config = _load(root, config_path, include, exclude, alias, entry, policy)
    project_root = normalize_path(config.root)
    inventory = collect_files(project_root, config.include, config.exclude)
    builder = DependencyGraphBuilder(build_resolver(config), concurrency=config.concurrency)
    entries, _ = resolve_entries(config)
    build = builder.build(inventory, entries=entries)

    def rel(path: Path) -> str:
        try:
            return path.relative_to(project_root).as_posix()
        except ValueError:
            return path.as_posix()

    for source in sorted(build.graph.forward):
        targets = sorted(build.graph.forward[source])
        click.echo(click.style(rel(source), fg="cyan"))
        for target in targets:
            click.echo(f"  -> {rel(target)}")

    click.echo(f"\n{len(build.graph)} file(s), {len(build.graph.edges)} edge(s)")

    if cycles:
        found = detect_cycles(build.graph)
        if found:
            click.echo(click.style(f"\nImport cycles: {len(found)}", fg="yellow"))
            for cycle in found:
                click.echo("  " + " -> ".join(rel(p) for p in cycle))


@cli.command()
@click.option("--port", "-p", default=8421, help="Port number")
@click.option("--host", default="127.0.0.1", help="Host address")
def serve(port: int, host: str):
    """Start the HTTP API."""
    try:
        import uvicorn
    except ImportError:
        raise click.ClickException(
            "uvicorn is required for the HTTP API. "
            "Install with: pip install 'find-unused[web]'"
        )

    from find_unused.web import create_app

    click.echo(f"Starting find-unused API at http://{host}:{port}")
    uvicorn.run(create_app(), host=host, port=port, log_level="info")


if __name__ == "__main__":
    cli()
