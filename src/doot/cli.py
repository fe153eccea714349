"""doot CLI: Typer application with import, export, list, status, and init commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from doot import __version__
from doot.config.schema import DootConfig
from doot.sync.models import Direction, Plan

app = typer.Typer(
    name="doot",
    help="Sync dotfiles between a repository and the filesystem.",
    add_completion=False,
    no_args_is_help=True,
)
import_app = typer.Typer(
    help="Copy files from the filesystem into the repository.",
    no_args_is_help=True,
)
export_app = typer.Typer(
    help="Put files from the repository in place on the filesystem.",
    no_args_is_help=True,
)
app.add_typer(import_app, name="import")
app.add_typer(export_app, name="export")

console = Console(stderr=True)

_RESOLVER_HELP = "Resolver tag (defaults to $DOOT_RESOLVER)"


@dataclass
class Options:
    """Global options shared by every command."""

    config: Optional[str] = None
    yes: bool = False
    verbose: bool = False
    debug: bool = False


def _options(ctx: typer.Context) -> Options:
    return ctx.obj if isinstance(ctx.obj, Options) else Options()


def _load(options: Options) -> DootConfig:
    """Load doot.yaml, exit 2 on failure."""
    from doot.config.loader import ConfigError, load_config

    try:
        cfg = load_config(options.config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc

    if options.verbose or options.debug:
        console.print(f"[dim]Config root: {cfg.root}[/dim]")
        console.print(f"[dim]Mode: {cfg.mode.value}[/dim]")
    return cfg


def _pick_resolver(cfg: DootConfig, resolver: Optional[str]) -> str:
    tag = resolver or cfg.default_resolver
    if not tag:
        console.print(
            "[bold red]Error:[/bold red] no resolver given and DOOT_RESOLVER is not set"
        )
        raise typer.Exit(code=2)
    return tag


def _show_diffs(plan: Plan) -> None:
    from doot.diff.differ import diff_change
    from doot.output import terminal

    for group in plan.groups:
        for change in group.pending_changes():
            try:
                result = diff_change(change)
            except OSError as exc:
                terminal.render_diff_error(change, exc, console=console)
                continue
            terminal.render_diff(change, result, group=group.name, console=console)
    console.print()


def _run(
    ctx: typer.Context,
    direction: Direction,
    operation: str,
    select: Callable[[DootConfig], List[str]],
    resolver: Optional[str],
    dry_run: bool,
) -> None:
    """Plan, preview, confirm and apply one import or export."""
    from doot.apply.executor import apply_changes
    from doot.config.resolver import PathResolutionError
    from doot.config.schema import ConfigError, Mode
    from doot.output import terminal
    from doot.output.prompt import confirm
    from doot.sync.planner import build_plan

    options = _options(ctx)
    cfg = _load(options)
    tag = _pick_resolver(cfg, resolver)

    # --- Resolve every path before anything is scanned ---
    try:
        plan = build_plan(cfg, direction, select(cfg), tag, operation)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc
    except PathResolutionError as exc:
        console.print(f"[bold red]Path error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc

    terminal.render_plan(plan, console=console)
    had_errors = bool(plan.warnings or plan.errors)

    if not plan.has_changes:
        console.print("Nothing to do.")
        raise typer.Exit(code=1 if had_errors else 0)

    if dry_run:
        console.print("[dim]Dry run: nothing was changed.[/dim]")
        raise typer.Exit(code=1 if had_errors else 0)

    if not options.yes and not confirm(lambda: _show_diffs(plan), console=console):
        console.print("Aborted.")
        raise typer.Exit(code=0)

    # Imports always copy; the repository never holds links into $HOME.
    mode = cfg.mode if direction == Direction.EXPORT else Mode.COPY
    report = apply_changes(plan.pending_changes(), mode)
    terminal.render_report(report, console=console)

    if had_errors or report.has_failures:
        raise typer.Exit(code=1)


def _one_group(name: str) -> Callable[[DootConfig], List[str]]:
    def select(cfg: DootConfig) -> List[str]:
        cfg.get_group(name)
        return [name]

    return select


def _plan_groups(name: str) -> Callable[[DootConfig], List[str]]:
    return lambda cfg: cfg.get_plan_groups(name)


# ── import ────────────────────────────────────────────────────────────────────


@import_app.command("group")
def import_group(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Group name"),
    resolver: Optional[str] = typer.Argument(None, help=_RESOLVER_HELP),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the plan without applying it"),
) -> None:
    """Import one group from the filesystem."""
    _run(ctx, Direction.IMPORT, f"Import group '{name}'", _one_group(name), resolver, dry_run)


@import_app.command("plan")
def import_plan(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Plan name"),
    resolver: Optional[str] = typer.Argument(None, help=_RESOLVER_HELP),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the plan without applying it"),
) -> None:
    """Import every group of a plan from the filesystem."""
    _run(ctx, Direction.IMPORT, f"Import plan '{name}'", _plan_groups(name), resolver, dry_run)


# ── export ────────────────────────────────────────────────────────────────────


@export_app.command("group")
def export_group(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Group name"),
    resolver: Optional[str] = typer.Argument(None, help=_RESOLVER_HELP),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the plan without applying it"),
) -> None:
    """Export one group to the filesystem."""
    _run(ctx, Direction.EXPORT, f"Export group '{name}'", _one_group(name), resolver, dry_run)


@export_app.command("plan")
def export_plan(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Plan name"),
    resolver: Optional[str] = typer.Argument(None, help=_RESOLVER_HELP),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the plan without applying it"),
) -> None:
    """Export every group of a plan to the filesystem."""
    _run(ctx, Direction.EXPORT, f"Export plan '{name}'", _plan_groups(name), resolver, dry_run)


# ── list ──────────────────────────────────────────────────────────────────────


@app.command("list")
def list_(ctx: typer.Context) -> None:
    """Show the configured plans and groups."""
    from doot.output import terminal

    cfg = _load(_options(ctx))
    terminal.render_list(cfg, console=console)


# ── status ────────────────────────────────────────────────────────────────────


@app.command()
def status(
    ctx: typer.Context,
    resolver: Optional[str] = typer.Argument(None, help=_RESOLVER_HELP),
    format: str = typer.Option("terminal", "--format", "-f", help="Output format: terminal | json"),
) -> None:
    """Show which groups and plans are in sync with the filesystem."""
    from doot.config.schema import ConfigError
    from doot.output import json_report, terminal
    from doot.sync.status import check_all

    if format not in ("terminal", "json"):
        console.print(f"[bold red]Invalid format:[/bold red] {format}")
        raise typer.Exit(code=2)

    cfg = _load(_options(ctx))
    tag = _pick_resolver(cfg, resolver)

    try:
        groups, plans = check_all(cfg, tag)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc

    if format == "json":
        print(json_report.render_status(tag, groups, plans))
    else:
        terminal.render_status(tag, groups, plans, console=console)

    if any(g.error or g.warnings for g in groups):
        raise typer.Exit(code=1)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(ctx: typer.Context) -> None:
    """Generate a starter doot.yaml in the current directory."""
    from doot.config.defaults import DEFAULT_YAML
    from doot.config.loader import CONFIG_FILENAME

    options = _options(ctx)
    config_path = Path(options.config) if options.config else Path.cwd() / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {config_path.name} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(DEFAULT_YAML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"doot {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to doot.yaml"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Apply without asking"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output"),
) -> None:
    """doot: sync dotfiles between a repository and the filesystem."""
    from doot.log import setup_logging

    setup_logging(verbose=verbose, debug=debug)
    ctx.obj = Options(config=config, yes=yes, verbose=verbose, debug=debug)
