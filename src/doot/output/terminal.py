"""Rich terminal reporter: plans, diffs, apply reports, status and listings."""

from __future__ import annotations

from typing import List, Optional, Sequence, Union

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from doot.apply.models import ApplyReport, ApplyStatus
from doot.config.schema import DootConfig
from doot.diff.models import BinaryDiff, DiffHunk, DiffLine, DiffOp
from doot.sync.models import Change, ChangeKind, GroupPlan, Plan
from doot.sync.status import GroupStatusResult, PlanStatusResult, SyncStatus

CONTEXT_LINES = 3

_KIND_STYLE = {
    ChangeKind.CREATE: ("[+]", "green"),
    ChangeKind.OVERWRITE: ("[~]", "yellow"),
    ChangeKind.SAME: ("[✓]", "dim"),
}

_STATUS_STYLE = {
    SyncStatus.IN_SYNC: "bold green",
    SyncStatus.OUT_OF_SYNC: "bold yellow",
    SyncStatus.NEW: "bold cyan",
    SyncStatus.SKIPPED: "dim",
}

_OP_SIGN = {DiffOp.EQUAL: " ", DiffOp.DELETE: "-", DiffOp.INSERT: "+"}
_OP_STYLE = {DiffOp.EQUAL: "", DiffOp.DELETE: "red", DiffOp.INSERT: "green"}
_OP_BACKGROUND = {DiffOp.DELETE: "on #3b1d1d", DiffOp.INSERT: "on #1d3b22"}


def _console(console: Optional[Console]) -> Console:
    return console if console is not None else Console(stderr=True)


# ── plan ──────────────────────────────────────────────────────────────────────


def _change_line(change: Change) -> Text:
    icon, style = _KIND_STYLE[change.kind]
    line = Text("    ")
    line.append(icon, style=f"bold {style}")
    line.append(" ")
    line.append(change.relative_path, style=style if change.kind == ChangeKind.SAME else "")
    line.append(f" ({change.kind.value})", style="dim")
    if change.type_mismatch:
        on_disk = change.destination
        what = "a directory" if on_disk and on_disk.is_directory else "a different kind of entry"
        line.append(f"  ⚠ destination is {what}", style="bold red")
    return line


def _render_group(console: Console, group: GroupPlan) -> None:
    console.print(Text(f"  {group.name}:", style="bold"))
    if group.error:
        console.print(f"    [red]✗ {escape(group.error)}[/red]")
        return
    for change in group.changes:
        console.print(_change_line(change))
    for warning in group.warnings:
        console.print(f"    [yellow]⚠ {escape(str(warning))}[/yellow]")
    if not group.changes and not group.warnings:
        console.print("    [dim](no files)[/dim]")


def render_plan(plan: Plan, *, console: Optional[Console] = None) -> None:
    """Print every group of *plan* with a per-file status and a summary line."""
    console = _console(console)
    console.print()
    console.print(Text(f"{plan.operation}:", style="bold"))
    for group in plan.groups:
        _render_group(console, group)
    if plan.is_empty and not plan.errors:
        console.print("  [dim]No files in scope.[/dim]")

    counts = plan.counts()
    console.print()
    console.print(
        f"[dim]Summary:[/dim] {counts[ChangeKind.SAME.value]} same, "
        f"[green]{counts[ChangeKind.CREATE.value]} to create[/green], "
        f"[yellow]{counts[ChangeKind.OVERWRITE.value]} to overwrite[/yellow]"
    )


# ── diff ──────────────────────────────────────────────────────────────────────


def _collapse(hunks: Sequence[DiffHunk], context: int) -> List[Optional[DiffLine]]:
    """Flatten hunks, trimming long EQUAL runs; None marks a gap."""
    lines: List[Optional[DiffLine]] = []
    last = len(hunks) - 1
    for index, hunk in enumerate(hunks):
        if hunk.op != DiffOp.EQUAL or len(hunk.lines) <= 2 * context:
            lines.extend(hunk.lines)
            continue
        head = hunk.lines[:context] if index > 0 else ()
        tail = hunk.lines[-context:] if index < last else ()
        lines.extend(head)
        lines.append(None)
        lines.extend(tail)
    return lines


def _line_number(value: Optional[int]) -> str:
    return f"{value:>4}" if value is not None else "    "


def _highlight(syntax: Optional[Syntax], text: str) -> Text:
    content = text.rstrip("\n").rstrip("\r")
    if syntax is None:
        return Text(content)
    highlighted = syntax.highlight(content)
    if highlighted.plain.endswith("\n"):
        highlighted.right_crop(1)
    return highlighted


def _diff_line(line: DiffLine, syntax: Optional[Syntax]) -> Text:
    body = _highlight(syntax, line.text)
    if line.op in _OP_BACKGROUND:
        body.stylize(_OP_BACKGROUND[line.op])
    row = Text()
    row.append(_line_number(line.destination_line), style="dim")
    row.append(" ")
    row.append(_line_number(line.source_line), style="dim")
    row.append(f" {_OP_SIGN[line.op]} ", style=f"bold {_OP_STYLE[line.op]}".strip())
    row.append_text(body)
    return row


def _syntax_for(path: str, hunks: Sequence[DiffHunk], theme: str) -> Syntax:
    code = "".join(hunk.text for hunk in hunks)
    lexer = Syntax.guess_lexer(path, code=code)
    return Syntax("", lexer, theme=theme)


def render_diff(
    change: Change,
    result: Sequence[Union[DiffHunk, BinaryDiff]],
    *,
    group: str,
    console: Optional[Console] = None,
    context: int = CONTEXT_LINES,
    highlight: bool = True,
    theme: str = "monokai",
) -> None:
    """Print one change's diff, destination first and source second."""
    console = _console(console)
    label = f"{group}/{change.relative_path}"

    console.print()
    if change.type_mismatch and change.destination is not None and change.destination.is_directory:
        console.print(
            f"[bold red]⚠ {escape(label)}: destination is a directory and will be "
            f"replaced by a file.[/bold red]"
        )
        return

    console.print(Text(f"--- {label} (destination)", style="bold red"))
    console.print(Text(f"+++ {label} (source)", style="bold green"))

    if result and isinstance(result[0], BinaryDiff):
        binary = result[0]
        console.print(
            f"[dim]Binary files differ "
            f"(destination {binary.destination_size} bytes, source {binary.source_size} bytes)[/dim]"
        )
        return

    hunks = [item for item in result if isinstance(item, DiffHunk)]
    syntax = _syntax_for(change.relative_path, hunks, theme) if highlight else None
    for line in _collapse(hunks, context):
        if line is None:
            console.print(Text("          ⋯", style="dim cyan"))
        else:
            console.print(_diff_line(line, syntax))


def render_diff_error(change: Change, error: OSError, *, console: Optional[Console] = None) -> None:
    console = _console(console)
    console.print(f"[bold red]Cannot diff {escape(change.relative_path)}:[/bold red] {escape(str(error))}")


# ── apply report ──────────────────────────────────────────────────────────────


def render_report(report: ApplyReport, *, console: Optional[Console] = None) -> None:
    """Print one line per applied or failed path and a closing tally."""
    console = _console(console)
    for outcome in report.outcomes:
        if outcome.status == ApplyStatus.FAILED:
            console.print(
                f"  [red]✗[/red] {escape(outcome.relative_path)}: {escape(outcome.error or 'failed')}"
            )
        elif outcome.status == ApplyStatus.APPLIED:
            verb = "Created" if outcome.change.kind == ChangeKind.CREATE else "Updated"
            console.print(f"  [green]✓[/green] [dim]{verb}[/dim] {escape(outcome.relative_path)}")

    console.print()
    if report.has_failures:
        console.print(
            f"[bold yellow]⚠ {len(report.applied)} applied, "
            f"{len(report.failed)} failed.[/bold yellow]"
        )
    else:
        console.print(f"[bold green]Done! {len(report.applied)} file(s) applied.[/bold green]")


# ── status ────────────────────────────────────────────────────────────────────


def _status_cell(status: SyncStatus) -> Text:
    return Text(status.value, style=_STATUS_STYLE[status])


def render_status(
    resolver: str,
    groups: Sequence[GroupStatusResult],
    plans: Sequence[PlanStatusResult],
    *,
    console: Optional[Console] = None,
) -> None:
    console = _console(console)
    console.print()

    table = Table(title=f"Groups ({resolver})", title_style="bold", border_style="dim")
    table.add_column("Group", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Pending", justify="right")
    table.add_column("Note", style="dim")
    for group in groups:
        pending = sum(1 for c in group.changes if c.is_pending)
        note = group.error or (f"{group.warnings} warning(s)" if group.warnings else "")
        table.add_row(group.name, _status_cell(group.status), str(pending), note)
    console.print(table)

    if plans:
        plan_table = Table(title="Plans", title_style="bold", border_style="dim")
        plan_table.add_column("Plan", style="magenta")
        plan_table.add_column("Status", justify="center")
        for plan in plans:
            plan_table.add_row(plan.name, _status_cell(plan.status))
        console.print(plan_table)


# ── list ──────────────────────────────────────────────────────────────────────


def render_list(config: DootConfig, *, console: Optional[Console] = None) -> None:
    """Print the configured plans and groups as a tree."""
    console = _console(console)
    root = Tree(Text(f"doot ({config.mode.value} mode)", style="bold"))

    plans = root.add(Text("plans", style="bold magenta"))
    for name in sorted(config.plans):
        members = config.plans[name]
        summary = ", ".join(members) if members else "(all groups)"
        plans.add(Text.assemble((name, "magenta"), ": ", (summary, "dim")))

    groups = root.add(Text("groups", style="bold cyan"))
    for name in sorted(config.groups):
        node = groups.add(Text(name, style="cyan"))
        resolvers = config.groups[name]
        if not resolvers:
            node.add(Text("(no resolvers)", style="dim"))
        for tag in sorted(resolvers):
            node.add(Text.assemble((tag, "green"), " → ", resolvers[tag]))

    console.print(root)
