"""Rich output formatting helpers for the pearshaker CLI."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pearshaker.core.models import TraversalReport
from pearshaker.core.resolution import ResolutionPlan
from pearshaker.exceptions import PearShakerError, UnresolvedSpecifierError

console = Console()


def print_report(report: TraversalReport) -> None:
    """Print the reachable files and any skipped specifiers.

    Args:
        report: Aggregate traversal report.
    """
    files_table = Table(title="Reachable Files", show_header=True, header_style="bold")
    files_table.add_column("Path", style="bold")
    for path in sorted(report.files):
        files_table.add_row(path)
    console.print(files_table)

    if report.skips:
        skips_table = Table(title="Skipped Specifiers", show_header=True, header_style="bold")
        skips_table.add_column("Specifier", style="yellow")
        skips_table.add_column("Referrer")
        skips_table.add_column("Candidates", justify="right", style="dim")
        for skip in report.skips:
            skips_table.add_row(
                skip.specifier, skip.referrer.pathname, str(len(skip.candidates))
            )
        console.print(skips_table)

    parts = [f"[bold]{len(report.files)}[/bold] files"]
    if report.skips:
        parts.append(f"[yellow]{len(report.skips)} skipped[/yellow]")
    else:
        parts.append("[green]0 skipped[/green]")
    console.print(" | ".join(parts))


def print_traversal_error(exc: PearShakerError) -> None:
    """Print a fatal traversal error with its resolution context."""
    lines = [Text(str(exc), style="bold red")]
    if isinstance(exc, UnresolvedSpecifierError):
        referrer = exc.referrer.href if exc.referrer is not None else "(entrypoint)"
        lines.append(Text(f"Specifier: {exc.specifier}"))
        lines.append(Text(f"Referrer:  {referrer}"))
        for candidate in exc.candidates:
            lines.append(Text(f"  tried {candidate}", style="dim"))
    console.print(Panel(Text("\n").join(lines), title="Traversal Failed"))


def print_plan(plan: ResolutionPlan) -> None:
    """Print the condition tuples and extensions of a resolution plan."""
    table = Table(title=f"Conditions ({plan.kind})", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Condition Tuple")
    for index, conditions in enumerate(plan.conditions, start=1):
        table.add_row(str(index), ", ".join(conditions))
    console.print(table)
    if plan.extensions is None:
        console.print("Extensions: [dim](exact paths only)[/dim]")
    else:
        console.print(f"Extensions: {' '.join(plan.extensions)}")
