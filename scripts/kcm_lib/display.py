"""
Display functions for kcm.

Renders context listings, delete plans and integrity reports with rich.
"""

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from kcm_lib.common import log, log_messages, warn
from kcm_lib.config import ContextEntry, DeletePlan

console = Console()


def contexts_table(entries: list[ContextEntry], title: Optional[str] = None) -> Table:
    """Build the context listing table; the current context is marked with '*'."""
    table = Table(title=title, show_edge=False, header_style="bold")
    table.add_column("", width=1)
    table.add_column("Context", style="cyan", no_wrap=True)
    table.add_column("Cluster")
    table.add_column("User")

    for entry in entries:
        marker = "*" if entry.current else ""
        style = "bold green" if entry.current else None
        table.add_row(marker, entry.name, entry.cluster or "-", entry.user or "-", style=style)
    return table


def show_contexts(entries: list[ContextEntry], kubeconfig: Optional[Path] = None) -> None:
    """Print contexts, or a hint when there are none."""
    if not entries:
        console.print("[dim]No contexts defined. Use 'import' to add one.[/dim]")
        return
    title = f"Contexts in {kubeconfig}" if kubeconfig else None
    console.print(contexts_table(entries, title=title))


def show_delete_plan(plan: DeletePlan) -> None:
    console.print(f"[bold]Deleting context '{plan.context}' will:[/bold]")
    for line in plan.describe():
        console.print(f"  - {line}")


def show_integrity(problems: list[str]) -> None:
    if not problems:
        console.print("[green]No problems found[/green]")
        return
    console.print(f"[bold yellow]{len(problems)} problem(s):[/bold yellow]")
    for problem in problems:
        console.print(f"  - {problem}")


def show_backups(backups: list[Path]) -> None:
    if not backups:
        console.print("[dim]No backups found[/dim]")
        return
    table = Table(show_edge=False, header_style="bold")
    table.add_column("Backup")
    table.add_column("Size", justify="right")
    for path in backups:
        table.add_row(str(path), f"{path.stat().st_size} B")
    console.print(table)


def report_result(result) -> None:
    """Print an operation's summary line followed by its detail messages."""
    summary = result.messages[-1] if result.messages else result.operation
    if result.committed:
        log(summary)
    else:
        warn(summary)
    log_messages(result.messages[:-1])
