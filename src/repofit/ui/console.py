"""Rich-powered console output for repofit.

Status output goes to stderr so reduced content on stdout stays pipeable.
"""

from __future__ import annotations

from rich.console import Console as RichConsole
from rich.table import Table

from repofit.context.models import ExtractionReport
from repofit.tokens.estimator import TokenUsage


class Console:
    """Terminal output for repofit using Rich."""

    def __init__(self, stderr: bool = True) -> None:
        self.console = RichConsole(stderr=stderr)

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {message}")

    def info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {message}")

    def show_report(self, report: ExtractionReport) -> None:
        """Display extraction accounting in a table."""
        table = Table(title="Content Selection", border_style="cyan")
        table.add_column("Metric", style="bold")
        table.add_column("Value", justify="right", style="cyan")

        table.add_row("Strategy", report.strategy.value)
        table.add_row("Original tokens", f"{report.original_tokens:,}")
        table.add_row("Result tokens", f"{report.result_tokens:,}")
        table.add_row("Budget", f"{report.token_budget:,}")
        if report.sections_available:
            table.add_row(
                "Sections kept",
                f"{len(report.sections_included)} / {report.sections_available}",
            )
        if report.trimmed_section:
            table.add_row("Trimmed", report.trimmed_section)
        if report.keywords:
            table.add_section()
            table.add_row("Keywords", ", ".join(report.keywords))

        self.console.print(table)

        if not report.within_budget:
            self.warning(
                f"Result is {report.result_tokens - report.token_budget:,} tokens over "
                "budget (the introduction is never trimmed)"
            )

    def show_usage(self, usage: TokenUsage, model_id: str | None) -> None:
        table = Table(title=f"Token Estimate ({model_id or 'default'})", border_style="cyan")
        table.add_column("Metric", style="bold")
        table.add_column("Tokens", justify="right", style="cyan")
        table.add_row("Prompt", f"{usage.prompt_tokens:,}")
        table.add_row("Response", f"{usage.response_tokens:,}")
        table.add_row("Total", f"{usage.total_tokens:,}")
        table.add_row(
            "Within limits",
            "[green]yes[/green]" if usage.is_within_limits else "[red]no[/red]",
        )
        self.console.print(table)
