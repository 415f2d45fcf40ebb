"""Rich terminal renderer for hydration reports.

Color scheme
------------
- green     : PASSED
- red       : FAILED
- dim       : SKIPPED / NOT_STARTED
- yellow    : ROLLED_BACK
- magenta   : CANCELLED
"""

from __future__ import annotations

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from hydrate.models.reports import FunctionReport, HydrationReport, StepStatus
from hydrate.stages import STAGE_ORDER

_STATUS_MARKUP: dict[StepStatus, str] = {
    StepStatus.PASSED: "[green]passed[/green]",
    StepStatus.FAILED: "[bold red]FAILED[/bold red]",
    StepStatus.SKIPPED: "[dim]skipped[/dim]",
    StepStatus.NOT_STARTED: "[dim]-[/dim]",
    StepStatus.ROLLED_BACK: "[yellow]rolled back[/yellow]",
    StepStatus.CANCELLED: "[magenta]cancelled[/magenta]",
}


class ReportRenderer:
    """Renders a ``HydrationReport`` as Rich terminal output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render(self, report: HydrationReport) -> Panel:
        """Return a Panel with one row per function and a summary footer."""
        table = self._build_table(report)

        summary_parts = [
            f"[bold]App:[/bold] {report.app}",
            f"[bold]Functions:[/bold] {len(report.functions)}",
            f"[green][bold]Succeeded:[/bold] {len(report.succeeded)}[/green]",
        ]
        if report.failed:
            summary_parts.append(
                f"[bold red]Failed:[/bold red] {len(report.failed)}"
            )
        summary = "  |  ".join(summary_parts)

        errors = self._error_lines(report.failed)
        body = [table, Text(""), Text.from_markup(summary)]
        if errors:
            body.extend([Text(""), *errors])

        return Panel(
            Group(*body),
            title="[bold]Hydration Report[/bold]",
            subtitle=report.root,
            border_style="red" if report.failed else "blue",
            padding=(1, 2),
        )

    def print(self, report: HydrationReport) -> None:
        self.console.print(self.render(report))

    @staticmethod
    def _build_table(report: HydrationReport) -> Table:
        table = Table(show_header=True, header_style="bold cyan", expand=True)
        table.add_column("Function", min_width=24)
        table.add_column("Runtime", width=8)
        for step in STAGE_ORDER:
            table.add_column(step.capitalize(), justify="center")

        for fn in report.functions:
            cells = [
                _STATUS_MARKUP[fn.status(step)] for step in STAGE_ORDER
            ]
            name_style = "bold red" if fn.failed else ""
            table.add_row(
                Text(str(fn.function_id), style=name_style),
                fn.runtime.value,
                *cells,
            )
        return table

    @staticmethod
    def _error_lines(failed: list[FunctionReport]) -> list[Text]:
        lines: list[Text] = []
        for fn in failed:
            for outcome in fn.errors:
                lines.append(
                    Text.from_markup(
                        f"[red]{fn.function_id}[/red] {outcome.step}: "
                        f"{outcome.error_type}: ",
                    ).append(outcome.error)
                )
        return lines
