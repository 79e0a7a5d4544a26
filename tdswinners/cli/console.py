from rich.console import Console
from rich.table import Table

from tdswinners.validator.models import WinnerReport

console = Console()


def info(message: str) -> None:
    console.print(f"[bold blue]{message}[/bold blue]")


def error(message: str) -> None:
    console.print(f"[red]✗[/red] {message}")


def warn(message: str) -> None:
    console.print(f"[yellow]⊘[/yellow] {message}")


def report_table(report: WinnerReport) -> Table:
    table = Table(title=report.category, title_justify="left")
    table.add_column("#", justify="right")
    table.add_column("Identity", no_wrap=True)
    table.add_column("Metric", justify="right")
    table.add_column("Details")
    for rank, winner in enumerate(report, start=1):
        table.add_row(
            str(rank),
            str(winner.identity),
            str(winner.metric_value),
            winner.details,
        )
    return table


def print_report(report: WinnerReport) -> None:
    if not len(report):
        warn(f"{report.category}: no eligible validators")
        return
    console.print(report_table(report))
