"""
Console Progress Reporter
Booking logger that prints to a Rich console and mirrors every line to a file logger.
"""

import logging
from typing import List, Optional, Sequence

from rich import box
from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from deskbot.interfaces.booking_service import BookingLogger
from deskbot.interfaces.models import BookingOutcome, BookingWindow
from deskbot.utils.date_calculator import to_service_weekday


class ConsoleProgressReporter(BookingLogger):
    """BookingLogger using Rich console output"""

    def __init__(self, console: Optional[Console] = None, file_logger: Optional[logging.Logger] = None):
        self.console = console or Console()
        self.file_logger = file_logger
        self.messages: List[str] = []

    def info(self, message: str):
        """Print an info line"""
        self.messages.append(message)
        self.console.print(f"[cyan][INFO][/cyan] {escape(message)}", highlight=False)
        if self.file_logger:
            self.file_logger.info(message)

    def error(self, message: str):
        """Print an error line"""
        self.messages.append(message)
        self.console.print(f"[red][ERROR][/red] {escape(message)}", highlight=False)
        if self.file_logger:
            self.file_logger.error(message)

    def print_header(self, title: str = "Desk Booking Bot"):
        """Print the run header"""
        self.console.print()
        self.console.print(Panel(
            Align.center(Text(title, style="bold cyan")),
            style="bold white on blue",
            box=box.DOUBLE
        ))
        self.console.print()

    def print_windows(self, windows: Sequence[BookingWindow]):
        """Print the windows a run would try (used by --dry-run)"""
        table = Table(title="== Booking Windows ==", box=box.ROUNDED, border_style="cyan")
        table.add_column("Date", style="bold")
        table.add_column("Weekday")
        table.add_column("From")
        table.add_column("To")

        for window in windows:
            table.add_row(
                window.date.strftime("%Y-%m-%d"),
                to_service_weekday(window.date).name.title(),
                window.start.isoformat(),
                window.end.isoformat(),
            )

        self.console.print(table)

    def print_summary_table(self, outcomes: Sequence[BookingOutcome]):
        """Print final summary table"""
        booked = [outcome for outcome in outcomes if outcome.success]
        failed = [outcome for outcome in outcomes if not outcome.success]

        table = Table(title="== Booking Summary ==", box=box.ROUNDED, border_style="cyan")
        table.add_column("Status", style="bold", width=20)
        table.add_column("Count", justify="right", style="bold")
        table.add_column("Dates", style="dim")

        if booked:
            dates_str = ", ".join(f"{o.date_str} ({o.desk.name})" if o.desk else o.date_str for o in booked)
            table.add_row(
                "[green][+] Booked[/green]",
                f"[green]{len(booked)}[/green]",
                dates_str
            )
        else:
            table.add_row(
                "[yellow]Booked[/yellow]",
                "[yellow]0[/yellow]",
                "[dim]none[/dim]"
            )

        if failed:
            dates_str = ", ".join(o.date_str for o in failed[:3])
            if len(failed) > 3:
                dates_str += f" +{len(failed) - 3} more"
            table.add_row(
                "[red][-] Failed[/red]",
                f"[red]{len(failed)}[/red]",
                dates_str
            )

        self.console.print()
        self.console.print(table)
        self.console.print()
