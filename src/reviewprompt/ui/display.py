"""Console output for reviewprompt commands."""

from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TaskID, TextColumn


class DisplayManager:
    """Print status messages and progress indicators."""

    def __init__(self, console: Console, error_console: Console):
        """
        Initialize DisplayManager.

        Args:
            console: Console for normal output (stdout)
            error_console: Console for errors (stderr)
        """
        self.console = console
        self.error_console = error_console

    def success(self, message: str) -> None:
        self.console.print(f"[green]{escape(message)}[/green]")

    def notice(self, message: str) -> None:
        self.console.print(f"[yellow]{escape(message)}[/yellow]")

    def error(self, message: str) -> None:
        """Print ``Error: <message>`` to stderr."""
        self.error_console.print(f"[red]Error: {escape(message)}[/red]")

    @contextmanager
    def spinner(self, description: str) -> Iterator[None]:
        """Show a transient spinner while the block runs."""
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.error_console,
            transient=True,
        ) as progress:
            progress.add_task(escape(description), total=None)
            yield

    @contextmanager
    def batch_progress(self, description: str, total: int) -> Iterator[tuple[Progress, TaskID]]:
        """Show a transient progress bar for a sequential batch."""
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            console=self.error_console,
            transient=True,
        ) as progress:
            task = progress.add_task(escape(description), total=total)
            yield progress, task
