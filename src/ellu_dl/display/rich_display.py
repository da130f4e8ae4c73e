"""Rich-based display system for ellu-dl."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from ..models import Book
from .constants import EMOJI_MAP, PROGRESS_COLORS


class RichDisplay:
    """
    Rich-based display system for ellu-dl.

    Shows the book information panel, chapter and image progress bars and
    the final result.
    """

    def __init__(self, quiet: bool = False, console: Console | None = None):
        """
        Initialize RichDisplay.

        Args:
            quiet: If True, suppress all output except errors
            console: Console to print to (a new stdout console by default)
        """
        self.console = console or Console()
        self.quiet = quiet
        self.progress: Progress | None = None
        self.task_ids: dict[str, TaskID] = {}

    def book_info(self, book: Book) -> None:
        """
        Display book metadata in a Rich Table.

        Args:
            book: Resolved book
        """
        if self.quiet:
            return

        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column("Field", style="bold cyan", no_wrap=True)
        table.add_column("Value", style="white")

        table.add_row(f"{EMOJI_MAP['book']} Title", escape(book.title) or "N/A")
        table.add_row(f"{EMOJI_MAP['author']} Author", escape(book.author) or "N/A")
        table.add_row(f"{EMOJI_MAP['catalog']} Catalog no.", str(book.catalog_number))
        table.add_row("# Book id", str(book.id))

        panel = Panel(
            table,
            title="[bold green]Book Information[/bold green]",
            border_style="green",
            padding=(1, 2),
        )
        self.console.print()
        self.console.print(panel)
        self.console.print()

    def start_progress(self, chapters: int) -> None:
        """
        Initialize the progress display.

        Images are only discovered while chapters are rewritten, so their
        bar has no total.

        Args:
            chapters: Total number of chapters
        """
        if self.quiet:
            return

        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(
                complete_style=PROGRESS_COLORS["complete"],
                finished_style=PROGRESS_COLORS["finished"],
            ),
            TaskProgressColumn(),
            TextColumn("{task.completed}/{task.total}"),
            TimeElapsedColumn(),
            console=self.console,
            transient=False,
        )
        self.progress.start()

        self.task_ids["chapters"] = self.progress.add_task(
            f"{EMOJI_MAP['chapters']} Chapters",
            total=chapters,
        )
        self.task_ids["images"] = self.progress.add_task(
            f"{EMOJI_MAP['images']} Images",
            total=None,
        )

    def advance_chapters(self) -> None:
        """Mark one more chapter as downloaded."""
        if self.progress and "chapters" in self.task_ids:
            self.progress.advance(self.task_ids["chapters"])

    def advance_images(self) -> None:
        """Mark one more image as downloaded."""
        if self.progress and "images" in self.task_ids:
            self.progress.advance(self.task_ids["images"])

    def finish_progress(self) -> None:
        """Complete and cleanup progress display."""
        if self.progress:
            self.progress.stop()
            self.progress = None
        self.task_ids = {}

    def success(self, message: str) -> None:
        """
        Display success message.

        Args:
            message: Success message to display
        """
        if self.quiet:
            return
        self.console.print(
            f"[bold green]{EMOJI_MAP['success']} {escape(message)}[/bold green]"
        )

    def error(self, message: str) -> None:
        """
        Display error message with Rich formatting.

        Shown even in quiet mode.

        Args:
            message: Error message to display
        """
        self.finish_progress()
        self.console.print(f"[bold red]{EMOJI_MAP['error']} Error:[/bold red] {escape(message)}")
