"""
Click-based CLI commands for ellu-dl.

This module provides the command-line interface using Click with:
- Input validation and error handling
- Progress bars and visual feedback (via Rich)
- Subcommands for different operations
"""

import sys
from pathlib import Path
from urllib.parse import urlsplit

import click
from rich.console import Console

from .. import __version__
from ..display import RichDisplay, get_logger, get_valid_log_levels, setup_logger
from ..models import ElluConfig
from ..pipeline import download_book
from ..utils.exceptions import ElluError


# Initialize Rich console for pretty output
console = Console()


class BookURLType(click.ParamType):
    """Custom Click type for validating book page URLs."""

    name = "url"

    def convert(self, value: str, param: click.Parameter | None, ctx: click.Context | None) -> str:
        """Validate that the value looks like an absolute book page URL."""
        parts = urlsplit(value)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            self.fail(f"{value!r} is not an absolute http(s) URL", param, ctx)
        if not parts.path.startswith("/books/"):
            console.print(
                f"[yellow]Warning:[/yellow] {value} does not look like a book page "
                "(expected /books/<number>/...).",
                style="yellow",
            )
        return value


BOOK_URL = BookURLType()


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """
    ellu-dl - Convert books from the Ellu web reader to EPUB.

    \b
    Authentication:
    - Requires the value of the "sid" session cookie from a logged-in browser
    - Pass it with --cookie or the ELLU_COOKIE environment variable

    \b
    Examples:
      # Download a book
      ellu-dl download https://ellu.ee/books/9789949123456/some-title --cookie 0123abcd

      # Use the preview reader
      ELLU_COOKIE=0123abcd ellu-dl download https://ellu.ee/books/9789949123456 --preview
    """
    # If no subcommand is given, show help
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        ctx.exit()


@cli.command()
@click.argument("url", type=BOOK_URL)
@click.option(
    "--cookie",
    envvar="ELLU_COOKIE",
    required=True,
    help='Value of the "sid" session cookie. Also read from ELLU_COOKIE.',
)
@click.option(
    "--preview",
    is_flag=True,
    default=False,
    help="Consume /reader-preview instead of /reader.",
)
@click.option(
    "--log-level",
    type=click.Choice(get_valid_log_levels(), case_sensitive=False),
    default="INFO",
    show_default=True,
    help="Set the logging level for detailed output.",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Directory to save the EPUB in.  [default: ./Books or ELLU_OUTPUT_DIR]",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to a log file. When provided, logging output is written to this file "
    "instead of the terminal.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    default=False,
    help="Suppress all output except errors. Useful for scripting and automation.",
)
def download(
    url: str,
    cookie: str,
    preview: bool,
    log_level: str,
    output_dir: Path | None,
    log_file: Path | None,
    quiet: bool,
) -> None:
    """
    Download a book from the Ellu reader and generate an EPUB file.

    URL is the book's page, e.g. https://ellu.ee/books/9789949123456/some-title.
    The EPUB is saved as "<title> (<book id>).epub".
    """
    overrides: dict[str, object] = {"cookie": cookie, "log_level": log_level}
    if preview:
        overrides["preview"] = True
    if output_dir is not None:
        overrides["output_dir"] = output_dir
    if log_file is not None:
        overrides["log_file"] = log_file
    config = ElluConfig(**overrides)

    setup_logger(
        # In quiet mode the display reports the failure; keep the console log silent
        level="CRITICAL" if quiet and config.log_file is None else config.log_level,
        log_file=config.log_file,
    )
    logger = get_logger("ElluDL.CLI")

    display = RichDisplay(quiet=quiet, console=console)

    try:
        epub_path = download_book(url, config, display=display)
    except ElluError as e:
        logger.error(f"Failed to download {url}: {e}")
        display.error(str(e))
        sys.exit(1)

    display.success(f"Download complete! {epub_path}")


@cli.command()
def version() -> None:
    """Display the version of ellu-dl."""
    console.print(f"[bold cyan]ellu-dl[/bold cyan] version {__version__}")


# Entry point for the CLI
def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
