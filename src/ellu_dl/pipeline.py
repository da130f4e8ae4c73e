"""End-to-end download of one book into an EPUB file."""

import logging
from pathlib import Path
from urllib.parse import urlsplit

from .client import ElluClient
from .display import RichDisplay
from .epub import EPUBBuilder
from .models import Book, ElluConfig
from .parser import assemble
from .scraper import build_reader_url, extract_chapters, populate_chapters, resolve_book
from .utils.exceptions import ElluError, InvalidURLError


logger = logging.getLogger("ElluDL.pipeline")


def site_root(page_url: str) -> str:
    """Return ``scheme://host`` of a URL."""
    parts = urlsplit(page_url)
    if not parts.scheme or not parts.netloc:
        raise InvalidURLError(f"URL must be absolute (got {page_url!r})")
    return f"{parts.scheme}://{parts.netloc}"


def _wrap(error: ElluError, doing: str) -> ElluError:
    """Prefix an error message with the failed step, keeping its type."""
    return type(error)(f"{doing}: {error}")


def output_path(book: Book, output_dir: Path) -> Path:
    """Path of the EPUB file for ``book`` (``<title> (<id>).epub``)."""
    return output_dir / book.get_output_filename()


def download_book(
    page_url: str,
    config: ElluConfig,
    client: ElluClient | None = None,
    display: RichDisplay | None = None,
) -> Path:
    """
    Download a book from the Ellu reader and write it as an EPUB.

    Stages run strictly in order and the first failure aborts the run
    without writing anything.

    Args:
        page_url: Public book page URL (``https://<host>/books/<catalog number>/...``)
        config: Application configuration (cookie, preview mode, output dir)
        client: HTTP client to use; one is created for the page host by default
        display: Optional progress display

    Returns:
        Path of the written EPUB file

    Raises:
        ElluError: Any stage failure, its message prefixed with the stage name
    """
    root = site_root(page_url)
    display = display or RichDisplay(quiet=True)

    if client is None:
        with ElluClient(urlsplit(page_url).hostname or "", config) as own_client:
            return _run(page_url, root, config, own_client, display)
    return _run(page_url, root, config, client, display)


def _run(
    page_url: str, root: str, config: ElluConfig, client: ElluClient, display: RichDisplay
) -> Path:
    try:
        book = resolve_book(client, page_url)
    except ElluError as e:
        raise _wrap(e, "getting book id") from e
    display.book_info(book)

    reader_url = build_reader_url(root, book.require_id(), preview=config.preview)
    logger.info(f"Reader URL: {reader_url}")

    try:
        book.chapters = extract_chapters(client, reader_url)
    except ElluError as e:
        raise _wrap(e, "getting book metadata") from e

    display.start_progress(chapters=len(book.chapters))
    try:
        try:
            populate_chapters(
                client, book.chapters, reader_url, on_progress=display.advance_chapters
            )
        except ElluError as e:
            raise _wrap(e, "populating book chapters") from e

        builder = EPUBBuilder(book.title, fetch=client.get_bytes)
        builder.set_identifier(str(book.catalog_number))
        builder.set_author(book.author)

        try:
            assemble(
                book,
                root,
                builder,
                static_prefix=config.static_prefix,
                on_image=display.advance_images,
            )
        except ElluError as e:
            raise _wrap(e, "populating EPUB files") from e
    finally:
        display.finish_progress()

    config.validate_paths()
    path = output_path(book, config.output_dir)
    try:
        builder.write(path)
    except ElluError as e:
        raise _wrap(e, "writing EPUB") from e

    logger.info(f"Book {book.title!r} written to {path}")
    return path
