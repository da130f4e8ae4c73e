"""Book metadata resolution from the public book page."""

import logging
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

from ..client import ElluClient
from ..models import Book
from ..utils.exceptions import InvalidURLError, ParseError


logger = logging.getLogger("ElluDL.metadata")

BOOK_PATH_PREFIX = "/books/"
BOOK_ID_SELECTOR = "#book_id"
BOOK_HEAD_SELECTOR = ".book-head"


def parse_catalog_number(page_url: str) -> int:
    """Extract the catalog number from a book page URL.

    ``https://ellu.ee/books/9789949/some-title`` yields ``9789949``.

    Raises:
        InvalidURLError: If the URL has no host or its path is not under /books/
        ParseError: If the segment after /books/ is not a number
    """
    parts = urlsplit(page_url)
    if not parts.scheme or not parts.netloc:
        raise InvalidURLError(f"URL must be absolute (got {page_url!r})")
    if not parts.path.startswith(BOOK_PATH_PREFIX):
        raise InvalidURLError(f"URL format not recognized (expected {BOOK_PATH_PREFIX})")

    segment = parts.path[len(BOOK_PATH_PREFIX) :].split("/", 1)[0]
    if not segment.isdecimal():
        raise ParseError(f"converting catalog number: {segment!r} is not a number")
    return int(segment)


def parse_book_id(soup: BeautifulSoup) -> int:
    """Read the internal book id from the hidden ``#book_id`` input."""
    node = soup.select_one(BOOK_ID_SELECTOR)
    if node is None:
        raise ParseError("book_id not found")

    value = node.get("value")
    if not isinstance(value, str):
        raise ParseError("book_id has no value")

    value = value.strip()
    if not value.isdecimal():
        raise ParseError(f"converting book_id: {value!r} is not a number")
    return int(value)


def parse_book_head(soup: BeautifulSoup) -> tuple[str, str]:
    """Return ``(title, author)`` from the ``.book-head`` region.

    The title is the text of its ``h1`` children as is, the author the trimmed
    text of its ``p`` children. Either is empty when the region or element is
    absent.
    """
    head = soup.select_one(BOOK_HEAD_SELECTOR)
    if head is None:
        logger.warning("Book header not found, title and author will be empty")
        return "", ""

    title = "".join(h1.get_text() for h1 in head.find_all("h1", recursive=False))
    author = "".join(p.get_text() for p in head.find_all("p", recursive=False))
    return title, author.strip()


def resolve_book(client: ElluClient, page_url: str) -> Book:
    """Resolve a book's identifiers, title and author from its page.

    Args:
        client: HTTP client carrying the session cookie
        page_url: Public book page, e.g. ``https://ellu.ee/books/9789949/title``

    Returns:
        Book without chapters

    Raises:
        InvalidURLError: If the URL is not a book page URL
        FetchError: If the page cannot be fetched
        ParseError: If the page lacks a numeric book id
    """
    catalog_number = parse_catalog_number(page_url)
    soup = client.get_document(page_url)

    book_id = parse_book_id(soup)
    title, author = parse_book_head(soup)

    logger.info(f"Resolved book {title!r} by {author or 'unknown author'} (id {book_id})")
    return Book(title=title, id=book_id, catalog_number=catalog_number, author=author)
