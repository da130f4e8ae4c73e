"""Chapter manifest extraction from the reader's inline script.

The reader page boots with a JavaScript statement along the lines of::

    new Reader(12345, 0, "bookmark", [{"number": 0, "Title": "Intro"}, ...], true, "et", null);

Its arguments are plain JS, not JSON, so the manifest is recovered by
splitting on ``", "``, dropping the scalar arguments on both sides and
joining the rest back together. A literal ``", "`` inside a chapter title
or another argument breaks this; no structured endpoint exists upstream.
"""

import json
import logging

from bs4 import BeautifulSoup
from pydantic import ValidationError

from ..client import ElluClient
from ..models import Chapter
from ..utils.exceptions import DecodeError, ManifestNotFoundError


logger = logging.getLogger("ElluDL.manifest")

READER_MARKER = "new Reader("
ARGUMENT_SEPARATOR = ", "
LEADING_ARGUMENTS = 3  # total chapter bytes, bookmark and friends
TRAILING_ARGUMENTS = 3  # JS callbacks and flags


def build_reader_url(root: str, book_id: int, preview: bool = False) -> str:
    """Build the reader landing page URL for a book.

    Args:
        root: Site origin, e.g. ``https://ellu.ee``
        book_id: Internal book id
        preview: Use the ``/reader-preview`` endpoint

    Returns:
        ``<root>/reader?book_id=<id>`` (or ``/reader-preview``)
    """
    suffix = "-preview" if preview else ""
    return f"{root.rstrip('/')}/reader{suffix}?book_id={book_id}"


def find_manifest_line(script: str) -> str:
    """Return the last line of ``script`` that starts the reader.

    Raises:
        ManifestNotFoundError: If no line starts with ``new Reader(``
    """
    found = None
    for line in script.split("\n"):
        line = line.strip()
        if line.startswith(READER_MARKER):
            found = line

    if found is None:
        raise ManifestNotFoundError("chapters info not found")
    return found


def decode_manifest_line(line: str) -> list[Chapter]:
    """Decode the chapter array embedded in a ``new Reader(...)`` call.

    Raises:
        DecodeError: If the argument list is too short or the JSON is malformed
    """
    tokens = line.split(ARGUMENT_SEPARATOR)
    if len(tokens) <= LEADING_ARGUMENTS + TRAILING_ARGUMENTS:
        raise DecodeError(
            f"unmarshalling chapters info: expected more than "
            f"{LEADING_ARGUMENTS + TRAILING_ARGUMENTS} arguments, got {len(tokens)}"
        )

    chapters_json = ARGUMENT_SEPARATOR.join(tokens[LEADING_ARGUMENTS:-TRAILING_ARGUMENTS])

    try:
        data = json.loads(chapters_json)
    except json.JSONDecodeError as e:
        raise DecodeError(f"unmarshalling chapters info: {e}") from e

    if not isinstance(data, list):
        raise DecodeError(f"unmarshalling chapters info: expected an array, got {type(data).__name__}")

    try:
        return [Chapter.model_validate(item, by_name=False) for item in data]
    except ValidationError as e:
        raise DecodeError(f"unmarshalling chapters info: {e}") from e


def parse_manifest(script: str) -> list[Chapter]:
    """Extract the ordered chapter list from inline reader script text."""
    return decode_manifest_line(find_manifest_line(script))


def get_script_text(soup: BeautifulSoup) -> str:
    """Concatenate the text of the page's top-level body scripts."""
    return "".join(node.get_text() for node in soup.select("body > script"))


def extract_chapters(client: ElluClient, reader_url: str) -> list[Chapter]:
    """Fetch the reader page and decode its chapter manifest.

    Args:
        client: HTTP client carrying the session cookie
        reader_url: Reader landing page (see :func:`build_reader_url`)

    Returns:
        Chapters in manifest order, without content

    Raises:
        FetchError: If the reader page cannot be fetched
        ManifestNotFoundError: If the page has no ``new Reader(`` line
        DecodeError: If the manifest is malformed
    """
    soup = client.get_document(reader_url)
    chapters = parse_manifest(get_script_text(soup))
    logger.info(f"Found {len(chapters)} chapters")
    return chapters
