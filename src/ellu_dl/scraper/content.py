"""Chapter body retrieval through the reader's POST endpoint."""

import json
import logging
from collections.abc import Callable
from typing import Any

from ..client import ElluClient
from ..models import Chapter
from ..utils.exceptions import DecodeError, FetchError


logger = logging.getLogger("ElluDL.content")

CHAPTER_FIELD = "chapter"


def build_chapter_url(reader_url: str, chapter_id: int) -> str:
    """Append the ``chapter_number`` query parameter to the reader URL."""
    separator = "&" if "?" in reader_url else "?"
    return f"{reader_url}{separator}chapter_number={chapter_id}"


def decode_chapter_body(payload: bytes) -> str:
    """Decode ``{"Chapter": "<html>"}`` into the HTML string.

    The field name is matched case-insensitively.

    Raises:
        DecodeError: If the payload is not a JSON object with a string chapter field
    """
    try:
        data: Any = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(str(e)) from e

    if not isinstance(data, dict):
        raise DecodeError(f"expected a JSON object, got {type(data).__name__}")

    for key, value in data.items():
        if isinstance(key, str) and key.lower() == CHAPTER_FIELD:
            if not isinstance(value, str):
                raise DecodeError(f"field {key!r} is {type(value).__name__}, not a string")
            return value

    raise DecodeError("missing 'Chapter' field")


def fetch_chapter(client: ElluClient, chapter: Chapter, reader_url: str) -> str:
    """Fetch one chapter's HTML body.

    Raises:
        FetchError: On transport or HTTP failure
        DecodeError: On a malformed response
    """
    url = build_chapter_url(reader_url, chapter.id)
    try:
        payload = client.request_raw("POST", url)
    except FetchError as e:
        raise type(e)(f"chapter {chapter.id} content with POST: {e}") from e

    try:
        return decode_chapter_body(payload)
    except DecodeError as e:
        raise DecodeError(f"chapter {chapter.id} content unmarshaling: {e}") from e


def populate_chapters(
    client: ElluClient,
    chapters: list[Chapter],
    reader_url: str,
    on_progress: Callable[[], None] | None = None,
) -> None:
    """Fill every chapter's ``content`` in manifest order.

    Args:
        client: HTTP client carrying the session cookie
        chapters: Chapters from the manifest, mutated in place
        reader_url: Reader landing page URL
        on_progress: Optional callable invoked after each chapter
    """
    for chapter in chapters:
        logger.debug(f"Fetching chapter {chapter.id}: {chapter.title}")
        chapter.content = fetch_chapter(client, chapter, reader_url)
        if on_progress is not None:
            on_progress()
