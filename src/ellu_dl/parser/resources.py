"""Static asset rewriting and section assembly for chapter HTML."""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from ..models import Book, Chapter
from ..utils.exceptions import AssemblyError, ElluError, ParseError, ResourceFetchError


if TYPE_CHECKING:
    from ..epub.builder import EPUBBuilder


logger = logging.getLogger("ElluDL.resources")

STATIC_PREFIX = "/static/"
COVER_CHAPTER_ID = 0


class ResourceRewriter:
    """Replaces static asset paths in chapter HTML with EPUB-local handles.

    Every attribute of every element is inspected, not only ``src`` and
    ``href``: the reader also keeps asset paths in custom data attributes.
    """

    def __init__(
        self,
        root: str,
        builder: "EPUBBuilder",
        static_prefix: str = STATIC_PREFIX,
        on_image: Callable[[], None] | None = None,
    ):
        """Initialize the rewriter.

        Args:
            root: Site origin the asset paths are relative to
            builder: EPUB builder images are registered with
            static_prefix: Path prefix that marks an attribute value as an asset
            on_image: Optional callable invoked after each registered image
        """
        self.root = root
        self.builder = builder
        self.static_prefix = static_prefix
        self.on_image = on_image
        self.cover: str | None = None

    def is_resource(self, value: Any) -> bool:
        """Check if an attribute value points at a static asset."""
        return isinstance(value, str) and value.startswith(self.static_prefix)

    def _register(self, chapter: Chapter, path: str) -> str:
        url = urljoin(self.root, path)
        try:
            handle = self.builder.add_image(url)
        except ElluError as e:
            raise ResourceFetchError(f"chapter {chapter.id}, adding image to EPUB: {e}") from e

        logger.debug(f"Chapter {chapter.id}: {path} -> {handle}")
        if self.on_image is not None:
            self.on_image()

        if chapter.id == COVER_CHAPTER_ID and self.cover is None:
            self.cover = handle
            self.builder.set_cover(handle)
        return handle

    def rewrite_soup(self, chapter: Chapter, soup: BeautifulSoup) -> int:
        """Rewrite asset references in a parsed fragment in place.

        Returns:
            Number of rewritten attribute values
        """
        count = 0
        for tag in soup.find_all(True):
            for name, value in list(tag.attrs.items()):
                if isinstance(value, list):
                    if not any(self.is_resource(v) for v in value):
                        continue
                    new_values = []
                    for v in value:
                        if self.is_resource(v):
                            v = self._register(chapter, v)
                            count += 1
                        new_values.append(v)
                    tag[name] = new_values
                elif self.is_resource(value):
                    tag[name] = self._register(chapter, value)
                    count += 1
        return count

    def rewrite_chapter(self, chapter: Chapter) -> Chapter:
        """Rewrite one chapter's content in place.

        Raises:
            ParseError: If the chapter HTML cannot be parsed
            ResourceFetchError: If an image cannot be registered
            AssemblyError: If the rewritten HTML cannot be serialized
        """
        try:
            soup = BeautifulSoup(chapter.content, "html.parser")
        except Exception as e:
            raise ParseError(f"chapter {chapter.id} parsing HTML: {e}") from e

        count = self.rewrite_soup(chapter, soup)

        try:
            chapter.content = soup.decode(formatter="minimal")
        except Exception as e:
            raise AssemblyError(f"chapter {chapter.id} rendering substituted HTML: {e}") from e

        if count:
            logger.debug(f"Chapter {chapter.id}: rewrote {count} resource reference(s)")
        return chapter


def add_sections(book: Book, builder: "EPUBBuilder") -> None:
    """Append every chapter to the EPUB as a section, in manifest order.

    Raises:
        AssemblyError: If the builder rejects a section
    """
    for chapter in book.chapters:
        try:
            builder.add_section(chapter.content, chapter.title)
        except Exception as e:
            raise AssemblyError(f"adding chapter {chapter.id} to epub: {e}") from e


def assemble(
    book: Book,
    root: str,
    builder: "EPUBBuilder",
    static_prefix: str = STATIC_PREFIX,
    on_image: Callable[[], None] | None = None,
) -> Book:
    """Rewrite every chapter's assets, then add the chapters as sections.

    Args:
        book: Book whose chapters hold fetched HTML
        root: Site origin, e.g. ``https://ellu.ee``
        builder: EPUB builder receiving images, cover and sections
        static_prefix: Path prefix that marks an attribute value as an asset
        on_image: Optional callable invoked after each registered image

    Returns:
        The same book, with rewritten chapter content
    """
    rewriter = ResourceRewriter(root, builder, static_prefix=static_prefix, on_image=on_image)
    for chapter in book.chapters:
        rewriter.rewrite_chapter(chapter)

    add_sections(book, builder)
    return book
