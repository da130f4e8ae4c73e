"""
EPUB Builder module - Responsible for generating EPUB files from book content.
"""

import logging
import mimetypes
import os
import tempfile
import zipfile
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from urllib.parse import urlsplit

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..utils.exceptions import AssemblyError, ElluError, ResourceFetchError


logger = logging.getLogger("ElluDL.epub")

MIMETYPE = "application/epub+zip"
IMAGES_DIR = "Images"
TEXT_DIR = "Text"

# Magic numbers for images whose URL carries no usable extension
IMAGE_SIGNATURES = (
    (b"\x89PNG\r\n\x1a\n", ".png"),
    (b"\xff\xd8\xff", ".jpg"),
    (b"GIF87a", ".gif"),
    (b"GIF89a", ".gif"),
    (b"<svg", ".svg"),
    (b"<?xml", ".svg"),
)

MEDIA_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
}


@dataclass
class ImageItem:
    """An image stored in the EPUB."""

    id: str
    filename: str
    media_type: str
    data: bytes
    source: str

    @property
    def handle(self) -> str:
        """Reference to the image as seen from a section file."""
        return f"../{IMAGES_DIR}/{self.filename}"


@dataclass
class SectionItem:
    """A chapter rendered as an XHTML file."""

    id: str
    filename: str
    title: str
    body: str


def guess_extension(url: str, data: bytes) -> str:
    """Pick a file extension from the URL path, falling back to the content."""
    suffix = Path(urlsplit(url).path).suffix.lower()
    if suffix in MEDIA_TYPES:
        return suffix

    head = data[:16].lstrip()
    for signature, extension in IMAGE_SIGNATURES:
        if head.startswith(signature):
            return extension
    if head[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return ".webp"

    guessed = mimetypes.guess_extension(mimetypes.guess_type(url)[0] or "")
    return guessed or ".jpg"


class EPUBBuilder:
    """
    Builds EPUB 3.0 files incrementally from book metadata and content.

    This class handles:
    - Downloading and storing images, handing out package-local references
    - Designating a cover image and rendering a cover page
    - Rendering chapters, content.opf, toc.ncx and nav.xhtml
    - Creating the EPUB ZIP structure
    """

    def __init__(
        self,
        title: str,
        fetch: Callable[[str], bytes],
        language: str = "en",
    ):
        """
        Initialize the EPUB builder.

        Args:
            title: Book title
            fetch: Callable downloading a URL and returning its bytes
            language: Book language code
        """
        self.title = title
        self.author = ""
        self.identifier = ""
        self.language = language
        self.fetch = fetch

        self.images: list[ImageItem] = []
        self.sections: list[SectionItem] = []
        self.cover: ImageItem | None = None
        self._images_by_url: dict[str, ImageItem] = {}

        # Initialize Jinja2 template environment
        templates_dir = Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(enabled_extensions=("xml", "xhtml", "j2")),
        )

    def set_author(self, author: str) -> None:
        self.author = author

    def set_identifier(self, identifier: str) -> None:
        self.identifier = identifier

    def add_image(self, url: str) -> str:
        """
        Download an image and store it in the EPUB.

        The same URL is only downloaded once and always yields the same
        reference.

        Args:
            url: Absolute image URL

        Returns:
            Reference to use in section bodies (``../Images/image0001.png``)

        Raises:
            ResourceFetchError: If the image cannot be downloaded
        """
        if url in self._images_by_url:
            return self._images_by_url[url].handle

        try:
            data = self.fetch(url)
        except ElluError as e:
            raise ResourceFetchError(f"downloading {url}: {e}") from e

        extension = guess_extension(url, data)
        index = len(self.images) + 1
        image = ImageItem(
            id=f"image{index:04d}",
            filename=f"image{index:04d}{extension}",
            media_type=MEDIA_TYPES.get(extension, "image/jpeg"),
            data=data,
            source=url,
        )
        self.images.append(image)
        self._images_by_url[url] = image
        logger.debug(f"Added image {image.filename} ({len(data)} bytes) from {url}")
        return image.handle

    def set_cover(self, handle: str) -> None:
        """
        Designate a previously added image as the cover.

        Raises:
            AssemblyError: If ``handle`` was not returned by :meth:`add_image`
        """
        for image in self.images:
            if image.handle == handle:
                self.cover = image
                logger.debug(f"Cover image set to {image.filename}")
                return
        raise AssemblyError(f"cover image {handle!r} was not added to the EPUB")

    def add_section(self, body: str, title: str) -> str:
        """
        Append a chapter to the reading order.

        Args:
            body: Chapter HTML body
            title: Chapter title for the table of contents

        Returns:
            File name of the section inside the EPUB
        """
        if not isinstance(body, str):
            raise AssemblyError(f"section {title!r} body must be a string")

        index = len(self.sections) + 1
        section = SectionItem(
            id=f"section{index:04d}",
            filename=f"section{index:04d}.xhtml",
            title=title,
            body=body,
        )
        self.sections.append(section)
        return section.filename

    def render(self) -> dict[str, bytes]:
        """
        Render every file of the EPUB except ``mimetype``.

        Returns:
            Mapping of archive path to file content
        """
        if not self.sections:
            raise AssemblyError("EPUB has no sections")

        modified = datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
        context = {
            "identifier": self.identifier or self.title,
            "title": self.title,
            "author": self.author,
            "language": self.language,
            "modified": modified,
            "cover": self.cover,
            "sections": self.sections,
            "images": self.images,
        }

        files = {
            "META-INF/container.xml": self._render("container.xml.j2"),
            "OEBPS/content.opf": self._render("content.opf.j2", **context),
            "OEBPS/toc.ncx": self._render("toc.ncx.j2", **context),
            "OEBPS/nav.xhtml": self._render("nav.xhtml.j2", **context),
        }

        if self.cover is not None:
            files[f"OEBPS/{TEXT_DIR}/cover.xhtml"] = self._render(
                "cover.xhtml.j2", title=self.title, cover=self.cover
            )

        for section in self.sections:
            files[f"OEBPS/{TEXT_DIR}/{section.filename}"] = self._render(
                "section.xhtml.j2", title=section.title, body=section.body
            )

        for image in self.images:
            files[f"OEBPS/{IMAGES_DIR}/{image.filename}"] = image.data

        return files

    def _render(self, template_name: str, **kwargs: object) -> bytes:
        template = self.env.get_template(template_name)
        return template.render(**kwargs).encode("utf-8", "xmlcharrefreplace")

    def write(self, epub_path: str | Path) -> Path:
        """
        Write the EPUB file.

        The archive is assembled in a temporary file next to the target and
        moved into place once complete, so a failure never leaves a partial
        book behind.

        Args:
            epub_path: Path where the .epub file should be created

        Returns:
            Path to the generated .epub file
        """
        epub_path = Path(epub_path)
        files = self.render()

        fd, tmp_name = tempfile.mkstemp(suffix=".epub.part", dir=epub_path.parent)
        os.close(fd)
        try:
            self._create_epub_zip(tmp_name, files)
            os.replace(tmp_name, epub_path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise AssemblyError(f"writing {epub_path}: {e}") from e

        logger.info(f"Wrote {epub_path}")
        return epub_path

    @staticmethod
    def _create_epub_zip(epub_path: str, files: dict[str, bytes]) -> None:
        """
        Create the EPUB ZIP container following the EPUB 3.3 OCF layout.

        The mimetype file MUST be:
        1. The first file in the archive
        2. Stored uncompressed (ZIP_STORED)
        3. Not have any extra field data

        All other files are compressed with ZIP_DEFLATED for smaller file size.
        """
        with zipfile.ZipFile(epub_path, "w") as epub:
            epub.writestr("mimetype", MIMETYPE, compress_type=zipfile.ZIP_STORED)

            for arcname, data in files.items():
                epub.writestr(arcname, data, compress_type=zipfile.ZIP_DEFLATED)
