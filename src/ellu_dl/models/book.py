"""Pydantic models for book metadata."""

from pydantic import BaseModel, ConfigDict, Field

from ..utils.filenames import escape_filename
from .chapter import Chapter


class Book(BaseModel):
    """A book as scraped from the Ellu reader.

    Populated stage by stage: the metadata resolver fills the identifiers,
    title and author, the manifest extractor fills ``chapters`` and the
    later stages mutate each chapter's content in place.
    """

    model_config = ConfigDict(validate_assignment=True)

    title: str = Field(default="", description="Book title")
    id: int | None = Field(default=None, description="Site-internal book id used by the reader")
    catalog_number: int = Field(..., description="Catalog number (ISBN-like) from the page URL")
    author: str = Field(default="", description="Author line from the book header")
    chapters: list[Chapter] = Field(default_factory=list, description="Chapters in manifest order")

    def require_id(self) -> int:
        """Return the internal book id, failing if it was never resolved."""
        if self.id is None:
            raise ValueError(f"Book {self.catalog_number} has no internal id yet")
        return self.id

    def get_output_filename(self) -> str:
        """Get the EPUB file name (``<title> (<id>).epub``), safe for the filesystem.

        A title that escapes to nothing is replaced by the catalog number.
        """
        name = escape_filename(self.title) or str(self.catalog_number)
        return f"{name} ({self.require_id()}).epub"
