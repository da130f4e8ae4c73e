"""Pydantic models for chapter/content metadata."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Chapter(BaseModel):
    """Single chapter of a book.

    Created from one entry of the reader's chapter manifest, e.g.
    ``{"number": 0, "Title": "Intro"}``. ``id`` is the chapter number the
    reader API is keyed by, not the position in the manifest. Manifest
    entries are validated by alias only so a stray ``id`` key is ignored.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        validate_by_name=True,
        extra="ignore",
    )

    id: int = Field(
        ...,
        validation_alias="number",
        description="Chapter number",
    )
    title: str = Field(default="", description="Chapter title")
    content: str = Field(default="", description="Chapter HTML body")

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data: Any) -> Any:
        """Match manifest keys case-insensitively (``Title``, ``Number``)."""
        if isinstance(data, dict):
            return {k.lower() if isinstance(k, str) else k: v for k, v in data.items()}
        return data

    def has_content(self) -> bool:
        """Check if the chapter body was fetched."""
        return bool(self.content)
