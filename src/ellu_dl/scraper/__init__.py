"""Scraping stages: metadata, chapter manifest and chapter content."""

from .content import build_chapter_url, populate_chapters
from .manifest import build_reader_url, extract_chapters, parse_manifest
from .metadata import parse_catalog_number, resolve_book


__all__ = [
    "build_chapter_url",
    "build_reader_url",
    "extract_chapters",
    "parse_catalog_number",
    "parse_manifest",
    "populate_chapters",
    "resolve_book",
]
