"""Shared helpers for ellu-dl."""

from .exceptions import (
    AssemblyError,
    AuthenticationError,
    DecodeError,
    ElluError,
    FetchError,
    InvalidURLError,
    ManifestNotFoundError,
    NotFoundError,
    ParseError,
    ResourceFetchError,
)
from .filenames import escape_filename


__all__ = [
    "AssemblyError",
    "AuthenticationError",
    "DecodeError",
    "ElluError",
    "FetchError",
    "InvalidURLError",
    "ManifestNotFoundError",
    "NotFoundError",
    "ParseError",
    "ResourceFetchError",
    "escape_filename",
]
