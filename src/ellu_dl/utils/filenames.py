"""Filesystem-safe naming for output files."""

import sys


UNSAFE_CHARS = ["~", "#", "%", "&", "*", "{", "}", "\\", "<", ">", "?", "/", "`", '"', "|", "+"]


def escape_filename(name: str) -> str:
    """Replace characters that are invalid or awkward in file names.

    Long titles with a subtitle (``Title: Subtitle``) are cut at the colon,
    mirroring how book titles are usually shortened.

    Args:
        name: Raw file name, usually the book title

    Returns:
        Sanitized file name
    """
    if ":" in name:
        if name.index(":") > 15:
            name = name.split(":")[0]
        elif sys.platform == "win32":
            name = name.replace(":", ",")

    for ch in UNSAFE_CHARS:
        if ch in name:
            name = name.replace(ch, "_")

    return name.strip()
