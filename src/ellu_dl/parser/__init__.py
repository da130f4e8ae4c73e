"""HTML content rewriting for ellu-dl."""

from .resources import ResourceRewriter, add_sections, assemble


__all__ = ["ResourceRewriter", "add_sections", "assemble"]
