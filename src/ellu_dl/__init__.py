"""ellu-dl - Convert books from the Ellu web reader to EPUB."""

__version__ = "1.0.0"
