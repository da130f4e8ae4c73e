"""EPUB generation module for ellu-dl."""

from .builder import EPUBBuilder


__all__ = ["EPUBBuilder"]
