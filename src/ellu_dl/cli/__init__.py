"""
ellu-dl CLI module.

This module provides the Click-based command-line interface for ellu-dl.
"""

from .commands import cli, main


__all__ = ["cli", "main"]
