"""
Rich-based display system for ellu-dl.

This module provides terminal output using the Rich library: the book
information panel, progress bars and the logger setup.
"""

from .constants import EMOJI_MAP
from .rich_display import RichDisplay
from .rich_logger import get_logger, get_valid_log_levels, setup_logger


__all__ = [
    "EMOJI_MAP",
    "RichDisplay",
    "get_logger",
    "get_valid_log_levels",
    "setup_logger",
]
