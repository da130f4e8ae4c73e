"""HTTP client for the Ellu reader."""

from .http import ElluClient


__all__ = ["ElluClient"]
