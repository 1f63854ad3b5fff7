"""Per-run source cache."""

from .manager import SourceCache

__all__ = ["SourceCache"]
