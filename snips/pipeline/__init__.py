"""Batch pipeline over documentation files."""

from .runner import SyncPipeline

__all__ = ["SyncPipeline"]
