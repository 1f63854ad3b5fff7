"""Synchronization components: per-reference decisions and whole-document reconciliation."""

from .synchronizer import BlockSynchronizer, render_block, synchronize
from .reconciler import DocumentReconciler, reconcile

__all__ = [
    "BlockSynchronizer",
    "render_block",
    "synchronize",
    "DocumentReconciler",
    "reconcile",
]
