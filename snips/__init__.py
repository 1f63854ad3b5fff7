"""
snips - keep markdown code snippets synchronized with their source files.

Documentation references a source file (or a named snippet inside it) with an
HTML comment, and snips keeps the fenced code block that follows it in sync:

    <!-- snips: src/lib.rs#setup -->
    ```rust
    ...
    ```

Main Components:
- Extractors: marker grammar, snippet extraction, reference resolution, language tags
- Sync: per-reference synchronization and whole-document reconciliation
- Cache: per-run source file cache
- Pipeline: batch processing of documentation files
- CLI: the ``snips`` command

Usage:
    from snips import ReconcileMode, reconcile

    outcome = reconcile(text, ReconcileMode.CHECK, base_dir="docs")
"""

from .errors import (
    SnipsError,
    SnippetNotFound,
    UnterminatedSnippet,
    DuplicateSnippetName,
    DanglingEnd,
    SourceFileUnreadable,
    DocumentUnreadable,
    InvalidMarker,
    UnclosedFence,
    NoMarkdownFiles,
)

from .schemas import (
    # Markers
    MarkerKind,
    SourceMarker,
    SnippetRange,
    Span,
    Reference,
    FencedBlock,

    # Extraction
    ExtractedBlock,

    # Synchronization
    SyncAction,
    SyncError,
    SyncResult,
    DocumentDiff,

    # Reconciliation
    ReconcileMode,
    ReconcileStatus,
    BlockChange,
    ReconcileOutcome,

    # Pipeline
    DocumentReport,
    RunSummary,
)

from .extractors import (
    LanguageDetector,
    LanguageTag,
    classify,
    tag,
    extract,
    extract_lines,
    resolve_references,
)
from .cache import SourceCache
from .sync import DocumentReconciler, reconcile
from .config import SnipsConfig
from .pipeline import SyncPipeline

__all__ = [
    # Errors
    "SnipsError",
    "SnippetNotFound",
    "UnterminatedSnippet",
    "DuplicateSnippetName",
    "DanglingEnd",
    "SourceFileUnreadable",
    "DocumentUnreadable",
    "InvalidMarker",
    "UnclosedFence",
    "NoMarkdownFiles",

    # Schemas
    "MarkerKind",
    "SourceMarker",
    "SnippetRange",
    "Span",
    "Reference",
    "FencedBlock",
    "ExtractedBlock",
    "SyncAction",
    "SyncError",
    "SyncResult",
    "DocumentDiff",
    "ReconcileMode",
    "ReconcileStatus",
    "BlockChange",
    "ReconcileOutcome",
    "DocumentReport",
    "RunSummary",

    # Engine
    "LanguageDetector",
    "LanguageTag",
    "classify",
    "tag",
    "extract",
    "extract_lines",
    "resolve_references",
    "SourceCache",
    "DocumentReconciler",
    "reconcile",
    "SnipsConfig",
    "SyncPipeline",
]

__version__ = "0.1.0"
