"""
Centralized Pydantic schemas for snips.

This module is the single source of truth for the values exchanged between
the marker grammar, the snippet extractor, the synchronizer, the reconciler
and the batch pipeline. Every value is derived per invocation; nothing here
is persisted between runs.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# MARKER SCHEMAS
# ============================================================================

class MarkerKind(str, Enum):
    """The three marker shapes recognized by the grammar."""
    SOURCE_START = "source_start"
    SOURCE_END = "source_end"
    DOC_REFERENCE = "doc_reference"


class SourceMarker(BaseModel):
    """A snips-start / snips-end marker found in a source file."""
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(None, description="Snippet name; None only for an unnamed end marker")
    line_index: int = Field(description="Zero-based line index of the marker line")
    kind: MarkerKind = Field(description="SOURCE_START or SOURCE_END")


class SnippetRange(BaseModel):
    """Half-open line range of a snippet, excluding its own marker lines."""
    model_config = ConfigDict(frozen=True)

    start_line: int = Field(description="First line of the snippet body (zero-based)")
    end_line: int = Field(description="Line after the last body line (exclusive)")

    @property
    def line_count(self) -> int:
        return max(0, self.end_line - self.start_line)


class Span(BaseModel):
    """Character offsets into a document, end exclusive."""
    model_config = ConfigDict(frozen=True)

    start: int
    end: int


class Reference(BaseModel):
    """A documentation-side request for embedded source content."""
    model_config = ConfigDict(frozen=True)

    source_path: str = Field(description="Path as written in the marker, e.g. '../src/lib.rs'")
    snippet_name: Optional[str] = Field(None, description="Named snippet, or None for the whole file")
    location: Span = Field(description="Span of the marker line in the document")
    line_index: int = Field(description="Zero-based line index of the marker")
    indent: str = Field(default="", description="Leading whitespace of the marker line")

    @property
    def marker(self) -> str:
        """Render the reference the way it is written in the marker."""
        if self.snippet_name:
            return f"{self.source_path}#{self.snippet_name}"
        return self.source_path

    @property
    def line_number(self) -> int:
        """One-based line number, for messages."""
        return self.line_index + 1


class FencedBlock(BaseModel):
    """A fenced code block currently following a reference."""
    model_config = ConfigDict(frozen=True)

    span: Span = Field(description="Span from the opening fence line through the closing fence line")
    start_line: int = Field(description="Line index of the opening fence")
    end_line: int = Field(description="Line index of the closing fence")
    language: Optional[str] = Field(None, description="First word of the info string, if any")
    lines: List[str] = Field(default_factory=list, description="Raw lines, including both fence lines")

    @property
    def body(self) -> List[str]:
        """Lines between the opening and closing fence."""
        return list(self.lines[1:-1])


# ============================================================================
# EXTRACTION SCHEMAS
# ============================================================================

class ExtractedBlock(BaseModel):
    """Snippet content ready to embed: indentation-normalized lines plus a language tag."""
    lines: List[str] = Field(default_factory=list, description="Normalized snippet lines")
    language_tag: Optional[str] = Field(None, description="Fence language label; None renders untagged")


# ============================================================================
# SYNCHRONIZATION SCHEMAS
# ============================================================================

class SyncAction(str, Enum):
    """Per-reference synchronization decision."""
    UNCHANGED = "unchanged"
    REPLACE = "replace"
    INSERT_MISSING = "insert_missing"
    ERROR = "error"


class SyncError(BaseModel):
    """Serializable record of an error raised while resolving a reference."""
    kind: str = Field(description="Exception class name, e.g. 'SnippetNotFound'")
    message: str = Field(description="Human readable message")
    line: Optional[int] = Field(None, description="One-based documentation line, when known")

    @classmethod
    def from_exception(cls, exc: Exception, line: Optional[int] = None) -> "SyncError":
        return cls(kind=type(exc).__name__, message=str(exc), line=line)


class SyncResult(BaseModel):
    """Outcome of reconciling one reference against its fenced block."""
    reference: Optional[Reference] = Field(None, description="None for markers that failed to parse")
    action: SyncAction
    old_fence: Optional[FencedBlock] = Field(None, description="Fence currently in the document, if any")
    new_block: Optional[ExtractedBlock] = Field(None, description="Freshly extracted content")
    rendered: List[str] = Field(default_factory=list, description="New fence lines, indented for the document")
    error: Optional[SyncError] = None

    @property
    def changed(self) -> bool:
        return self.action in (SyncAction.REPLACE, SyncAction.INSERT_MISSING)


class DocumentDiff(BaseModel):
    """Ordered per-reference results for one document."""
    results: List[SyncResult] = Field(default_factory=list)

    @property
    def changed(self) -> List[SyncResult]:
        return [r for r in self.results if r.changed]

    @property
    def errors(self) -> List[SyncError]:
        return [r.error for r in self.results if r.error is not None]

    @property
    def is_clean(self) -> bool:
        return all(r.action == SyncAction.UNCHANGED for r in self.results)


# ============================================================================
# RECONCILIATION SCHEMAS
# ============================================================================

class ReconcileMode(str, Enum):
    """What the reconciler should produce."""
    WRITE = "write"
    CHECK = "check"
    DIFF = "diff"


class ReconcileStatus(str, Enum):
    """Document-level verdict."""
    UNCHANGED = "unchanged"
    UPDATED = "updated"
    IN_SYNC = "in_sync"
    OUT_OF_SYNC = "out_of_sync"
    DIFF = "diff"
    ERROR = "error"


class BlockChange(BaseModel):
    """Old/new content pair for one drifted reference, for diff rendering."""
    reference: Reference
    old_lines: List[str] = Field(default_factory=list, description="Existing fence lines (empty when missing)")
    new_lines: List[str] = Field(default_factory=list, description="Freshly rendered fence lines")


class ReconcileOutcome(BaseModel):
    """Result of reconciling one document in a given mode."""
    mode: ReconcileMode
    status: ReconcileStatus
    text: Optional[str] = Field(None, description="Updated document text (WRITE mode, no errors)")
    out_of_sync: List[Reference] = Field(default_factory=list, description="References that need rewriting")
    changes: List[BlockChange] = Field(default_factory=list, description="Diff pairs for drifted references")
    errors: List[SyncError] = Field(default_factory=list)
    diff: DocumentDiff = Field(default_factory=DocumentDiff)

    @property
    def changed(self) -> bool:
        return bool(self.out_of_sync)

    @property
    def ok(self) -> bool:
        return not self.errors


# ============================================================================
# PIPELINE SCHEMAS
# ============================================================================

class DocumentReport(BaseModel):
    """Pipeline record for one documentation file."""
    path: str
    outcome: Optional[ReconcileOutcome] = None
    written: bool = False
    error: Optional[SyncError] = Field(None, description="Document-level failure (unreadable/unwritable)")

    @property
    def errors(self) -> List[SyncError]:
        errors = [self.error] if self.error else []
        if self.outcome:
            errors.extend(self.outcome.errors)
        return errors


class RunSummary(BaseModel):
    """Aggregate of one batch run."""
    mode: ReconcileMode
    reports: List[DocumentReport] = Field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def total_errors(self) -> int:
        return sum(len(r.errors) for r in self.reports)

    @property
    def out_of_sync_documents(self) -> List[DocumentReport]:
        return [r for r in self.reports if r.outcome is not None and r.outcome.changed]

    @property
    def written_documents(self) -> List[DocumentReport]:
        return [r for r in self.reports if r.written]

    @property
    def exit_code(self) -> int:
        """0 on success; 1 on any error, or on drift in CHECK mode."""
        if self.total_errors:
            return 1
        if self.mode == ReconcileMode.CHECK and self.out_of_sync_documents:
            return 1
        return 0
