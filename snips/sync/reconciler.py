"""
Document reconciler.

Runs every reference in one documentation file through extraction, tagging
and synchronization, then produces the outcome for the requested mode:

- WRITE: the updated document text (never partially applied)
- CHECK: whether the document is in sync
- DIFF:  old/new fence pairs for every drifted reference

The reconciler works on strings only; reading and writing documentation
files is the pipeline's job.
"""

from pathlib import Path
from typing import List, Optional, Tuple, Union
import logging

from snips.cache.manager import SourceCache
from snips.errors import SnipsError
from snips.extractors.language_detector import Classifier, tag
from snips.extractors.reference_resolver import (
    ReferenceResolver,
    ReferenceSite,
    ScannedDocument,
    resolve_source_path,
)
from snips.schemas import (
    BlockChange,
    DocumentDiff,
    ExtractedBlock,
    Reference,
    ReconcileMode,
    ReconcileOutcome,
    ReconcileStatus,
    SyncAction,
    SyncError,
    SyncResult,
)
from snips.sync.synchronizer import BlockSynchronizer

logger = logging.getLogger(__name__)


class DocumentReconciler:
    """Reconcile documentation text against its referenced sources."""

    def __init__(
        self,
        base_dir: Union[str, Path] = ".",
        cache: Optional[SourceCache] = None,
        classifier: Optional[Classifier] = None,
    ):
        """
        Initialize the reconciler.

        Args:
            base_dir: Directory relative reference paths are resolved against
                      (normally the documentation file's directory)
            cache: Shared per-run source cache; a private one is created if omitted
            classifier: Language classifier; defaults to the static table
        """
        self.base_dir = Path(base_dir)
        self.cache = cache if cache is not None else SourceCache()
        self.classifier = classifier
        self.resolver = ReferenceResolver()
        self.synchronizer = BlockSynchronizer()

    def extract_block(self, reference: Reference) -> ExtractedBlock:
        """
        Extract and tag the content a reference asks for.

        Raises:
            SnipsError: Source unreadable, snippet missing or malformed markers
        """
        source_path = resolve_source_path(reference, self.base_dir)
        source = self.cache.get(source_path)
        lines = source.extract(reference.snippet_name)
        return ExtractedBlock(lines=lines, language_tag=tag(source_path, self.classifier))

    def _resolve_site(self, site: ReferenceSite) -> SyncResult:
        if site.reference is None:
            return SyncResult(
                action=SyncAction.ERROR,
                error=SyncError.from_exception(site.error, site.line_index + 1),
            )

        if site.error is not None:
            return self.synchronizer.synchronize(site.reference, site.error, site.fence)

        try:
            extracted: Union[ExtractedBlock, Exception] = self.extract_block(site.reference)
        except SnipsError as e:
            extracted = e

        return self.synchronizer.synchronize(site.reference, extracted, site.fence)

    def diff(self, document_text: str) -> Tuple[ScannedDocument, DocumentDiff]:
        """
        Compute per-reference synchronization results without applying them.

        One reference's failure never prevents the others from resolving.
        """
        document = self.resolver.scan(document_text)
        results = [self._resolve_site(site) for site in document.sites]
        return document, DocumentDiff(results=results)

    def apply(self, document: ScannedDocument, diff: DocumentDiff) -> str:
        """
        Splice every REPLACE / INSERT_MISSING result into the document text.

        Untouched text is copied byte-for-byte; new fences use the document's
        own line-break convention.
        """
        text = document.text
        newline = document.newline
        edits: List[Tuple[int, int, str]] = []

        for result in diff.changed:
            block = newline.join(result.rendered)

            if result.action == SyncAction.REPLACE:
                span = result.old_fence.span
                terminated = text[span.start:span.end].endswith("\n")
                edits.append((span.start, span.end, block + newline if terminated else block))
            else:
                location = result.reference.location
                if text[location.start:location.end].endswith("\n"):
                    edits.append((location.end, location.end, block + newline))
                else:
                    # Marker is the last line and has no line ending
                    edits.append((location.end, location.end, newline + block))

        if not edits:
            return text

        pieces = []
        position = 0
        for start, end, replacement in sorted(edits):
            pieces.append(text[position:start])
            pieces.append(replacement)
            position = end
        pieces.append(text[position:])
        return "".join(pieces)

    def reconcile(self, document_text: str, mode: ReconcileMode = ReconcileMode.WRITE) -> ReconcileOutcome:
        """
        Reconcile one document.

        Args:
            document_text: Raw documentation contents
            mode: WRITE, CHECK or DIFF

        Returns:
            ReconcileOutcome. In WRITE mode ``text`` holds the new document
            (identical to the input when nothing drifted) unless an error
            occurred, in which case it is None and nothing must be written.
        """
        document, diff = self.diff(document_text)

        changed = diff.changed
        errors = diff.errors
        out_of_sync = [r.reference for r in changed]
        changes = [
            BlockChange(
                reference=r.reference,
                old_lines=r.old_fence.lines if r.old_fence else [],
                new_lines=r.rendered,
            )
            for r in changed
        ]

        outcome = ReconcileOutcome(
            mode=mode,
            status=ReconcileStatus.ERROR,
            out_of_sync=out_of_sync,
            changes=changes if mode == ReconcileMode.DIFF else [],
            errors=errors,
            diff=diff,
        )

        if errors:
            logger.info(f"{len(errors)} error(s); document left untouched")
            return outcome

        if mode == ReconcileMode.WRITE:
            outcome.text = self.apply(document, diff)
            outcome.status = ReconcileStatus.UPDATED if changed else ReconcileStatus.UNCHANGED
        elif mode == ReconcileMode.CHECK:
            outcome.status = ReconcileStatus.OUT_OF_SYNC if changed else ReconcileStatus.IN_SYNC
        else:
            outcome.status = ReconcileStatus.DIFF if changed else ReconcileStatus.IN_SYNC

        logger.debug(
            f"Reconciled {len(diff.results)} references: "
            f"{len(changed)} changed, status={outcome.status.value}"
        )
        return outcome


def reconcile(
    document_text: str,
    mode: ReconcileMode = ReconcileMode.WRITE,
    base_dir: Union[str, Path] = ".",
    cache: Optional[SourceCache] = None,
    classifier: Optional[Classifier] = None,
) -> ReconcileOutcome:
    """
    Convenience function to reconcile a document held in memory.

    Example:
        >>> from pathlib import Path
        >>> text = Path("docs/guide.md").read_text()
        >>> outcome = reconcile(text, ReconcileMode.CHECK, base_dir="docs")
        >>> outcome.status
        <ReconcileStatus.IN_SYNC: 'in_sync'>
    """
    reconciler = DocumentReconciler(base_dir=base_dir, cache=cache, classifier=classifier)
    return reconciler.reconcile(document_text, mode)
