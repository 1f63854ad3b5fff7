"""
Pipeline runner that synchronizes a batch of documentation files.

This module coordinates:
1. Reading each documentation file
2. Reconciling it against its referenced sources (shared source cache)
3. Writing updated files (WRITE mode only, and only when something changed)
4. Aggregating per-document reports and errors

Documents are independent units of work. With more than one worker they are
processed by an asyncio worker pool, each reconciliation running in a thread;
the only shared state is the read-only source cache.
"""

import asyncio
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple
import logging

from snips.cache import SourceCache
from snips.config import SnipsConfig
from snips.errors import DocumentUnreadable
from snips.extractors.language_detector import Classifier
from snips.schemas import DocumentReport, ReconcileMode, ReconcileStatus, RunSummary, SyncError
from snips.sync.reconciler import DocumentReconciler

logger = logging.getLogger(__name__)


def read_document(path: Path) -> str:
    """Read a documentation file, keeping its line endings untouched."""
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def write_document(path: Path, text: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


class SyncPipeline:
    """Orchestrates reconciliation of every documentation file in a run."""

    def __init__(
        self,
        config: SnipsConfig,
        classifier: Optional[Classifier] = None,
        cache: Optional[SourceCache] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            config: Resolved run configuration (mode, files, workers)
            classifier: Language classifier override
            cache: Source cache; a fresh one per pipeline if omitted
        """
        self.config = config
        self.classifier = classifier
        self.cache = cache if cache is not None else SourceCache()

    @property
    def mode(self) -> ReconcileMode:
        return self.config.mode

    def process_document(self, path: Path) -> DocumentReport:
        """
        Reconcile a single documentation file.

        Never raises for document-level problems: unreadable or unwritable
        files are recorded on the report so the rest of the batch proceeds.

        Args:
            path: Documentation file

        Returns:
            DocumentReport for this file
        """
        path = Path(path)
        report = DocumentReport(path=str(path))

        try:
            text = read_document(path)
        except (OSError, UnicodeDecodeError) as e:
            error = DocumentUnreadable(path, str(e))
            logger.error(str(error))
            report.error = SyncError.from_exception(error)
            return report

        reconciler = DocumentReconciler(
            base_dir=path.parent,
            cache=self.cache,
            classifier=self.classifier,
        )
        outcome = reconciler.reconcile(text, self.mode)
        report.outcome = outcome

        if outcome.errors:
            logger.warning(f"{path}: {len(outcome.errors)} error(s), not written")
            return report

        if outcome.status == ReconcileStatus.UPDATED:
            try:
                write_document(path, outcome.text)
            except OSError as e:
                error = DocumentUnreadable(path, str(e))
                logger.error(str(error))
                report.error = SyncError.from_exception(error)
                return report
            report.written = True
            logger.info(f"Updated {path} ({len(outcome.out_of_sync)} snippet(s))")
        elif outcome.changed:
            logger.info(f"{path}: {len(outcome.out_of_sync)} snippet(s) out of sync")
        else:
            logger.debug(f"{path}: in sync")

        return report

    async def _worker(
        self,
        worker_id: int,
        document_queue: "asyncio.Queue[Tuple[int, Path]]",
        reports: List[Optional[DocumentReport]],
    ) -> None:
        """
        Worker that processes documents from the shared queue.

        Reports are stored by input index so output order never depends on
        which worker finished first.
        """
        while True:
            try:
                index, path = document_queue.get_nowait()
            except asyncio.QueueEmpty:
                break

            try:
                reports[index] = await asyncio.to_thread(self.process_document, path)
            except Exception as e:
                logger.exception(f"Worker {worker_id}: failed {path}")
                reports[index] = DocumentReport(path=str(path), error=SyncError.from_exception(e))
            finally:
                document_queue.task_done()

    async def run(self) -> RunSummary:
        """
        Run the pipeline over every configured file.

        Returns:
            RunSummary with one report per file, in input order
        """
        start_time = datetime.now()
        files = list(self.config.files)
        num_workers = max(1, min(self.config.workers, len(files) or 1))

        logger.info(f"Processing {len(files)} documents in {self.mode.value} mode with {num_workers} worker(s)")

        reports: List[Optional[DocumentReport]] = [None] * len(files)

        if num_workers == 1:
            for index, path in enumerate(files):
                reports[index] = self.process_document(path)
        else:
            document_queue: "asyncio.Queue[Tuple[int, Path]]" = asyncio.Queue()
            for item in enumerate(files):
                document_queue.put_nowait(item)

            workers = [
                self._worker(worker_id, document_queue, reports)
                for worker_id in range(num_workers)
            ]
            await asyncio.gather(*workers)

        duration = (datetime.now() - start_time).total_seconds()
        summary = RunSummary(mode=self.mode, reports=reports, duration_seconds=duration)

        logger.info(
            f"Done in {duration:.2f}s: {len(summary.written_documents)} written, "
            f"{len(summary.out_of_sync_documents)} out of sync, {summary.total_errors} error(s); "
            f"source cache {self.cache.get_stats()}"
        )
        return summary

    def run_sync(self) -> RunSummary:
        """Blocking wrapper around run()."""
        return asyncio.run(self.run())
