"""
Listing-driven bucket pruner.

Lists one folder page by page, oldest first, always from offset 0, and
deletes every file created before the cutoff. Deleted entries drop off the
front of the listing, so the next page starts after them. The loop ends on
an empty page (EMPTY), a page with nothing old enough (DONE), or an error,
a repeated page or the page limit (ABORTED).
"""
from datetime import datetime
from typing import List, Optional

from rentops.core.logging import get_logger
from rentops.integrations.base import ObjectStore
from rentops.integrations.exceptions import StorageDeleteError, StorageListError
from rentops.integrations.storage_utils import join_folder_path
from rentops.schemas.enums import BatchFailurePolicy, PruneOutcome
from rentops.schemas.reports import PruneReport
from rentops.schemas.storage import StorageObjectEntry
from rentops.services.batch_deleter import BatchDeleter

logger = get_logger(__name__)


def select_expired(entries: List[StorageObjectEntry], cutoff: datetime) -> List[StorageObjectEntry]:
    """Files (entries with metadata) created strictly before cutoff."""
    return [entry for entry in entries if entry.is_older_than(cutoff)]


class BucketPruneService:
    """Prune old files from one folder of a bucket."""

    def __init__(
        self,
        store: ObjectStore,
        folder: str,
        page_size: int = 100,
        max_pages: Optional[int] = None,
    ):
        self.store = store
        self.folder = folder
        self.page_size = page_size
        self.max_pages = max_pages

    def _abort(self, report: PruneReport, reason: str) -> PruneReport:
        report.outcome = PruneOutcome.ABORTED
        report.abort_reason = reason
        logger.error("prune_aborted", reason=reason, deleted=report.total_deleted)
        return report

    def run(self, cutoff: datetime, dry_run: bool = False) -> PruneReport:
        """
        Execute the prune loop.

        Args:
            cutoff: Timezone-aware instant; older files are deleted
            dry_run: List the first page only and report what would go

        Returns:
            PruneReport with the terminal outcome
        """
        report = PruneReport(
            bucket=self.store.bucket,
            folder=self.folder,
            cutoff=cutoff,
            dry_run=dry_run,
        )
        deleter = BatchDeleter(self.store, self.page_size, BatchFailurePolicy.ABORT)
        last_paths: Optional[List[str]] = None

        logger.info("prune_started", bucket=self.store.bucket, folder=self.folder, cutoff=cutoff.isoformat())

        while True:
            if self.max_pages is not None and report.pages_listed >= self.max_pages:
                return self._abort(report, "max_pages")

            try:
                entries = self.store.list_folder(self.folder, limit=self.page_size, offset=0)
            except StorageListError as e:
                return self._abort(report, f"list_failed: {e.message}")

            report.pages_listed += 1

            if not entries:
                report.outcome = PruneOutcome.EMPTY
                logger.info("prune_folder_empty", deleted=report.total_deleted)
                break

            expired = select_expired(entries, cutoff)
            logger.info("prune_page_listed", page=report.pages_listed, entries=len(entries), expired=len(expired))

            if not expired:
                report.outcome = PruneOutcome.DONE
                logger.info("prune_no_expired_entries", deleted=report.total_deleted)
                break

            paths = [join_folder_path(self.folder, entry.name) for entry in expired]

            if dry_run:
                report.preview_paths = paths
                report.outcome = PruneOutcome.DONE
                break

            if paths == last_paths:
                return self._abort(report, "no_progress")

            try:
                results = deleter.delete(paths)
            except StorageDeleteError as e:
                return self._abort(report, f"delete_failed: {e.message}")

            removed = {path for result in results for path in result.removed_paths}
            report.total_deleted += sum(result.removed for result in results)
            report.bytes_freed += sum(
                entry.size or 0
                for path, entry in zip(paths, expired)
                if path in removed
            )
            last_paths = paths

        logger.info("prune_completed", outcome=report.outcome.value, deleted=report.total_deleted)
        return report
