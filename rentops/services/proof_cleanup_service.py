"""
DB-driven proof cleanup.

Selects payments older than a cutoff that still reference a proof file,
deletes those files from the bucket in batches and clears the references.
"""
from datetime import date
from typing import List, Tuple, Union

from rentops.core.logging import get_logger
from rentops.integrations.base import ObjectStore
from rentops.integrations.exceptions import RecordUpdateError
from rentops.integrations.storage_utils import normalize_proof_path
from rentops.repositories.payment_repository import PaymentRepository
from rentops.schemas.enums import BatchFailurePolicy
from rentops.schemas.reports import CleanupReport
from rentops.schemas.storage import PaymentProofRecord
from rentops.services.batch_deleter import BatchDeleter

logger = get_logger(__name__)

RowId = Union[int, str]


class ProofCleanupService:
    """Reconcile the payments table with the proofs bucket."""

    def __init__(self, payments: PaymentRepository, store: ObjectStore, batch_size: int = 50):
        """
        Args:
            payments: Repository over the payments table
            store: Bucket holding the proof files
            batch_size: Paths per remove call
        """
        self.payments = payments
        self.store = store
        self.batch_size = batch_size

    def plan(self, records: List[PaymentProofRecord]) -> List[Tuple[RowId, str]]:
        """Pair each row id with the normalized path of its proof file."""
        targets: List[Tuple[RowId, str]] = []
        for record in records:
            if not record.proof_reference:
                continue
            path = normalize_proof_path(record.proof_reference, self.store.bucket)
            if not path:
                continue
            targets.append((record.id, path))
        return targets

    def run(self, cutoff: date, dry_run: bool = False) -> CleanupReport:
        """
        Execute one cleanup pass.

        Args:
            cutoff: Payments dated strictly before this day are targeted
            dry_run: Stop after planning; nothing is deleted or updated

        Returns:
            CleanupReport describing the pass

        Raises:
            RecordQueryError: If the payments select fails
        """
        report = CleanupReport(
            cutoff=cutoff,
            bucket=self.store.bucket,
            table=self.payments.table,
            dry_run=dry_run,
        )

        logger.info("cleanup_started", cutoff=cutoff.isoformat(), bucket=self.store.bucket)
        records = self.payments.get_stale_proofs(cutoff)
        report.records_selected = len(records)

        if not records:
            logger.info("cleanup_nothing_to_do", cutoff=cutoff.isoformat())
            return report

        targets = self.plan(records)
        if not targets:
            logger.warning("cleanup_no_paths_extracted", records=len(records))
            return report

        report.paths = [path for _, path in targets]
        logger.info("cleanup_paths_extracted", records=len(records), paths=len(targets))

        if dry_run:
            return report

        deleter = BatchDeleter(self.store, self.batch_size, BatchFailurePolicy.CONTINUE)
        report.batches = deleter.delete(report.paths)

        row_ids = [row_id for row_id, _ in targets]
        for batch in report.failed_batches:
            report.failed_batch_ids.extend(
                row_id for row_id, _ in targets[batch.offset:batch.offset + len(batch.paths)]
            )
        if report.failed_batch_ids:
            # References are cleared even where the file may still exist
            logger.warning(
                "cleanup_clearing_references_of_failed_batches",
                count=len(report.failed_batch_ids),
                ids=report.failed_batch_ids,
            )

        try:
            self.payments.clear_proof_references(row_ids)
            report.cleared_ids = row_ids
        except RecordUpdateError as e:
            report.update_error = e.message
            logger.error("cleanup_update_failed", error=str(e))

        logger.info(
            "cleanup_completed",
            removed=report.removed_total,
            failed_batches=len(report.failed_batches),
            cleared=len(report.cleared_ids),
        )
        return report
