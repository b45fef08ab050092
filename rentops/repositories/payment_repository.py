"""
PaymentRepository for proof-related queries on the payments table.
"""
from datetime import date
from typing import List, Sequence, Union

import structlog
from supabase import Client

from rentops.integrations.exceptions import RecordQueryError, RecordUpdateError
from rentops.repositories.base import BaseRepository
from rentops.schemas.storage import PaymentProofRecord

logger = structlog.get_logger(__name__)


class PaymentRepository(BaseRepository):
    """Repository for payments with proof reference queries."""

    def __init__(self, client: Client, table: str = "payments"):
        super().__init__(client, table)

    def get_stale_proofs(self, cutoff: date) -> List[PaymentProofRecord]:
        """
        Get payments dated before cutoff that still reference a proof file.

        The whole result set is loaded at once.
        """
        builder = (
            self.query()
            .select("id, proof_url, payment_date")
            .lt("payment_date", cutoff.isoformat())
            .not_.is_("proof_url", "null")
        )
        rows = self.execute(builder, RecordQueryError, "select_stale_proofs", cutoff=cutoff.isoformat())
        return [PaymentProofRecord.model_validate(row) for row in rows]

    def clear_proof_references(self, ids: Sequence[Union[int, str]]) -> int:
        """Set proof_url to null on the given rows; returns the number of ids targeted."""
        if not ids:
            return 0
        builder = self.query().update({"proof_url": None}).in_("id", list(ids))
        self.execute(builder, RecordUpdateError, "clear_proof_references", count=len(ids))
        logger.info("proof_references_cleared", table=self.table, count=len(ids))
        return len(ids)
