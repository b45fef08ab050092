"""
ExpenseRepository for reading the expense history.
"""
from typing import List

from supabase import Client

from rentops.repositories.base import BaseRepository
from rentops.schemas.audit_rule import ExpenseRecord


class ExpenseRepository(BaseRepository):
    """Repository for the expenses table."""

    def __init__(self, client: Client, table: str = "expenses"):
        super().__init__(client, table)

    def get_all(self, page_size: int = 1000) -> List[ExpenseRecord]:
        """Load every expense, paginating with range requests."""
        rows = self.fetch_all_pages("id, item, category, total_amount, date", page_size=page_size)
        return [ExpenseRecord.model_validate(row) for row in rows]
