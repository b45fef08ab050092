"""
AuditRuleRepository for the expense_audit_rules table.
"""
from typing import List

import structlog
from supabase import Client

from rentops.integrations.exceptions import RecordUpdateError
from rentops.repositories.base import BaseRepository
from rentops.schemas.audit_rule import AuditRuleCreate

logger = structlog.get_logger(__name__)

# PostgREST refuses unfiltered deletes; no row has this id
_NIL_UUID = "00000000-0000-0000-0000-000000000000"


class AuditRuleRepository(BaseRepository):
    """Repository for expense audit rules."""

    def __init__(self, client: Client, table: str = "expense_audit_rules"):
        super().__init__(client, table)

    def delete_all(self) -> None:
        """Remove every existing rule."""
        builder = self.query().delete().neq("id", _NIL_UUID)
        self.execute(builder, RecordUpdateError, "delete_rules")

    def insert_many(self, rules: List[AuditRuleCreate]) -> int:
        """Insert rules in a single request."""
        if not rules:
            return 0
        payload = [rule.model_dump() for rule in rules]
        self.execute(self.query().insert(payload), RecordUpdateError, "insert_rules", count=len(rules))
        return len(rules)

    def replace_all(self, rules: List[AuditRuleCreate]) -> int:
        """Delete current rules, then insert the new set."""
        self.delete_all()
        inserted = self.insert_many(rules)
        logger.info("audit_rules_replaced", table=self.table, count=inserted)
        return inserted
