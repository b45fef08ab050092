"""
Pydantic schemas for rows, storage entries and run reports.
"""
from rentops.schemas.audit_rule import AuditRuleCreate, ExpenseRecord
from rentops.schemas.enums import BatchFailurePolicy, PruneOutcome
from rentops.schemas.reports import BatchDeleteResult, CleanupReport, PruneReport
from rentops.schemas.storage import PaymentProofRecord, StorageObjectEntry

__all__ = [
    "AuditRuleCreate",
    "BatchDeleteResult",
    "BatchFailurePolicy",
    "CleanupReport",
    "ExpenseRecord",
    "PaymentProofRecord",
    "PruneOutcome",
    "PruneReport",
    "StorageObjectEntry",
]
