"""
Repositories wrapping Supabase tables.
"""
from rentops.repositories.audit_rule_repository import AuditRuleRepository
from rentops.repositories.base import BaseRepository
from rentops.repositories.expense_repository import ExpenseRepository
from rentops.repositories.payment_repository import PaymentRepository

__all__ = [
    "AuditRuleRepository",
    "BaseRepository",
    "ExpenseRepository",
    "PaymentRepository",
]
