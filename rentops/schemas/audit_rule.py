"""
Pydantic schemas for expense rows and the audit rules seeded from them.
"""
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator


class ExpenseRecord(BaseModel):
    """Snapshot of an expenses row."""

    id: Union[int, str]
    item: str = ""
    category: Optional[str] = None
    total_amount: float = 0.0
    date: Optional[str] = None

    @field_validator("item", mode="before")
    @classmethod
    def item_or_empty(cls, v):
        return v or ""

    @field_validator("total_amount", mode="before")
    @classmethod
    def amount_or_zero(cls, v):
        # Non-numeric amounts count as zero
        try:
            return float(v)
        except (TypeError, ValueError):
            return 0.0


class AuditRuleCreate(BaseModel):
    """Row inserted into expense_audit_rules."""

    item_name: str = Field(..., description="Canonical item name")
    category: str = Field(..., description="Expense category")
    avg_price: float = Field(..., description="Historical average price")
    max_allowed_price: float = Field(..., description="Price above which an alert is raised")
    expected_frequency_days: int = Field(..., description="Expected days between purchases")
    keywords: List[str] = Field(default_factory=list, description="Match keywords for autocomplete")
    is_active: bool = True
