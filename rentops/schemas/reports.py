"""
Pydantic schemas for the reports produced by each run.
"""
from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from rentops.schemas.enums import PruneOutcome


class BatchDeleteResult(BaseModel):
    """Outcome of one remove call."""

    index: int = Field(..., description="Zero-based batch number")
    offset: int = Field(..., description="Position of the first path in the full list")
    paths: List[str] = Field(default_factory=list)
    removed: int = Field(0, description="Objects reported as removed")
    removed_paths: List[str] = Field(default_factory=list, description="Paths the store reported as removed")
    error: Optional[str] = Field(None, description="Error message when the call failed")

    @property
    def succeeded(self) -> bool:
        return self.error is None


class CleanupReport(BaseModel):
    """Summary of a DB-driven cleanup run."""

    cutoff: date
    bucket: str
    table: str
    dry_run: bool = False
    records_selected: int = 0
    paths: List[str] = Field(default_factory=list)
    batches: List[BatchDeleteResult] = Field(default_factory=list)
    cleared_ids: List[Union[int, str]] = Field(default_factory=list)
    failed_batch_ids: List[Union[int, str]] = Field(
        default_factory=list,
        description="Rows cleared although their batch failed",
    )
    update_error: Optional[str] = None

    @property
    def removed_total(self) -> int:
        return sum(batch.removed for batch in self.batches)

    @property
    def failed_batches(self) -> List[BatchDeleteResult]:
        return [batch for batch in self.batches if not batch.succeeded]

    @property
    def has_errors(self) -> bool:
        return bool(self.failed_batches) or self.update_error is not None


class PruneReport(BaseModel):
    """Summary of a listing-driven prune run."""

    bucket: str
    folder: str
    cutoff: datetime
    dry_run: bool = False
    pages_listed: int = 0
    total_deleted: int = 0
    bytes_freed: int = 0
    outcome: Optional[PruneOutcome] = None
    abort_reason: Optional[str] = None
    preview_paths: List[str] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return self.outcome == PruneOutcome.ABORTED
