"""
Pydantic schemas for the rows and storage entries the scripts read.
"""
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PaymentProofRecord(BaseModel):
    """Snapshot of a payments row that still references a proof file."""

    id: Union[int, str] = Field(..., description="Opaque row identifier")
    proof_reference: Optional[str] = Field(
        None, alias="proof_url", description="Bucket-relative path or full public URL"
    )
    payment_date: Optional[date] = Field(None, description="Payment date used for cutoff comparison")

    model_config = ConfigDict(populate_by_name=True)


class StorageObjectEntry(BaseModel):
    """One entry of a folder listing."""

    name: str = Field(..., description="Leaf file name within the listed folder")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    metadata_present: bool = Field(False, description="False for folder placeholders")
    size: Optional[int] = Field(None, description="Object size in bytes, when reported")

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @classmethod
    def from_supabase(cls, item: Dict[str, Any]) -> "StorageObjectEntry":
        """Build an entry from a storage list() item."""
        metadata = item.get("metadata")
        size = None
        if isinstance(metadata, dict):
            size = metadata.get("size")
        return cls(
            name=item["name"],
            created_at=item.get("created_at"),
            metadata_present=bool(metadata),
            size=size,
        )

    def is_older_than(self, cutoff: datetime) -> bool:
        """True when this entry is a file created strictly before cutoff."""
        if not self.metadata_present or self.created_at is None:
            return False
        return self.created_at < cutoff
