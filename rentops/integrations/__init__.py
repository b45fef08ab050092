"""
Integrations package for external services.

This package contains client implementations for:
- Supabase (service-role client and Storage buckets)
- S3-compatible object storage (Cloudflare R2)
"""

from rentops.integrations.base import ObjectStore
from rentops.integrations.object_storage_client import ObjectStorageClient, R2Config
from rentops.integrations.supabase_client import (
    SupabaseConfig,
    SupabaseStorageClient,
    create_supabase_client,
)

__all__ = [
    "ObjectStorageClient",
    "ObjectStore",
    "R2Config",
    "SupabaseConfig",
    "SupabaseStorageClient",
    "create_supabase_client",
]
