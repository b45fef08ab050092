"""
Object Storage Client

S3-compatible client for the Cloudflare R2 bucket where uploads are written
as "<folder>/<epoch-ms>_<name>". Implements the same ObjectStore protocol as
the Supabase storage client so the pruner can run against either backend.
"""

from dataclasses import dataclass
from typing import List, Optional

import boto3
import structlog
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from rentops.core.config import Settings, get_settings
from rentops.core.exceptions import ConfigurationError
from rentops.integrations.exceptions import (
    BackendConnectionError,
    StorageDeleteError,
    StorageListError,
)
from rentops.integrations.storage_utils import chunk_paths
from rentops.schemas.storage import StorageObjectEntry

logger = structlog.get_logger(__name__)

# delete_objects accepts at most this many keys per call
MAX_DELETE_KEYS = 1000


@dataclass
class R2Config:
    """Configuration for the S3-compatible bucket."""

    endpoint: str
    access_key: str
    secret_key: str
    bucket: str
    region: str = "auto"
    connection_timeout: int = 30
    read_timeout: int = 60

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "R2Config":
        """
        Load configuration from settings.

        Raises:
            ConfigurationError: If any R2 variable is missing
        """
        settings = settings or get_settings()
        missing = settings.missing_r2_credentials()
        if missing:
            raise ConfigurationError(missing)
        return cls(
            endpoint=settings.r2_endpoint,
            access_key=settings.r2_access_key_id,
            secret_key=settings.r2_secret_access_key,
            bucket=settings.r2_bucket_name,
        )


class ObjectStorageClient:
    """
    ObjectStore implementation for an S3-compatible bucket.

    Listing follows key order. Upload keys start with a millisecond
    timestamp, so key order is creation order.
    """

    def __init__(self, config: R2Config, s3_client=None):
        """
        Initialize object storage client.

        Args:
            config: Bucket configuration
            s3_client: Pre-built boto3 S3 client (tests pass a stubbed one)
        """
        self.config = config
        self.bucket = config.bucket

        if s3_client is not None:
            self.s3_client = s3_client
            return

        boto_config = Config(
            connect_timeout=config.connection_timeout,
            read_timeout=config.read_timeout,
            retries={"max_attempts": 1, "mode": "standard"},
            signature_version="s3v4",
        )

        try:
            self.s3_client = boto3.client(
                "s3",
                endpoint_url=config.endpoint,
                aws_access_key_id=config.access_key,
                aws_secret_access_key=config.secret_key,
                region_name=config.region,
                config=boto_config,
            )
        except Exception as e:
            logger.error("failed_to_initialize_storage_client", error=str(e))
            raise BackendConnectionError(
                "Failed to initialize storage client",
                original_exception=e,
                context={"endpoint": config.endpoint},
            )

        logger.info("object_storage_client_initialized", endpoint=config.endpoint, bucket=config.bucket)

    def list_folder(self, folder: str, limit: int, offset: int = 0) -> List[StorageObjectEntry]:
        """
        List one page of a folder.

        Args:
            folder: Key prefix, without trailing slash
            limit: Maximum entries to return
            offset: Entries to skip

        Returns:
            Listed entries; names are relative to the folder

        Raises:
            StorageListError: If the listing call fails
        """
        prefix = f"{folder.strip('/')}/" if folder.strip("/") else ""
        entries: List[StorageObjectEntry] = []

        try:
            paginator = self.s3_client.get_paginator("list_objects_v2")
            pages = paginator.paginate(
                Bucket=self.bucket,
                Prefix=prefix,
                Delimiter="/",
                PaginationConfig={"MaxItems": offset + limit, "PageSize": min(offset + limit, MAX_DELETE_KEYS)},
            )
            for page in pages:
                for obj in page.get("Contents", []):
                    key = obj["Key"]
                    name = key[len(prefix):]
                    entries.append(
                        StorageObjectEntry(
                            name=name or key,
                            created_at=obj.get("LastModified"),
                            metadata_present=bool(name) and not key.endswith("/"),
                            size=obj.get("Size"),
                        )
                    )
        except (ClientError, BotoCoreError) as e:
            logger.error("storage_list_failed", bucket=self.bucket, folder=folder, error=str(e))
            raise StorageListError(
                "Failed to list storage folder",
                original_exception=e,
                context={"bucket": self.bucket, "folder": folder, "offset": offset},
            )

        return entries[offset:offset + limit]

    def remove_objects(self, paths: List[str]) -> List[str]:
        """
        Delete objects by key.

        Args:
            paths: Object keys

        Returns:
            Keys reported as deleted

        Raises:
            StorageDeleteError: If the call fails or reports per-key errors
        """
        removed: List[str] = []

        for chunk in chunk_paths(paths, MAX_DELETE_KEYS):
            try:
                response = self.s3_client.delete_objects(
                    Bucket=self.bucket,
                    Delete={"Objects": [{"Key": key} for key in chunk], "Quiet": False},
                )
            except (ClientError, BotoCoreError) as e:
                logger.error("storage_remove_failed", bucket=self.bucket, count=len(chunk), error=str(e))
                raise StorageDeleteError(
                    "Failed to remove objects",
                    original_exception=e,
                    context={"bucket": self.bucket, "count": len(chunk)},
                )

            errors = response.get("Errors", [])
            if errors:
                logger.error("storage_remove_partial_failure", bucket=self.bucket, errors=len(errors))
                raise StorageDeleteError(
                    f"{len(errors)} object(s) could not be removed",
                    context={
                        "bucket": self.bucket,
                        "errors": [
                            {"key": err.get("Key"), "code": err.get("Code")} for err in errors[:5]
                        ],
                    },
                )

            removed.extend(item["Key"] for item in response.get("Deleted", []))

        return removed
