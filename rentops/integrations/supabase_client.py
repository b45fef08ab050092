"""
Supabase Client

Builds the service-role Supabase client used by every script and wraps the
storage API of one bucket behind the ObjectStore protocol.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import structlog
from supabase import Client, ClientOptions, create_client

from rentops.core.config import Settings, get_settings
from rentops.core.exceptions import ConfigurationError
from rentops.integrations.exceptions import (
    BackendConnectionError,
    StorageDeleteError,
    StorageListError,
)
from rentops.schemas.storage import StorageObjectEntry

logger = structlog.get_logger(__name__)


@dataclass
class SupabaseConfig:
    """Credentials for the Supabase project."""

    url: str
    service_role_key: str

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SupabaseConfig":
        """
        Load credentials from settings.

        Raises:
            ConfigurationError: If SUPABASE_URL or SUPABASE_SERVICE_ROLE is missing
        """
        settings = settings or get_settings()
        missing = settings.missing_supabase_credentials()
        if missing:
            raise ConfigurationError(missing)
        return cls(url=settings.supabase_url, service_role_key=settings.supabase_service_role)


def create_supabase_client(config: SupabaseConfig) -> Client:
    """
    Create a Supabase client authenticated with the service-role key.

    Sessions are neither persisted nor refreshed; every script run is short-lived.

    Raises:
        BackendConnectionError: If the client cannot be created
    """
    try:
        client = create_client(
            config.url,
            config.service_role_key,
            options=ClientOptions(auto_refresh_token=False, persist_session=False),
        )
    except Exception as e:
        logger.error("failed_to_initialize_supabase_client", error=str(e))
        raise BackendConnectionError(
            "Failed to initialize Supabase client",
            original_exception=e,
            context={"url": config.url},
        )

    logger.info("supabase_client_initialized", url=config.url)
    return client


class SupabaseStorageClient:
    """ObjectStore implementation backed by Supabase Storage."""

    def __init__(self, client: Client, bucket: str):
        """
        Initialize storage client for one bucket.

        Args:
            client: Service-role Supabase client
            bucket: Bucket name
        """
        self.client = client
        self.bucket = bucket

    def _bucket(self):
        return self.client.storage.from_(self.bucket)

    def list_folder(self, folder: str, limit: int, offset: int = 0) -> List[StorageObjectEntry]:
        """
        List one page of a folder sorted by creation time, oldest first.

        Args:
            folder: Folder path inside the bucket
            limit: Maximum entries to return
            offset: Entries to skip

        Returns:
            Listed entries

        Raises:
            StorageListError: If the listing call fails
        """
        options: Dict[str, Any] = {
            "limit": limit,
            "offset": offset,
            "sortBy": {"column": "created_at", "order": "asc"},
        }
        try:
            items = self._bucket().list(folder, options)
        except Exception as e:
            logger.error("storage_list_failed", bucket=self.bucket, folder=folder, error=str(e))
            raise StorageListError(
                "Failed to list storage folder",
                original_exception=e,
                context={"bucket": self.bucket, "folder": folder, "offset": offset},
            )

        return [StorageObjectEntry.from_supabase(item) for item in items or []]

    def remove_objects(self, paths: List[str]) -> List[str]:
        """
        Delete objects from the bucket.

        Args:
            paths: Bucket-relative paths

        Returns:
            Names reported as removed by the storage API

        Raises:
            StorageDeleteError: If the remove call fails
        """
        try:
            removed = self._bucket().remove(paths)
        except Exception as e:
            logger.error("storage_remove_failed", bucket=self.bucket, count=len(paths), error=str(e))
            raise StorageDeleteError(
                "Failed to remove objects",
                original_exception=e,
                context={"bucket": self.bucket, "count": len(paths)},
            )

        names = []
        for item in removed or []:
            if isinstance(item, dict):
                names.append(item.get("name", ""))
            else:
                names.append(str(item))
        return names
