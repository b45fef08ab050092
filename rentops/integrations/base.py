"""
Object store protocol shared by the Supabase and S3-compatible clients.
"""
from typing import List, Protocol

from rentops.schemas.storage import StorageObjectEntry


class ObjectStore(Protocol):
    """Operations the cleanup and prune services need from a bucket."""

    bucket: str

    def list_folder(self, folder: str, limit: int, offset: int = 0) -> List[StorageObjectEntry]:
        """List one page of a folder, oldest first."""
        ...

    def remove_objects(self, paths: List[str]) -> List[str]:
        """Delete the given paths and return the ones reported as removed."""
        ...
