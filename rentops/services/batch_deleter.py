"""
Sequential batch deletion against an object store.
"""
from typing import List, Sequence

from rentops.core.logging import get_logger
from rentops.integrations.base import ObjectStore
from rentops.integrations.exceptions import StorageDeleteError
from rentops.integrations.storage_utils import chunk_paths
from rentops.schemas.enums import BatchFailurePolicy
from rentops.schemas.reports import BatchDeleteResult

logger = get_logger(__name__)


class BatchDeleter:
    """
    Delete paths in contiguous batches, one remove call per batch.

    With BatchFailurePolicy.CONTINUE a failed batch is recorded and the next
    one still runs. With BatchFailurePolicy.ABORT the first StorageDeleteError
    propagates to the caller.
    """

    def __init__(
        self,
        store: ObjectStore,
        batch_size: int,
        policy: BatchFailurePolicy = BatchFailurePolicy.CONTINUE,
    ):
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.store = store
        self.batch_size = batch_size
        self.policy = policy

    def delete(self, paths: Sequence[str]) -> List[BatchDeleteResult]:
        """
        Remove every path, batch by batch.

        Args:
            paths: Ordered bucket-relative paths

        Returns:
            One result per batch, in order

        Raises:
            StorageDeleteError: On the first failed batch when policy is ABORT
        """
        results: List[BatchDeleteResult] = []

        for index, batch in enumerate(chunk_paths(paths, self.batch_size)):
            offset = index * self.batch_size
            try:
                removed = self.store.remove_objects(batch)
            except StorageDeleteError as e:
                logger.error(
                    "batch_delete_failed",
                    bucket=self.store.bucket,
                    batch=index,
                    offset=offset,
                    size=len(batch),
                    error=e.message,
                )
                if self.policy == BatchFailurePolicy.ABORT:
                    raise
                results.append(
                    BatchDeleteResult(index=index, offset=offset, paths=batch, error=e.message)
                )
                continue

            logger.info(
                "batch_deleted",
                bucket=self.store.bucket,
                batch=index,
                offset=offset,
                size=len(batch),
                removed=len(removed),
            )
            results.append(
                BatchDeleteResult(
                    index=index,
                    offset=offset,
                    paths=batch,
                    removed=len(removed),
                    removed_paths=list(removed),
                )
            )

        return results
