"""
Object Storage Utility Functions

Helper functions for proof path normalization, batching, folder paths
and report formatting.
"""

from typing import Iterator, List, Sequence
from urllib.parse import unquote

import structlog

logger = structlog.get_logger(__name__)


def normalize_proof_path(reference: str, bucket: str) -> str:
    """
    Convert a stored proof reference into a bucket-relative path.

    The reference is either already relative ("2024/receipt.jpg") or a public
    URL that embeds the bucket ("https://host/.../public/proofs/2024/receipt.jpg").
    Everything after the first "<bucket>/" segment is kept. References without
    that segment pass through unchanged.

    Args:
        reference: Value stored in the reference column
        bucket: Bucket name

    Returns:
        Percent-decoded relative path
    """
    marker = f"{bucket}/"
    candidate = reference
    if marker in reference:
        candidate = reference.split(marker, 1)[1]
    else:
        logger.debug("proof_reference_not_bucket_prefixed", reference=reference, bucket=bucket)

    return unquote(candidate)


def chunk_paths(paths: Sequence[str], batch_size: int) -> Iterator[List[str]]:
    """
    Yield contiguous chunks of at most batch_size paths.

    Args:
        paths: Ordered paths
        batch_size: Maximum chunk length

    Yields:
        Lists of paths, in input order

    Raises:
        ValueError: If batch_size is not positive
    """
    if batch_size <= 0:
        raise ValueError("batch_size must be positive")

    for start in range(0, len(paths), batch_size):
        yield list(paths[start:start + batch_size])


def join_folder_path(folder: str, name: str) -> str:
    """Build "<folder>/<name>", tolerating empty or slash-terminated folders."""
    folder = folder.strip("/")
    if not folder:
        return name
    return f"{folder}/{name}"


def format_storage_size(size_bytes: int) -> str:
    """
    Format byte size to human-readable string.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string (e.g., "1.50 GB", "256.00 MB")
    """
    units = ["B", "KB", "MB", "GB", "TB", "PB"]
    size = float(size_bytes)
    unit_index = 0

    while size >= 1024.0 and unit_index < len(units) - 1:
        size /= 1024.0
        unit_index += 1

    return f"{size:.2f} {units[unit_index]}"
