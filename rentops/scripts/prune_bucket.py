"""
Bucket Prune Script

Delete every file in one bucket folder created before a cutoff, listing the
folder oldest first until no old file is left.

Usage:
    python -m rentops.scripts.prune_bucket
    python -m rentops.scripts.prune_bucket --folder proofs --cutoff 2025-11-01
    python -m rentops.scripts.prune_bucket --backend r2 --folder general
    python -m rentops.scripts.prune_bucket --dry-run --verbose
"""

import sys
from datetime import timezone
from typing import Optional

import click

from rentops.core.config import Settings
from rentops.core.exceptions import ConfigurationError
from rentops.core.logging import get_logger
from rentops.integrations.base import ObjectStore
from rentops.integrations.exceptions import BackendConnectionError
from rentops.integrations.object_storage_client import ObjectStorageClient, R2Config
from rentops.integrations.storage_utils import format_storage_size
from rentops.integrations.supabase_client import (
    SupabaseConfig,
    SupabaseStorageClient,
    create_supabase_client,
)
from rentops.schemas.enums import PruneOutcome
from rentops.scripts._common import (
    RULE,
    echo_credentials,
    fail,
    fail_configuration,
    start_run,
    write_report,
)
from rentops.services.bucket_prune_service import BucketPruneService

logger = get_logger(__name__)

BACKENDS = ["supabase", "r2"]


def build_prune_store(backend: str, settings: Settings, bucket: Optional[str]) -> ObjectStore:
    """
    Build the object store for the chosen backend.

    Raises:
        ConfigurationError: If the backend's credentials are missing
        BackendConnectionError: If the client cannot be created
    """
    if backend == "r2":
        config = R2Config.from_settings(settings)
        if bucket:
            config.bucket = bucket
        return ObjectStorageClient(config)

    client = create_supabase_client(SupabaseConfig.from_settings(settings))
    return SupabaseStorageClient(client, bucket or settings.proofs_bucket)


@click.command()
@click.option(
    "--backend",
    type=click.Choice(BACKENDS),
    default="supabase",
    show_default=True,
    help="Storage backend holding the folder",
)
@click.option("--bucket", help="Bucket name (default: PROOFS_BUCKET or R2_BUCKET_NAME)")
@click.option("--folder", help="Folder to prune (default: PROOFS_FOLDER)")
@click.option(
    "--cutoff",
    type=click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S"]),
    help="Files created before this UTC instant are deleted (default: PRUNE_CUTOFF)",
)
@click.option(
    "--page-size",
    type=click.IntRange(min=1, max=1000),
    help="Entries per listing page (default: PRUNE_PAGE_SIZE)",
)
@click.option(
    "--max-pages",
    type=click.IntRange(min=1),
    help="Stop after this many listing pages",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="List the first page and preview deletions",
)
@click.option(
    "--force",
    is_flag=True,
    help="Skip confirmation prompts",
)
@click.option(
    "--report",
    type=click.Path(),
    help="Save detailed JSON report to file",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable verbose logging",
)
def cli(
    backend: str,
    bucket: Optional[str],
    folder: Optional[str],
    cutoff,
    page_size: Optional[int],
    max_pages: Optional[int],
    dry_run: bool,
    force: bool,
    report: Optional[str],
    verbose: bool,
) -> None:
    """
    Prune old files from a bucket folder.
    """
    settings = start_run("prune_bucket", "Bucket Prune", verbose, dry_run)
    if backend == "supabase":
        echo_credentials(settings)

    folder = folder if folder is not None else settings.proofs_folder
    cutoff_at = cutoff.replace(tzinfo=timezone.utc) if cutoff else settings.prune_cutoff
    page_size = page_size or settings.prune_page_size

    try:
        store = build_prune_store(backend, settings, bucket)
    except ConfigurationError as e:
        fail_configuration(e)
    except BackendConnectionError as e:
        fail("Connection Error", str(e), "Verify the storage endpoint and network connectivity.")

    click.echo(f"  Backend: {backend}")
    click.echo(f"  Bucket: {store.bucket}")
    click.echo(f"  Folder: {folder}/")
    click.echo(f"  Cutoff: created before {cutoff_at.isoformat()}")
    click.echo(f"  Page size: {page_size}")
    click.echo()

    if not force and not dry_run:
        click.confirm(
            f"  Delete files in '{store.bucket}/{folder}/' created before {cutoff_at.isoformat()}?",
            abort=True,
        )

    service = BucketPruneService(store, folder, page_size=page_size, max_pages=max_pages)

    try:
        click.echo("Pruning folder...")
        result = service.run(cutoff_at, dry_run=dry_run)
    except Exception as e:
        logger.exception("prune_unexpected_error")
        fail("Unexpected Error", str(e))

    click.echo(f"  Pages listed: {result.pages_listed}")
    if dry_run:
        for path in result.preview_paths:
            click.echo(f"    - {path}")
        click.echo(f"  Would delete {len(result.preview_paths)} files from the first page")
    else:
        click.echo(f"  Files deleted: {result.total_deleted}")
        if result.bytes_freed:
            click.echo(f"  Space freed: {format_storage_size(result.bytes_freed)}")

    if result.outcome == PruneOutcome.EMPTY:
        click.echo("  ✓ Folder is empty")
    elif result.outcome == PruneOutcome.DONE and not dry_run:
        click.echo("  ✓ No old files left in the current page")
    elif result.outcome == PruneOutcome.ABORTED:
        click.echo(f"  ✗ Aborted: {result.abort_reason}", err=True)
    click.echo()

    if report:
        write_report(report, result.model_dump(mode="json"))

    click.echo(RULE)
    if result.has_errors:
        click.echo("✗ Prune aborted", err=True)
        click.echo(RULE)
        sys.exit(1)

    click.echo(f"✓ Prune completed. Total files deleted: {result.total_deleted}")
    click.echo(RULE)
    sys.exit(0)


if __name__ == "__main__":
    cli()
