"""
Storage Cleanup Script

Delete the proof files of payments older than a cutoff date and clear their
proof_url references.

Usage:
    python -m rentops.scripts.cleanup_storage
    python -m rentops.scripts.cleanup_storage --cutoff 2025-11-01
    python -m rentops.scripts.cleanup_storage --dry-run --report cleanup.json
    python -m rentops.scripts.cleanup_storage --force --batch-size 25
"""

import sys
from datetime import date
from typing import Optional

import click
from supabase import Client

from rentops.core.exceptions import ConfigurationError
from rentops.core.logging import get_logger
from rentops.integrations.exceptions import BackendConnectionError, RecordQueryError
from rentops.integrations.supabase_client import (
    SupabaseConfig,
    SupabaseStorageClient,
    create_supabase_client,
)
from rentops.repositories.payment_repository import PaymentRepository
from rentops.schemas.reports import CleanupReport
from rentops.scripts._common import (
    RULE,
    echo_credentials,
    fail,
    fail_configuration,
    start_run,
    write_report,
)
from rentops.services.proof_cleanup_service import ProofCleanupService

logger = get_logger(__name__)


def build_cleanup_service(client: Client, bucket: str, table: str, batch_size: int) -> ProofCleanupService:
    """Wire the cleanup service to the payments table and proofs bucket."""
    return ProofCleanupService(
        payments=PaymentRepository(client, table=table),
        store=SupabaseStorageClient(client, bucket),
        batch_size=batch_size,
    )


def _echo_report(report: CleanupReport) -> None:
    click.echo(f"  Payments selected: {report.records_selected}")
    click.echo(f"  Paths extracted: {len(report.paths)}")

    if report.dry_run:
        for path in report.paths:
            click.echo(f"    - {path}")
        click.echo(f"  Would delete {len(report.paths)} files")
        return

    for batch in report.batches:
        if batch.succeeded:
            click.echo(f"  ✓ Batch {batch.index} (offset {batch.offset}): {batch.removed} removed")
        else:
            click.echo(f"  ✗ Batch {batch.index} (offset {batch.offset}): {batch.error}", err=True)

    if report.failed_batch_ids:
        click.echo(
            f"  ⚠ {len(report.failed_batch_ids)} references cleared although their batch failed",
            err=True,
        )

    if report.update_error:
        click.echo(f"  ✗ Failed to update payments: {report.update_error}", err=True)
    elif report.cleared_ids:
        click.echo(f"  ✓ Cleared {len(report.cleared_ids)} proof references")


@click.command()
@click.option(
    "--cutoff",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Payments dated before this day are cleaned (default: CLEANUP_CUTOFF_DATE)",
)
@click.option("--bucket", help="Proofs bucket (default: PROOFS_BUCKET)")
@click.option("--table", help="Payments table (default: PAYMENTS_TABLE)")
@click.option(
    "--batch-size",
    type=click.IntRange(min=1),
    help="Paths per remove call (default: CLEANUP_BATCH_SIZE)",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Preview deletions without executing",
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
    cutoff,
    bucket: Optional[str],
    table: Optional[str],
    batch_size: Optional[int],
    dry_run: bool,
    force: bool,
    report: Optional[str],
    verbose: bool,
) -> None:
    """
    Delete proof files of old payments and clear their references.
    """
    settings = start_run("cleanup_storage", "Proof Storage Cleanup", verbose, dry_run)
    echo_credentials(settings)

    try:
        config = SupabaseConfig.from_settings(settings)
    except ConfigurationError as e:
        fail_configuration(e)

    cutoff_date: date = cutoff.date() if cutoff else settings.cleanup_cutoff_date
    bucket = bucket or settings.proofs_bucket
    table = table or settings.payments_table
    batch_size = batch_size or settings.cleanup_batch_size

    click.echo(f"  Bucket: {bucket}")
    click.echo(f"  Table: {table}")
    click.echo(f"  Cutoff: payments before {cutoff_date.isoformat()}")
    click.echo(f"  Batch size: {batch_size}")
    click.echo()

    if not force and not dry_run:
        click.confirm(
            f"  Delete proof files of payments before {cutoff_date.isoformat()}?",
            abort=True,
        )

    try:
        client = create_supabase_client(config)
        service = build_cleanup_service(client, bucket, table, batch_size)

        click.echo("Cleaning up proof files...")
        result = service.run(cutoff_date, dry_run=dry_run)

    except BackendConnectionError as e:
        fail("Connection Error", str(e), "Verify SUPABASE_URL and network connectivity.")

    except RecordQueryError as e:
        fail("Query Error", str(e))

    except Exception as e:
        logger.exception("cleanup_unexpected_error")
        fail("Unexpected Error", str(e))

    if result.records_selected == 0:
        click.echo("  ✓ No old payments with proof files")
    elif not result.paths:
        click.echo("  ⚠ No valid file paths could be extracted", err=True)
    else:
        _echo_report(result)
    click.echo()

    if report:
        payload = result.model_dump(mode="json")
        payload["removed_total"] = result.removed_total
        write_report(report, payload)

    click.echo(RULE)
    if result.has_errors:
        click.echo("✗ Cleanup finished with errors", err=True)
        click.echo(RULE)
        sys.exit(1)

    click.echo("✓ Cleanup completed successfully")
    click.echo(RULE)
    sys.exit(0)


if __name__ == "__main__":
    cli()
