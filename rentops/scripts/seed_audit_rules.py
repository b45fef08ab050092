"""
Script to seed expense audit rules from the expense history.

Usage:
    python -m rentops.scripts.seed_audit_rules
    python -m rentops.scripts.seed_audit_rules --dry-run
"""
import sys

import click
from supabase import Client

from rentops.core.exceptions import ConfigurationError
from rentops.integrations.exceptions import (
    BackendConnectionError,
    RecordQueryError,
    RecordUpdateError,
)
from rentops.integrations.supabase_client import SupabaseConfig, create_supabase_client
from rentops.repositories.audit_rule_repository import AuditRuleRepository
from rentops.repositories.expense_repository import ExpenseRepository
from rentops.scripts._common import RULE, echo_credentials, fail, fail_configuration, start_run
from rentops.services.audit_rule_seed_service import AuditRuleSeedService


def build_seed_service(client: Client) -> AuditRuleSeedService:
    """Wire the seed service to the expenses and rules tables."""
    return AuditRuleSeedService(ExpenseRepository(client), AuditRuleRepository(client))


@click.command()
@click.option(
    "--dry-run",
    is_flag=True,
    help="Build rules without writing them"
)
@click.option(
    "--force",
    is_flag=True,
    help="Replace existing rules without confirmation"
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable verbose logging"
)
def cli(dry_run: bool, force: bool, verbose: bool):
    """Seed expense audit rules from recorded expenses."""
    settings = start_run("seed_audit_rules", "Audit Rule Seeding", verbose, dry_run)
    echo_credentials(settings)

    try:
        config = SupabaseConfig.from_settings(settings)
    except ConfigurationError as e:
        fail_configuration(e)

    if not force and not dry_run:
        click.confirm("  Replace all existing audit rules?", abort=True)

    try:
        client = create_supabase_client(config)
        service = build_seed_service(client)
        click.echo("Reading expense history...")
        rules = service.run(dry_run=dry_run)

    except BackendConnectionError as e:
        fail("Connection Error", str(e))

    except RecordQueryError as e:
        fail("Error reading expenses", str(e))

    except RecordUpdateError as e:
        fail(
            "Error writing audit rules",
            str(e),
            "Check that the expense_audit_rules migration has been applied.",
        )

    if not rules:
        click.echo("→ No recurring items found; existing rules left untouched")
    else:
        for rule in rules:
            click.echo(
                f"  {'→' if dry_run else '✓'} {rule.item_name}: avg {rule.avg_price:.2f}, "
                f"max {rule.max_allowed_price:.2f}, every {rule.expected_frequency_days} days"
            )

    click.echo(f"\nSummary:")
    click.echo(f"  Rules: {len(rules)}")
    click.echo(f"  Written: {0 if dry_run else len(rules)}")
    click.echo(RULE)
    click.echo("✓ Audit rules seeded successfully!" if not dry_run else "✓ Dry run completed")
    sys.exit(0)


if __name__ == "__main__":
    cli()
