"""
Helpers shared by the maintenance commands.
"""
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, NoReturn

import click

from rentops.core.config import Settings, get_settings
from rentops.core.exceptions import ConfigurationError
from rentops.core.logging import bind_run_context, configure_logging

RULE = "=" * 70


def start_run(script: str, title: str, verbose: bool, dry_run: bool = False) -> Settings:
    """
    Print the banner, load settings, configure logging and bind the run context.

    Exits with status 1 when the settings cannot be loaded.
    """
    click.echo(RULE)
    click.echo(f"Rental Ops - {title}")
    click.echo(RULE)
    click.echo()

    try:
        settings = get_settings()
    except ConfigurationError as e:
        fail_configuration(e)

    configure_logging(
        log_level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
    )
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    bind_run_context(script, dry_run=dry_run)

    if dry_run:
        click.echo("[DRY RUN MODE - Nothing will be deleted or updated]")
        click.echo()
    return settings


def echo_credentials(settings: Settings) -> None:
    """Show which Supabase credentials were found, without their values."""
    missing = settings.missing_supabase_credentials()
    click.echo("Credentials:")
    for name in ("SUPABASE_URL", "SUPABASE_SERVICE_ROLE"):
        status = "missing" if name in missing else "loaded"
        symbol = "✗" if name in missing else "✓"
        click.echo(f"  {symbol} {name}: {status}")
    click.echo()


def fail(title: str, detail: str, *hints: str) -> NoReturn:
    """Print an error block and exit with status 1."""
    click.echo()
    click.echo(RULE, err=True)
    click.echo(f"✗ {title}", err=True)
    click.echo(RULE, err=True)
    click.echo(detail, err=True)
    if hints:
        click.echo()
        for hint in hints:
            click.echo(hint, err=True)
    click.echo()
    sys.exit(1)


def fail_configuration(error: ConfigurationError) -> NoReturn:
    """Exit on missing or invalid configuration."""
    fail(
        "Configuration Error",
        str(error.message),
        "Please ensure these variables are set and valid in the environment or .env file:",
        *[f"  - {name}" for name in error.missing],
    )


def write_report(path: str, payload: Dict[str, Any]) -> None:
    """Save a JSON report."""
    report_path = Path(path)
    with open(report_path, "w") as f:
        json.dump(payload, f, indent=2, default=str)
    click.echo(f"✓ Report saved to: {report_path}")
    click.echo()
