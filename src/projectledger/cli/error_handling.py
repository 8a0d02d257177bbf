"""CLI error handling helpers."""

from datetime import date
from decimal import Decimal
from typing import Optional

import click

from projectledger.domain.errors import DomainError
from projectledger.utils.amount_parser import parse_amount
from projectledger.utils.date_parser import parse_date


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def parse_date_or_exit(ctx: click.Context, value: Optional[str], label: str) -> Optional[date]:
    """Parse a date option, exiting with an error message if it is invalid."""
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def parse_amount_or_exit(ctx: click.Context, value: Optional[str], label: str) -> Optional[Decimal]:
    """Parse an amount option, exiting with an error message if it is invalid."""
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)
