"""Transaction entry and listing commands."""

from decimal import Decimal

import click

from projectledger.cli.error_handling import (
    handle_domain_error,
    parse_amount_or_exit,
    parse_date_or_exit,
)
from projectledger.domain.entities import TransactionType
from projectledger.domain.errors import DomainError
from projectledger.domain.ledger import LedgerService


@click.group("transaction")
def transaction_group():
    """Record and list sales and purchases."""
    pass


@transaction_group.command("add")
@click.option(
    "--date",
    "txn_date",
    required=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option(
    "--type",
    "txn_type",
    type=click.Choice([t.value for t in TransactionType]),
    required=True,
    help="sale (revenue) or purchase (expense)",
)
@click.option("--supplier", required=True, help="Counterparty name as it appears on the invoice")
@click.option("--supply-amount", required=True, help="Amount before VAT (e.g., 1,000,000)")
@click.option("--vat-amount", default="0", show_default=True, help="VAT amount")
@click.option("--total-amount", help="Total amount (defaults to supply + VAT)")
@click.option("--business-number", help="Counterparty business registration number")
@click.option("--description", help="Free-text description")
@click.pass_context
def add_transaction(
    ctx,
    txn_date: str,
    txn_type: str,
    supplier: str,
    supply_amount: str,
    vat_amount: str,
    total_amount: str | None,
    business_number: str | None,
    description: str | None,
):
    """Add a transaction manually.

    Examples:
        projectledger transaction add --date 2024-03-15 --type sale \\
            --supplier "테크솔루션" --supply-amount 1,000,000 --vat-amount 100,000
    """
    service = LedgerService(ctx.obj["db"])

    parsed_date = parse_date_or_exit(ctx, txn_date, "date")
    supply = parse_amount_or_exit(ctx, supply_amount, "supply amount")
    vat = parse_amount_or_exit(ctx, vat_amount, "VAT amount") or Decimal("0")
    total = parse_amount_or_exit(ctx, total_amount, "total amount")

    try:
        transaction_id = service.add_transaction(
            transaction_date=parsed_date,
            transaction_type=TransactionType(txn_type),
            supplier_name=supplier,
            supply_amount=supply,
            vat_amount=vat,
            total_amount=total,
            supplier_business_number=business_number,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    txn = service.get_transaction(transaction_id)
    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"  Date: {txn.transaction_date}")
    click.echo(f"  Type: {txn.transaction_type.value}")
    click.echo(f"  Supplier: {txn.supplier_name}")
    click.echo(f"  Total: {txn.total_amount:,.0f}")


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD)")
@click.option("--end-date", help="End date (YYYY-MM-DD)")
@click.option("--unlinked", is_flag=True, help="Only transactions without a project")
@click.option("--project", "project_id", type=int, help="Only transactions linked to this project")
@click.pass_context
def list_transactions(
    ctx, start_date: str | None, end_date: str | None, unlinked: bool, project_id: int | None
):
    """List transactions with optional filters."""
    service = LedgerService(ctx.obj["db"])
    start = parse_date_or_exit(ctx, start_date, "start date")
    end = parse_date_or_exit(ctx, end_date, "end date")

    transactions = service.list_transactions(
        start_date=start, end_date=end, unlinked=unlinked, project_id=project_id
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Type':<9} {'Supplier':<30} {'Total':>16} {'Project':>8} {'Client':>8}"
    )
    click.echo("-" * 100)
    for txn in transactions:
        click.echo(
            f"{txn.id:<6} {str(txn.transaction_date):<12} {txn.transaction_type.value:<9} "
            f"{txn.supplier_name[:30]:<30} {txn.total_amount:>16,.0f} "
            f"{str(txn.project_id or '-'):>8} {str(txn.client_id or '-'):>8}"
        )


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group)
