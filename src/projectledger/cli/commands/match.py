"""Matching and link confirmation commands."""

import click

from projectledger.cli.error_handling import handle_domain_error
from projectledger.domain.errors import DomainError
from projectledger.domain.linking import LinkService
from projectledger.domain.matching import MatchingService


@click.command("match")
@click.option("--limit", type=click.IntRange(min=0), help="Match at most this many unlinked transactions")
@click.option(
    "--min-confidence",
    type=click.FloatRange(0.0),
    default=0.0,
    show_default=True,
    help="Hide suggestions below this combined confidence",
)
@click.pass_context
def match_transactions(ctx, limit: int | None, min_confidence: float):
    """Suggest clients and projects for unlinked transactions.

    Nothing is written. Review the suggestions, then confirm each one with
    `projectledger link`.
    """
    service = MatchingService(ctx.obj["db"])
    try:
        results = service.match_unlinked(limit=limit)
    except DomainError as e:
        handle_domain_error(ctx, e)

    shown = [r for r in results if r.confidence >= min_confidence]
    if not shown:
        click.echo("No suggestions found.")
        return

    click.echo(f"\n{len(shown)} suggestion(s):")
    click.echo("-" * 110)
    click.echo(
        f"{'Txn':<6} {'Supplier':<24} {'Client':<24} {'Project':<24} {'Conf':>6} {'Type':<12}"
    )
    click.echo("-" * 110)
    for r in shown:
        client_name = r.suggested_client.name if r.suggested_client else "-"
        project_name = r.suggested_project.name if r.suggested_project else "-"
        click.echo(
            f"{r.transaction.id:<6} {r.transaction.supplier_name[:24]:<24} "
            f"{client_name[:24]:<24} {project_name[:24]:<24} "
            f"{r.confidence:>6.2f} {r.match_type.value:<12}"
        )
        click.echo(f"       {r.reason}")


@click.command("link")
@click.argument("transaction_id", type=int)
@click.argument("project_id", type=int)
@click.option("--client", "client_id", type=int, help="Client ID (defaults to the project's client)")
@click.pass_context
def link_transaction(ctx, transaction_id: int, project_id: int, client_id: int | None):
    """Confirm a match by linking a transaction to a project."""
    service = LinkService(ctx.obj["db"])
    try:
        service.link(transaction_id, project_id, client_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Linked transaction {transaction_id} to project {project_id}")


@click.command("unlink")
@click.argument("transaction_id", type=int)
@click.pass_context
def unlink_transaction(ctx, transaction_id: int):
    """Remove a transaction's project and client links."""
    service = LinkService(ctx.obj["db"])
    try:
        service.unlink(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Unlinked transaction {transaction_id}")


def register_commands(cli):
    """Register matching commands with main CLI."""
    cli.add_command(match_transactions)
    cli.add_command(link_transaction)
    cli.add_command(unlink_transaction)
