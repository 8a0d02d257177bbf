"""Client management commands."""

import click

from projectledger.cli.error_handling import handle_domain_error
from projectledger.domain.errors import DomainError
from projectledger.domain.ledger import LedgerService


@click.group("client")
def client_group():
    """Manage clients."""
    pass


@client_group.command("create")
@click.argument("name", metavar="CLIENT_NAME")
@click.option("--business-number", help="Business registration number (e.g., 123-45-67890)")
@click.option("--email", help="Contact email")
@click.option("--phone", help="Contact phone")
@click.option("--address", help="Postal address")
@click.pass_context
def create_client(
    ctx,
    name: str,
    business_number: str | None,
    email: str | None,
    phone: str | None,
    address: str | None,
):
    """Create a new client.

    Examples:
        projectledger client create "(주)테크솔루션" --business-number 123-45-67890
        projectledger client create "Acme Corp" --email billing@acme.example
    """
    service = LedgerService(ctx.obj["db"])
    try:
        client_id = service.create_client(
            name=name,
            business_number=business_number,
            contact_email=email,
            contact_phone=phone,
            address=address,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created client '{name.strip()}' (ID: {client_id})")


@client_group.command("list")
@click.pass_context
def list_clients(ctx):
    """List all clients."""
    service = LedgerService(ctx.obj["db"])

    clients = service.list_clients()
    if not clients:
        click.echo("No clients found.")
        return

    click.echo("\nClients:")
    click.echo("-" * 70)
    for c in clients:
        number = c.business_number or "-"
        click.echo(f"ID: {c.id:3d} | {c.name:30s} | Business no.: {number}")


def register_commands(cli):
    """Register client commands with main CLI."""
    cli.add_command(client_group)
