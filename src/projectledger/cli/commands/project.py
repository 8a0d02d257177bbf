"""Project management commands."""

import click

from projectledger.cli.error_handling import (
    handle_domain_error,
    parse_amount_or_exit,
    parse_date_or_exit,
)
from projectledger.domain.entities import ProjectStatus
from projectledger.domain.errors import DomainError
from projectledger.domain.ledger import LedgerService

STATUS_CHOICES = click.Choice([s.value for s in ProjectStatus])


@click.group("project")
def project_group():
    """Manage projects."""
    pass


@project_group.command("create")
@click.argument("name", metavar="PROJECT_NAME")
@click.option("--client", "client_ref", required=True, help="Client name or ID")
@click.option("--status", type=STATUS_CHOICES, default="planning", show_default=True)
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'today')")
@click.option("--end-date", help="End date (YYYY-MM-DD); omit for open-ended projects")
@click.option("--budget", help="Budget amount (e.g., 10,000,000)")
@click.pass_context
def create_project(
    ctx,
    name: str,
    client_ref: str,
    status: str,
    start_date: str | None,
    end_date: str | None,
    budget: str | None,
):
    """Create a project for a client.

    Examples:
        projectledger project create "ERP rollout" --client "(주)테크솔루션" \\
            --status in_progress --start-date 2024-03-01 --budget 10,000,000
    """
    service = LedgerService(ctx.obj["db"])
    start = parse_date_or_exit(ctx, start_date, "start date")
    end = parse_date_or_exit(ctx, end_date, "end date")
    budget_amount = parse_amount_or_exit(ctx, budget, "budget")

    try:
        client = service.resolve_client(client_ref)
        project_id = service.create_project(
            name=name,
            client_id=client.id,
            status=ProjectStatus(status),
            start_date=start,
            end_date=end,
            budget=budget_amount,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created project '{name.strip()}' (ID: {project_id}) for client '{client.name}'")


@project_group.command("list")
@click.option("--client", "client_ref", help="Client name or ID")
@click.option("--status", type=STATUS_CHOICES, help="Only projects with this status")
@click.pass_context
def list_projects(ctx, client_ref: str | None, status: str | None):
    """List projects."""
    service = LedgerService(ctx.obj["db"])

    client_id = None
    if client_ref:
        try:
            client_id = service.resolve_client(client_ref).id
        except DomainError as e:
            handle_domain_error(ctx, e)

    projects = service.list_projects(
        client_id=client_id, status=ProjectStatus(status) if status else None
    )
    if not projects:
        click.echo("No projects found.")
        return

    click.echo("\nProjects:")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<6} {'Name':<28} {'Client':<8} {'Status':<12} {'Start':<12} {'End':<12} {'Budget':>16}"
    )
    click.echo("-" * 100)
    for p in projects:
        budget = f"{p.budget:,.0f}" if p.budget is not None else "-"
        click.echo(
            f"{p.id:<6} {p.name[:28]:<28} {p.client_id:<8} {p.status.value:<12} "
            f"{str(p.start_date or '-'):<12} {str(p.end_date or '-'):<12} {budget:>16}"
        )


def register_commands(cli):
    """Register project commands with main CLI."""
    cli.add_command(project_group)
