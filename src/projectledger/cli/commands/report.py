"""Profitability report commands."""

import click

from projectledger.cli.error_handling import handle_domain_error, parse_date_or_exit
from projectledger.domain.entities import (
    ProjectFilters,
    ProjectProfitability,
    ProjectStatus,
    RankingField,
    TrendPeriod,
)
from projectledger.domain.errors import DomainError
from projectledger.domain.ledger import LedgerService
from projectledger.domain.profitability import ProfitabilityService


def _money(value) -> str:
    return f"{value:,.0f}"


def _build_filters(ctx, status, client_ref, start_date, end_date) -> ProjectFilters:
    """Build project filters from shared report options."""
    client_id = None
    if client_ref:
        try:
            client_id = LedgerService(ctx.obj["db"]).resolve_client(client_ref).id
        except DomainError as e:
            handle_domain_error(ctx, e)

    return ProjectFilters(
        status=ProjectStatus(status) if status else None,
        client_id=client_id,
        start_date=parse_date_or_exit(ctx, start_date, "start date"),
        end_date=parse_date_or_exit(ctx, end_date, "end date"),
    )


def filter_options(func):
    """Attach the project filter options shared by portfolio reports."""
    options = [
        click.option(
            "--status",
            type=click.Choice([s.value for s in ProjectStatus]),
            help="Only projects with this status",
        ),
        click.option("--client", "client_ref", help="Client name or ID"),
        click.option("--start-date", help="Projects starting on or after this date"),
        click.option("--end-date", help="Projects starting on or before this date"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _echo_profitability(p: ProjectProfitability) -> None:
    click.echo(f"\nProject {p.project_id}: {p.project_name}")
    click.echo("=" * 60)
    click.echo(f"  Client:               {p.client_name or '-'}")
    click.echo(f"  Status:               {p.status.value}")
    click.echo(f"  Period:               {p.start_date or '-'} ~ {p.end_date or '-'}")
    click.echo(f"  Budget:               {_money(p.budget) if p.budget is not None else '-'}")
    click.echo("-" * 60)
    click.echo(f"  Revenue:              {_money(p.total_revenue):>18} ({p.revenue_transactions} sales)")
    click.echo(f"  Expense:              {_money(p.total_expense):>18} ({p.expense_transactions} purchases)")
    click.echo(f"  VAT:                  {_money(p.total_vat):>18}")
    click.echo(f"  Net profit:           {_money(p.net_profit):>18}")
    click.echo(f"  Profit margin:        {p.profit_margin:>17.1f}%")
    click.echo(f"  ROI:                  {p.roi:>17.1f}%")
    click.echo(f"  Avg transaction:      {_money(p.avg_transaction_value):>18}")
    click.echo(f"  Completion:           {p.completion_rate:>17.1f}%")
    click.echo(f"  Budget utilization:   {p.budget_utilization:>17.1f}%")
    click.echo(f"  Last transaction:     {p.last_transaction_date or '-'}")


@click.command("profit")
@click.argument("project_id", type=int)
@click.pass_context
def project_profit(ctx, project_id: int):
    """Show profitability for one project."""
    service = ProfitabilityService(ctx.obj["db"])
    try:
        result = service.calculate(project_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if result is None:
        click.echo(f"Error: Project {project_id} not found", err=True)
        ctx.exit(1)
    _echo_profitability(result)


@click.command("portfolio")
@filter_options
@click.pass_context
def portfolio(ctx, status, client_ref, start_date, end_date):
    """Show totals and averages across projects."""
    filters = _build_filters(ctx, status, client_ref, start_date, end_date)
    service = ProfitabilityService(ctx.obj["db"])
    try:
        agg = service.aggregates(filters)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if agg.total_projects == 0:
        click.echo("No projects found.")
        return

    click.echo("\nPortfolio")
    click.echo("=" * 60)
    click.echo(f"  Projects:             {agg.total_projects}")
    click.echo(
        f"    planning {agg.planned_projects}, in progress {agg.in_progress_projects}, "
        f"completed {agg.completed_projects}, cancelled {agg.cancelled_projects}"
    )
    click.echo(
        f"    profitable {agg.profitable_projects}, unprofitable {agg.unprofitable_projects}"
    )
    click.echo(f"  Revenue:              {_money(agg.total_revenue):>18}")
    click.echo(f"  Expense:              {_money(agg.total_expense):>18}")
    click.echo(f"  Net profit:           {_money(agg.total_net_profit):>18}")
    click.echo(f"  Avg profit margin:    {agg.avg_profit_margin:>17.1f}%")
    click.echo(f"  Avg ROI:              {agg.avg_roi:>17.1f}%")
    if agg.best_project is not None:
        click.echo(
            f"  Best:                 {agg.best_project.project_name} "
            f"({agg.best_project.profit_margin:.1f}%)"
        )
    if agg.worst_project is not None:
        click.echo(
            f"  Worst:                {agg.worst_project.project_name} "
            f"({agg.worst_project.profit_margin:.1f}%)"
        )


@click.command("ranking")
@click.option("--limit", type=click.IntRange(0), default=10, show_default=True)
@click.option(
    "--sort-by",
    type=click.Choice([f.value for f in RankingField]),
    default=RankingField.MARGIN.value,
    show_default=True,
)
@filter_options
@click.pass_context
def ranking(ctx, limit, sort_by, status, client_ref, start_date, end_date):
    """Rank projects by profit, margin, ROI or revenue."""
    filters = _build_filters(ctx, status, client_ref, start_date, end_date)
    service = ProfitabilityService(ctx.obj["db"])
    try:
        results = service.ranking(limit=limit, sort_by=sort_by, filters=filters)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not results:
        click.echo("No projects found.")
        return

    click.echo("-" * 96)
    click.echo(
        f"{'#':<4} {'Project':<30} {'Revenue':>16} {'Net profit':>16} {'Margin':>9} {'ROI':>9}"
    )
    click.echo("-" * 96)
    for position, p in enumerate(results, start=1):
        click.echo(
            f"{position:<4} {p.project_name[:30]:<30} {_money(p.total_revenue):>16} "
            f"{_money(p.net_profit):>16} {p.profit_margin:>8.1f}% {p.roi:>8.1f}%"
        )


@click.command("trend")
@click.argument("project_id", type=int)
@click.option(
    "--period",
    type=click.Choice([p.value for p in TrendPeriod]),
    default=TrendPeriod.MONTH.value,
    show_default=True,
)
@click.pass_context
def trend(ctx, project_id: int, period: str):
    """Show a project's profit over time."""
    service = ProfitabilityService(ctx.obj["db"])
    try:
        points = service.trend(project_id, TrendPeriod(period))
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not points:
        click.echo("No transactions found.")
        return

    click.echo("-" * 84)
    click.echo(
        f"{'Period':<12} {'Revenue':>16} {'Expense':>16} {'Profit':>16} {'Cumulative':>18}"
    )
    click.echo("-" * 84)
    for point in points:
        click.echo(
            f"{point.period:<12} {_money(point.revenue):>16} {_money(point.expense):>16} "
            f"{_money(point.profit):>16} {_money(point.cumulative_profit):>18}"
        )


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(project_profit)
    cli.add_command(portfolio)
    cli.add_command(ranking)
    cli.add_command(trend)
