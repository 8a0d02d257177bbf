"""Main CLI entry point."""

import logging

import click

from projectledger.database.factories import create_sqlite_database

# Import and register all commands at module level
from projectledger.cli.commands import client, project, transaction, match, report


def setup_logging(verbose: bool) -> None:
    """Configure root logging for CLI runs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(asctime)s] %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides PROJECTLEDGER_DB_PATH environment variable)",
    envvar="PROJECTLEDGER_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Log matching decisions to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Projectledger - Transaction reconciliation and project profitability.

    Suggests which client and project each sale or purchase belongs to, and
    reports profit, margin and ROI per project and across the portfolio.
    """
    ctx.ensure_object(dict)
    setup_logging(verbose)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
client.register_commands(cli)
project.register_commands(cli)
transaction.register_commands(cli)
match.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
