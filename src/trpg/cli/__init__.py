"""Main CLI application module."""

import typer

from src.trpg.core.services.database.db_manage import DbManageService
from src.trpg.runtime.log_setup import configure_logging

from .user_commands import users_app
from .utils import console

app = typer.Typer(
    help="TRPG account administration",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(users_app, name="users")


@app.callback()
def _setup(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Configure application logging"),
) -> None:
    if verbose:
        configure_logging()


@app.command("init-db")
def init_db() -> None:
    """Create the account tables."""
    DbManageService().create_all()
    console.print("[green]✅ Database initialized[/green]")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
