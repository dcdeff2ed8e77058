"""Shared utilities for CLI commands."""

from collections.abc import Iterator
from contextlib import contextmanager

import typer
from rich.console import Console
from sqlmodel import Session

from src.trpg.core.exceptions import TrpgError
from src.trpg.core.services.database.db_session import DbSessionService

console = Console()


@contextmanager
def open_session() -> Iterator[Session]:
    """Yield a session on the configured database, closing it afterwards."""
    session = DbSessionService().get_session()
    try:
        yield session
    finally:
        session.close()


def fail(error: TrpgError) -> typer.Exit:
    """Print ``error`` and return the exit to raise."""
    console.print(f"[red]❌ {error.message}[/red]")
    return typer.Exit(code=1)
