"""Account management CLI commands."""

import typer
from rich.table import Table

from src.trpg.core.exceptions import TrpgError
from src.trpg.core.services.user.user_account import UserAccountService
from src.trpg.entities.core.user import User

from .utils import console, fail, open_session

users_app = typer.Typer(help="Manage player accounts")


def _print_user(user: User) -> None:
    table = Table(title=f"User {user.id}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Steam ID", str(user.steam_id))
    table.add_row("Name", user.user_name)
    table.add_row("Money", str(user.money))
    table.add_row("Role", user.role.value)
    table.add_row("Avatar (small)", str(user.avatar_small or "-"))
    table.add_row("Avatar (medium)", str(user.avatar_medium or "-"))
    table.add_row("Avatar (full)", str(user.avatar_full or "-"))
    table.add_row("Characters", ", ".join(map(str, user.character_ids)) or "-")
    table.add_row("Equipment", ", ".join(map(str, user.user_equipment_ids)) or "-")
    table.add_row("Modified", f"{user.audit.modified_at:%Y-%m-%d %H:%M:%S} by {user.audit.modified_by or '-'}")
    console.print(table)


@users_app.command("list")
def list_users(
    offset: int = typer.Option(0, "--offset", "-o", min=0, help="Number of users to skip"),
    limit: int = typer.Option(100, "--limit", "-l", min=0, help="Maximum number of users to show"),
) -> None:
    """List accounts."""
    with open_session() as session:
        users = UserAccountService(session).list_users(offset=offset, limit=limit)

    if not users:
        console.print("[yellow]No users found[/yellow]")
        return

    table = Table(title="Users")
    table.add_column("ID", style="cyan")
    table.add_column("Steam ID", style="blue")
    table.add_column("Name", style="green")
    table.add_column("Role", style="magenta")
    table.add_column("Money", style="yellow")
    for user in users:
        table.add_row(str(user.id), str(user.steam_id), user.user_name, user.role.value, str(user.money))

    console.print(table)
    console.print(f"\n[green]Found {len(users)} users[/green]")


@users_app.command("show")
def show_user(user_id: int = typer.Argument(..., help="Account id")) -> None:
    """Show one account."""
    with open_session() as session:
        try:
            user = UserAccountService(session).get_user(user_id)
        except TrpgError as e:
            raise fail(e) from e
    _print_user(user)


@users_app.command("provision")
def provision_user(
    steam_id: int = typer.Argument(..., help="64-bit Steam id"),
    user_name: str = typer.Argument(..., help="Display name"),
    avatar_small: str | None = typer.Option(None, "--avatar-small", help="32x32 avatar URL"),
    avatar_medium: str | None = typer.Option(None, "--avatar-medium", help="64x64 avatar URL"),
    avatar_full: str | None = typer.Option(None, "--avatar-full", help="184x184 avatar URL"),
    actor: str | None = typer.Option(None, "--actor", help="Actor recorded in the audit fields"),
) -> None:
    """Create the account for a Steam id, or refresh its profile."""
    with open_session() as session:
        try:
            user = UserAccountService(session).provision_from_steam(
                steam_id,
                user_name,
                avatar_small=avatar_small,
                avatar_medium=avatar_medium,
                avatar_full=avatar_full,
                actor=actor,
            )
        except TrpgError as e:
            raise fail(e) from e
    console.print(f"[green]✅ User {user.id} ready for steam id {user.steam_id}[/green]")


@users_app.command("set-role")
def set_role(
    user_id: int = typer.Argument(..., help="Account id"),
    role: str = typer.Argument(..., help="player, moderator or admin"),
    actor: str | None = typer.Option(None, "--actor", help="Actor recorded in the audit fields"),
) -> None:
    """Change the authorization role of an account."""
    with open_session() as session:
        try:
            user = UserAccountService(session).change_role(user_id, role, actor=actor)
        except TrpgError as e:
            raise fail(e) from e
    console.print(f"[green]✅ User {user.id} is now {user.role.value}[/green]")


@users_app.command("delete")
def delete_user(
    user_id: int = typer.Argument(..., help="Account id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete an account."""
    if not yes and not typer.confirm(f"Delete user {user_id}?"):
        console.print("[yellow]Aborted[/yellow]")
        return

    with open_session() as session:
        try:
            UserAccountService(session).delete_account(user_id)
        except TrpgError as e:
            raise fail(e) from e
    console.print(f"[green]✅ User {user_id} deleted[/green]")
