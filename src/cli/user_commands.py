"""Account administration CLI commands."""

import typer
from rich.table import Table

from src.accounts.core.errors import NotFound
from src.accounts.core.services import UserManagementService
from src.accounts.entities.core.user import Role

from .utils import console, database_service

# Create the users subcommand app
users_app = typer.Typer(help="Inspect accounts and manage roles")


@users_app.command("list")
def list_users() -> None:
    """List all registered users."""
    with database_service() as db, db.session_scope() as session:
        users = UserManagementService(session).list_users()

    if not users:
        console.print("[yellow]No users found[/yellow]")
        return

    table = Table(title="Users")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Email", style="blue")
    table.add_column("Role", style="magenta")
    table.add_column("Created", style="dim")

    for user in users:
        table.add_row(
            user.id,
            user.name,
            user.email,
            user.role.value,
            user.created_at.isoformat(timespec="seconds"),
        )

    console.print(table)
    console.print(f"\n[green]Found {len(users)} users[/green]")


@users_app.command("set-role")
def set_role(
    email: str = typer.Argument(..., help="Email of the user to change"),
    role: Role = typer.Argument(..., help="New role"),
) -> None:
    """Grant or revoke the admin role. This is the only way to create admins."""
    try:
        with database_service() as db, db.session_scope() as session:
            user = UserManagementService(session).set_role(email, role)
    except NotFound as e:
        console.print(f"[red]❌ No user registered with email '{email}'[/red]")
        raise typer.Exit(code=1) from e

    console.print(f"[green]✅ {user.email} now has role '{user.role.value}'[/green]")
