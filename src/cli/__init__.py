"""Main CLI application module."""

import typer

from .server_commands import init_db, serve
from .user_commands import users_app

# Create the main CLI application
app = typer.Typer(
    help="Accounts API - server and account administration",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command(name="serve")(serve)
app.command(name="init-db")(init_db)
app.add_typer(users_app, name="users")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
