"""Server and database CLI commands."""

import typer
from rich.panel import Panel
from rich.prompt import Confirm

from src.accounts.runtime.context import get_config

from .utils import console, database_service


def serve(
    host: str | None = typer.Option(None, help="Host to bind; defaults to app.host"),
    port: int | None = typer.Option(None, help="Port to bind; defaults to app.port"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
) -> None:
    """🚀 Start the accounts API server."""
    import uvicorn

    config = get_config()
    bind_host = host or config.app.host
    bind_port = port or config.app.port

    console.print(
        Panel.fit(
            f"[bold green]Starting {config.app.name}[/bold green] "
            f"({config.app.environment})",
            border_style="green",
        )
    )
    console.print(f"[blue]Server will be available at:[/blue] http://{bind_host}:{bind_port}")
    if config.database.is_memory:
        console.print(
            "[yellow]Using an in-memory database: data is lost on restart[/yellow]"
        )

    uvicorn.run(
        "src.accounts.api.http.app:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        access_log=False,
    )


def init_db(
    reset: bool = typer.Option(
        False, "--reset", help="Drop existing tables first (deletes every account)"
    ),
) -> None:
    """Create the user table in the configured database."""
    config = get_config()
    if config.database.is_memory:
        console.print(
            "[yellow]DATABASE_URL points at an in-memory database; "
            "nothing will persist[/yellow]"
        )
    if reset and not Confirm.ask("Delete every stored account?", default=False):
        raise typer.Exit(code=1)
    with database_service(reset=reset):
        console.print(f"[green]✅ Tables ready at {config.database.url}[/green]")
