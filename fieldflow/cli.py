"""FieldFlowPM CLI.

Commands:
- serve: Run the HTTP API under uvicorn
- hash-password: Print a bcrypt hash for a password
- demo-data: Show the accounts and projects the demo seed creates
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from fieldflow.auth.passwords import PASSWORD_TOO_LONG, hash_password, password_fits
from fieldflow.config import get_config
from fieldflow.storage.memory import MemStorage
from fieldflow.storage.seed import seed_demo_data

app = typer.Typer(
    name="fieldflow",
    help="FieldFlowPM - construction project management API",
    no_args_is_help=True,
)

console = Console()


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Host to bind"),
    port: int = typer.Option(5000, help="Port to bind"),
    reload: bool = typer.Option(False, help="Enable autoreload (dev only)"),
):
    """Run the FastAPI app.

    Sessions live in process memory unless SESSION_BACKEND=redis, so run a
    single worker with the memory backend.
    """
    import uvicorn

    typer.echo(f"Starting FieldFlowPM API on http://{host}:{port}")
    uvicorn.run(
        "fieldflow.web.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        workers=1,
    )


@app.command("hash-password")
def hash_password_cmd(
    password: str = typer.Option(
        ..., prompt=True, hide_input=True, confirmation_prompt=True, help="Password to hash"
    ),
    rounds: int | None = typer.Option(None, help="bcrypt cost factor (default: BCRYPT_ROUNDS)"),
):
    """Print a bcrypt hash for seeding an external user store."""
    if not password_fits(password):
        raise typer.BadParameter(PASSWORD_TOO_LONG, param_hint="--password")
    rounds = rounds or get_config().security.bcrypt_rounds
    typer.echo(hash_password(password, rounds))


@app.command("demo-data")
def demo_data():
    """Show what the demo seed loads (passwords are not shown)."""
    config = get_config()
    storage = MemStorage()
    demo = seed_demo_data(storage, config.seed, bcrypt_rounds=4)

    console.print(f"[bold]Company:[/bold] {demo.company.name} (id={demo.company.id})")

    users = Table(title="Accounts")
    users.add_column("ID", justify="right")
    users.add_column("Username", style="cyan")
    users.add_column("Name")
    users.add_column("Role", style="green")
    for user in (demo.admin, demo.client):
        users.add_row(str(user.id), user.username, f"{user.first_name} {user.last_name}", user.role.value)
    console.print(users)

    projects = Table(title="Projects")
    projects.add_column("ID", justify="right")
    projects.add_column("Name", style="cyan")
    projects.add_column("Status", style="green")
    projects.add_column("Budget", justify="right")
    for project in demo.projects:
        budget = f"{project.budget_total:,.2f}" if project.budget_total is not None else "-"
        projects.add_row(str(project.id), project.name, project.status.value, budget)
    console.print(projects)


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
