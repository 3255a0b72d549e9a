"""
Database management commands.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape

from tenderhub.cli.common import console, err_console, load_config

app = typer.Typer(
    help="Database operations",
    no_args_is_help=True,
)


def _alembic_config(database_url: str):
    """Alembic config for the configured database.

    alembic.ini in the working directory is read for its logging setup when
    present. The migrations always come from the installed package.
    """
    from alembic.config import Config

    from tenderhub.persistence.db import MIGRATIONS_DIR

    ini_path = Path("alembic.ini")
    alembic_cfg = Config(str(ini_path)) if ini_path.is_file() else Config()
    # Option values go through ConfigParser interpolation
    alembic_cfg.set_main_option("script_location", str(MIGRATIONS_DIR).replace("%", "%%"))
    alembic_cfg.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    return alembic_cfg


@app.command("init")
def init_database(
    drop_existing: bool = typer.Option(
        False,
        "--drop",
        help="Drop existing tables before creating",
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Initialize the database schema.

    Creates all tables. Use --drop to reset the database.
    """
    from tenderhub.persistence.db import drop_db, init_db

    config = load_config()

    if drop_existing:
        if not yes and not typer.confirm("This will DELETE ALL DATA. Continue?", default=False):
            raise typer.Abort()

        console.print("[yellow]Dropping existing tables...[/yellow]")
        drop_db(config.database.url)

    console.print("Creating database schema...")
    init_db(config.database.url, echo=config.database.echo)

    console.print("[green]OK[/green] Database initialized")


@app.command("migrate")
def run_migrations(
    revision: str = typer.Option(
        "head",
        "--revision",
        "-r",
        help="Target revision (default: head)",
    ),
) -> None:
    """Run database migrations."""
    from alembic import command

    config = load_config()
    alembic_cfg = _alembic_config(config.database.url)

    console.print(f"Running migrations to: {revision}")

    try:
        command.upgrade(alembic_cfg, revision)
    except Exception as e:
        err_console.print(f"[red]Migration failed:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    console.print("[green]OK[/green] Migrations complete")


@app.command("downgrade")
def downgrade_database(
    revision: str = typer.Argument(..., help="Target revision"),
) -> None:
    """Downgrade database to a specific revision."""
    from alembic import command

    if not typer.confirm(f"Downgrade to revision '{revision}'? This may lose data."):
        raise typer.Abort()

    config = load_config()
    alembic_cfg = _alembic_config(config.database.url)

    console.print(f"Downgrading to: {revision}")

    try:
        command.downgrade(alembic_cfg, revision)
    except Exception as e:
        err_console.print(f"[red]Downgrade failed:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    console.print("[green]OK[/green] Downgrade complete")


@app.command("current")
def show_current() -> None:
    """Show current database revision."""
    from alembic import command

    config = load_config()

    console.print("[bold]Current database revision:[/bold]")
    command.current(_alembic_config(config.database.url), verbose=True)


@app.command("history")
def show_history() -> None:
    """Show migration history."""
    from alembic import command

    config = load_config()

    console.print("[bold]Migration history:[/bold]")
    command.history(_alembic_config(config.database.url), indicate_current=True)
