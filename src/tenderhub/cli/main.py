"""
TenderHub CLI - Main entry point.

A terminal-first B2B tender marketplace: companies post tenders,
browse them and apply.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.markup import escape
from rich.panel import Panel
from rich.traceback import install as install_rich_traceback

from tenderhub import __app_name__, __version__
from tenderhub.cli.common import console, err_console, load_config

# Load environment variables from .env (if present)
load_dotenv()

install_rich_traceback(show_locals=False, width=120)

app = typer.Typer(
    name=__app_name__,
    help="Terminal-first B2B tender marketplace",
    rich_markup_mode="rich",
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold cyan]{__app_name__}[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """TenderHub - post tenders, find tenders, apply."""


# =============================================================================
# Import and register subcommand modules
# =============================================================================

from .commands import applications, company, db, tenders  # noqa: E402

app.add_typer(company.app, name="company", help="Manage your company profile and browse the directory")
app.add_typer(tenders.app, name="tenders", help="Publish and browse tenders")
app.add_typer(applications.app, name="applications", help="Apply to tenders and review applications")
app.add_typer(db.app, name="db", help="Database operations")


# =============================================================================
# Init Command
# =============================================================================


DEFAULT_APP_CONFIG = """\
# TenderHub Configuration

# Directory paths
config_dir: configs
data_dir: data

# Database settings (DATABASE_URL overrides the url)
database:
  url: sqlite:///data/tenderhub.db
  echo: false

# Logging settings
logging:
  level: INFO
  file: logs/tenderhub.log
  json_format: true
  rich_console: true

# Marketplace settings
marketplace:
  placeholder_company_name: My Company
  placeholder_industry: Technology
  placeholder_description: Company description
  currency_symbol: "$"

# Who is acting: read from this environment variable unless --as is given
identity:
  env_var: TENDERHUB_IDENTITY
"""


@app.command()
def init(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing configuration",
    ),
) -> None:
    """Initialize TenderHub database and configuration.

    Creates required directories, the default configuration file,
    and the database schema.
    """
    from tenderhub.persistence.db import init_db

    app_config_path = Path("configs/app.yaml")
    if not app_config_path.exists() or force:
        app_config_path.parent.mkdir(parents=True, exist_ok=True)
        app_config_path.write_text(DEFAULT_APP_CONFIG, encoding="utf-8")

    config = load_config()
    config.ensure_directories()
    init_db(config.database.url, echo=config.database.echo)

    console.print()
    console.print(Panel.fit(
        "[bold green]OK - TenderHub initialized successfully![/bold green]\n\n"
        "Created:\n"
        "  - [cyan]configs/app.yaml[/cyan] - Application configuration\n"
        "  - [cyan]data/[/cyan] - Database storage\n"
        "  - [cyan]logs/[/cyan] - Log files\n\n"
        "Next steps:\n"
        "  1. Pick an identity: [yellow]export TENDERHUB_IDENTITY=you@example.com[/yellow]\n"
        "  2. Register your company: [yellow]tenderhub company register --name ...[/yellow]\n"
        "  3. Browse tenders: [yellow]tenderhub tenders list[/yellow]",
        title="[bold]Initialization Complete[/bold]",
        border_style="green",
    ))


@app.command("check-config")
def check_config(
    path: Path = typer.Argument(Path("configs/app.yaml"), help="Configuration file to check"),
) -> None:
    """Validate a configuration file without using it."""
    from tenderhub.core.config import validate_app_config_file

    errors = validate_app_config_file(path)
    if errors:
        err_console.print(f"[red]{path} has {len(errors)} problem(s):[/red]")
        for error in errors:
            err_console.print(f"  - {escape(error)}")
        raise typer.Exit(1)

    console.print(f"[green]OK[/green] {path} is valid")


# =============================================================================
# Status Command
# =============================================================================


@app.command()
def status() -> None:
    """Show marketplace statistics."""
    from rich.table import Table

    from tenderhub.cli.common import open_session
    from tenderhub.persistence.repo import CompanyRepository, TenderRepository

    config = load_config()

    url = config.database.url
    if url.startswith("sqlite:///") and url != "sqlite:///:memory:":
        if not Path(url.replace("sqlite:///", "")).exists():
            err_console.print(f"[red]{__app_name__} not initialized. Run:[/red] {__app_name__} init")
            raise typer.Exit(1)

    console.print()
    console.print("[bold]TenderHub Status[/bold]")
    console.print()

    with open_session(config) as session:
        company_count = CompanyRepository(session).count()
        status_counts = TenderRepository(session).count_by_status()

        console.print(f"Companies: [bold]{company_count}[/bold]")

        if not status_counts:
            console.print("[dim]No tenders posted yet.[/dim]")
            return

        stats_table = Table(title="Tender Status", show_header=True, header_style="bold magenta")
        stats_table.add_column("Status", style="cyan")
        stats_table.add_column("Count", justify="right")

        for name, count in sorted(status_counts.items()):
            stats_table.add_row(name, str(count))

        console.print(stats_table)


# =============================================================================
# Entry Point
# =============================================================================


def run() -> None:
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    run()
