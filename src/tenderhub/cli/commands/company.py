"""
Company profile and directory commands.
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.markup import escape
from rich.panel import Panel

from tenderhub.cli.common import (
    IDENTITY_HELP,
    console,
    handle_errors,
    load_config,
    open_session,
    resolve_identity,
)

app = typer.Typer(
    help="Manage your company profile",
    no_args_is_help=True,
)


def _profile_panel(company, title: str) -> Panel:
    lines = [
        f"[bold]{escape(company.name)}[/bold]",
        f"Industry: {escape(company.industry) if company.industry else '[dim]-[/dim]'}",
        f"Website: {escape(company.website) if company.website else '[dim]-[/dim]'}",
        "",
        escape(company.description) if company.description else "[dim]No description[/dim]",
    ]
    return Panel.fit("\n".join(lines), title=f"[bold]{title}[/bold] (id {company.id})", border_style="cyan")


@app.command("register")
def register_company(
    name: str = typer.Option(..., "--name", "-n", help="Company name"),
    industry: Optional[str] = typer.Option(None, "--industry", "-i", help="Industry tag"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Short description"),
    website: Optional[str] = typer.Option(None, "--website", "-w", help="Company website"),
    as_identity: Optional[str] = typer.Option(None, "--as", help=IDENTITY_HELP),
) -> None:
    """Register a company profile for your identity."""
    from tenderhub.core.marketplace import CompanyDirectory

    config = load_config()
    identity = resolve_identity(config, as_identity)

    with handle_errors(), open_session(config) as session:
        directory = CompanyDirectory(session, config.marketplace)
        company, created = directory.register(
            identity,
            name=name,
            industry=industry,
            description=description,
            website=website,
        )

        if created:
            console.print(f"[green]OK[/green] Company registered (id {company.id})")
        else:
            console.print("[yellow]You already have a company profile; it was left unchanged.[/yellow]")
        console.print(_profile_panel(company, "Company Profile"))


@app.command("ensure")
def ensure_company(
    as_identity: Optional[str] = typer.Option(None, "--as", help=IDENTITY_HELP),
) -> None:
    """Make sure your identity has a profile, creating a basic one if needed."""
    from tenderhub.core.marketplace import CompanyDirectory

    config = load_config()
    identity = resolve_identity(config, as_identity)

    with handle_errors(), open_session(config) as session:
        company = CompanyDirectory(session, config.marketplace).ensure_profile(identity)
        console.print(_profile_panel(company, "Company Profile"))


@app.command("show")
def show_company(
    as_identity: Optional[str] = typer.Option(None, "--as", help=IDENTITY_HELP),
) -> None:
    """Show your company profile and tender counts."""
    from rich.table import Table

    from tenderhub.core.marketplace import CompanyDirectory, TenderCatalog

    config = load_config()
    identity = resolve_identity(config, as_identity)

    with handle_errors(), open_session(config) as session:
        company = CompanyDirectory(session, config.marketplace).require_profile(identity)
        summary = TenderCatalog(session).owner_summary(company.id)

        console.print(_profile_panel(company, "Company Profile"))

        table = Table(title="Your Tenders", show_header=True, header_style="bold magenta")
        table.add_column("Total", justify="right")
        table.add_column("Active", justify="right", style="green")
        table.add_column("Closed", justify="right", style="red")
        table.add_column("Cancelled", justify="right", style="dim")
        table.add_row(str(summary.total), str(summary.active), str(summary.closed), str(summary.cancelled))
        console.print(table)


@app.command("list")
def list_companies(
    query: Optional[str] = typer.Option(
        None,
        "--query",
        "-q",
        help="Search company name and description",
    ),
    industry: Optional[str] = typer.Option(
        None,
        "--industry",
        "-i",
        help="Filter by industry tag ('all' for every industry)",
    ),
) -> None:
    """Browse the company directory.

    Examples:
        tenderhub company list --query cloud --industry Technology
    """
    from rich.table import Table

    from tenderhub.core.marketplace import CompanyDirectory

    config = load_config()

    with handle_errors(), open_session(config) as session:
        directory = CompanyDirectory(session, config.marketplace)
        companies = directory.search(query or "", industry or "")

        if not companies:
            console.print("[dim]No companies found matching criteria.[/dim]")
            return

        active = directory.active_tender_counts()

        table = Table(title=f"Companies ({len(companies)})", show_header=True, header_style="bold magenta")
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Name", max_width=30)
        table.add_column("Industry")
        table.add_column("Website")
        table.add_column("Active Tenders", justify="right", style="green")

        for company in companies:
            table.add_row(
                str(company.id),
                escape(company.name),
                escape(company.industry) if company.industry else "[dim]-[/dim]",
                escape(company.website) if company.website else "[dim]-[/dim]",
                str(active.get(company.id, 0)),
            )
        console.print(table)
