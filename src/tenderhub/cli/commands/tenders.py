"""
Tender publishing, browsing and lifecycle commands.
"""

from __future__ import annotations

from typing import Optional

import orjson
import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tenderhub.cli.common import (
    IDENTITY_HELP,
    budget_text,
    console,
    deadline_text,
    err_console,
    handle_errors,
    load_config,
    open_session,
    resolve_identity,
    status_text,
)

app = typer.Typer(
    help="Publish and browse tenders",
    no_args_is_help=True,
)


def _tender_dict(tender) -> dict:
    return {
        "id": tender.id,
        "title": tender.title,
        "company": tender.owner.name if tender.owner else None,
        "industry": tender.industry,
        "budget_min": tender.budget_min,
        "budget_max": tender.budget_max,
        "deadline": tender.deadline.isoformat(),
        "status": tender.status,
        "created_at": tender.created_at.isoformat(),
    }


def _tender_table(tenders, title: str, config, show_status: bool = False) -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title", max_width=40)
    table.add_column("Company", max_width=25)
    table.add_column("Industry")
    table.add_column("Budget", justify="right")
    table.add_column("Deadline")
    if show_status:
        table.add_column("Status", justify="center")

    for tender in tenders:
        title_text = tender.title if len(tender.title) <= 40 else tender.title[:37] + "..."
        row = [
            str(tender.id),
            escape(title_text),
            escape(tender.owner.name) if tender.owner else "[dim]-[/dim]",
            escape(tender.industry) if tender.industry else "[dim]-[/dim]",
            budget_text(tender, config),
            deadline_text(tender),
        ]
        if show_status:
            row.append(status_text(tender.status))
        table.add_row(*row)
    return table


@app.command("create")
def create_tender(
    title: str = typer.Option(..., "--title", "-t", help="Tender title"),
    description: str = typer.Option(..., "--description", "-d", help="Project requirements"),
    deadline: str = typer.Option(
        ...,
        "--deadline",
        help="Deadline (2026-11-30, 'in 30 days', ...)",
    ),
    industry: Optional[str] = typer.Option(None, "--industry", "-i", help="Industry tag"),
    budget_min: Optional[str] = typer.Option(None, "--budget-min", help="Minimum budget"),
    budget_max: Optional[str] = typer.Option(None, "--budget-max", help="Maximum budget"),
    as_identity: Optional[str] = typer.Option(None, "--as", help=IDENTITY_HELP),
) -> None:
    """Publish a new tender.

    A basic company profile is created for you if you do not have one yet.

    Examples:
        tenderhub tenders create -t "Cloud Infrastructure Migration" \\
            -d "Move our workloads to the cloud" --deadline "in 30 days" \\
            --budget-min 10000 --budget-max 50000 -i Technology
    """
    from tenderhub.core.marketplace import CompanyDirectory, TenderCatalog

    config = load_config()
    identity = resolve_identity(config, as_identity)

    with handle_errors(), open_session(config) as session:
        company = CompanyDirectory(session, config.marketplace).ensure_profile(identity)
        tender = TenderCatalog(session).create(
            owner_company_id=company.id,
            title=title,
            description=description,
            deadline=deadline,
            industry=industry,
            budget_min=budget_min,
            budget_max=budget_max,
        )

        console.print(f"[green]OK[/green] Tender created (id {tender.id})")
        console.print(f"  Budget:   {budget_text(tender, config)}")
        console.print(f"  Deadline: {deadline_text(tender)}")


@app.command("list")
def list_tenders(
    query: Optional[str] = typer.Option(
        None,
        "--query",
        "-q",
        help="Search title, description and company name",
    ),
    industry: Optional[str] = typer.Option(
        None,
        "--industry",
        "-i",
        help="Filter by industry tag ('all' for every industry)",
    ),
    format: str = typer.Option(
        "table",
        "--format",
        "-f",
        help="Output format (table, json, csv)",
    ),
) -> None:
    """Browse active tenders.

    Examples:
        tenderhub tenders list --query cloud --industry Technology
        tenderhub tenders list --format json
    """
    from tenderhub.core.marketplace import TenderCatalog

    config = load_config()

    with handle_errors(), open_session(config) as session:
        tenders = TenderCatalog(session).search(query or "", industry or "")

        if format == "json":
            console.print_json(orjson.dumps([_tender_dict(t) for t in tenders]).decode("utf-8"))
            return

        if format == "csv":
            import csv
            import sys
            writer = csv.writer(sys.stdout)
            writer.writerow(["id", "title", "company", "industry", "budget_min", "budget_max", "deadline"])
            for t in tenders:
                writer.writerow([
                    t.id,
                    t.title,
                    t.owner.name if t.owner else "",
                    t.industry or "",
                    "" if t.budget_min is None else t.budget_min,
                    "" if t.budget_max is None else t.budget_max,
                    t.deadline.isoformat(),
                ])
            return

        if not tenders:
            console.print("[dim]No tenders found matching criteria.[/dim]")
            return

        console.print(_tender_table(tenders, f"Active Tenders ({len(tenders)})", config))


@app.command("mine")
def my_tenders(
    as_identity: Optional[str] = typer.Option(None, "--as", help=IDENTITY_HELP),
) -> None:
    """List every tender your company has posted."""
    from tenderhub.core.marketplace import CompanyDirectory, TenderCatalog

    config = load_config()
    identity = resolve_identity(config, as_identity)

    with handle_errors(), open_session(config) as session:
        company = CompanyDirectory(session, config.marketplace).require_profile(identity)
        catalog = TenderCatalog(session)
        tenders = catalog.list_by_owner(company.id)

        if not tenders:
            console.print("[dim]You have not posted any tenders yet.[/dim]")
            console.print("Create one with: [yellow]tenderhub tenders create[/yellow]")
            return

        summary = catalog.owner_summary(company.id)
        console.print(_tender_table(tenders, f"{escape(company.name)}: Tenders", config, show_status=True))
        console.print(
            f"[bold]{summary.total}[/bold] total, [green]{summary.active} active[/green], "
            f"[red]{summary.closed} closed[/red], [dim]{summary.cancelled} cancelled[/dim]"
        )


@app.command("show")
def show_tender(
    id: int = typer.Argument(..., help="Tender ID"),
) -> None:
    """Show detailed information about a tender."""
    from tenderhub.core.marketplace import TenderCatalog
    from tenderhub.persistence.repo import ApplicationRepository

    config = load_config()

    with handle_errors(), open_session(config) as session:
        tender = TenderCatalog(session).require(id)
        received = ApplicationRepository(session).count_for_tender(tender.id)

        details = f"""[bold]Title:[/bold] {escape(tender.title)}
[bold]Company:[/bold] {escape(tender.owner.name)}
[bold]Industry:[/bold] {escape(tender.industry or "-")}
[bold]Status:[/bold] {status_text(tender.status)}

[bold]Budget:[/bold] {budget_text(tender, config)}
[bold]Deadline:[/bold] {deadline_text(tender)}
[bold]Posted:[/bold] {tender.created_at.strftime('%Y-%m-%d %H:%M')}
[bold]Applications:[/bold] {received}"""

        console.print()
        console.print(Panel.fit(details, title=f"[bold cyan]Tender #{tender.id}[/bold cyan]", border_style="cyan"))
        console.print()
        console.print(Panel(
            escape(tender.description[:2000] + ("..." if len(tender.description) > 2000 else "")),
            title="[bold]Description[/bold]",
            border_style="dim",
        ))


def _change_status(id: int, target: str, as_identity: str | None) -> None:
    from tenderhub.core.marketplace import CompanyDirectory, TenderCatalog

    config = load_config()
    identity = resolve_identity(config, as_identity)

    with handle_errors(), open_session(config) as session:
        company = CompanyDirectory(session, config.marketplace).require_profile(identity)
        tender = TenderCatalog(session).transition(id, company.id, target)
        console.print(f"[green]OK[/green] Tender {tender.id} is now {status_text(tender.status)}")


@app.command("close")
def close_tender(
    id: int = typer.Argument(..., help="Tender ID"),
    as_identity: Optional[str] = typer.Option(None, "--as", help=IDENTITY_HELP),
) -> None:
    """Close one of your active tenders."""
    _change_status(id, "closed", as_identity)


@app.command("cancel")
def cancel_tender(
    id: int = typer.Argument(..., help="Tender ID"),
    as_identity: Optional[str] = typer.Option(None, "--as", help=IDENTITY_HELP),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Cancel one of your active tenders."""
    if not yes and not typer.confirm(f"Cancel tender {id}? This cannot be undone.", default=False):
        err_console.print("[dim]Aborted.[/dim]")
        raise typer.Abort()
    _change_status(id, "cancelled", as_identity)


@app.command("industries")
def list_industries() -> None:
    """Show the suggested industry tags. Any other tag is accepted too."""
    config = load_config()
    for tag in config.marketplace.industries:
        console.print(f"  - {escape(tag)}")
