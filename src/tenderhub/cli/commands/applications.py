"""
Application commands: apply to tenders and review applications.
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from tenderhub.cli.common import (
    IDENTITY_HELP,
    console,
    handle_errors,
    load_config,
    open_session,
    resolve_identity,
)
from tenderhub.core.normalize import format_amount

app = typer.Typer(
    help="Apply to tenders and review applications",
    no_args_is_help=True,
)


def _budget_cell(budget: float | None, symbol: str) -> str:
    return "[dim]-[/dim]" if budget is None else format_amount(budget, symbol)


def _preview(text: str, width: int = 60) -> str:
    text = " ".join(text.split())
    return text if len(text) <= width else text[: width - 3] + "..."


@app.command("submit")
def submit_application(
    tender_id: int = typer.Argument(..., help="Tender ID"),
    proposal: str = typer.Option(..., "--proposal", "-p", help="Your proposal"),
    budget: Optional[str] = typer.Option(None, "--budget", "-b", help="Your proposed budget"),
    as_identity: Optional[str] = typer.Option(None, "--as", help=IDENTITY_HELP),
) -> None:
    """Apply to a tender. Each company may apply once per tender."""
    from tenderhub.core.marketplace import ApplicationLedger, CompanyDirectory

    config = load_config()
    identity = resolve_identity(config, as_identity)

    with handle_errors(), open_session(config) as session:
        ledger = ApplicationLedger(session, directory=CompanyDirectory(session, config.marketplace))
        application = ledger.submit_as(identity, tender_id, proposal, budget)
        console.print(f"[green]OK[/green] Application submitted (id {application.id})")


@app.command("list")
def list_applications(
    tender_id: int = typer.Argument(..., help="Tender ID"),
    as_identity: Optional[str] = typer.Option(None, "--as", help=IDENTITY_HELP),
) -> None:
    """List applications received by one of your tenders."""
    from tenderhub.core.errors import ValidationError
    from tenderhub.core.marketplace import ApplicationLedger, CompanyDirectory, TenderCatalog

    config = load_config()
    identity = resolve_identity(config, as_identity)

    with handle_errors(), open_session(config) as session:
        directory = CompanyDirectory(session, config.marketplace)
        catalog = TenderCatalog(session)
        company = directory.require_profile(identity)
        tender = catalog.require(tender_id)
        if tender.owner_company_id != company.id:
            raise ValidationError("Only the company that posted a tender can view its applications")

        applications = ApplicationLedger(session, directory=directory, catalog=catalog).list_for_tender(tender_id)
        if not applications:
            console.print("[dim]No applications yet.[/dim]")
            return

        table = Table(title=f"Applications for '{escape(tender.title)}'", show_header=True, header_style="bold magenta")
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Company", style="cyan")
        table.add_column("Budget", justify="right")
        table.add_column("Submitted")
        table.add_column("Proposal")

        for application in applications:
            table.add_row(
                str(application.id),
                escape(application.applicant.name),
                _budget_cell(application.budget, config.marketplace.currency_symbol),
                application.created_at.strftime("%Y-%m-%d %H:%M"),
                escape(_preview(application.proposal)),
            )
        console.print(table)


@app.command("mine")
def my_applications(
    as_identity: Optional[str] = typer.Option(None, "--as", help=IDENTITY_HELP),
) -> None:
    """List the applications your company has submitted."""
    from tenderhub.core.marketplace import ApplicationLedger, CompanyDirectory

    config = load_config()
    identity = resolve_identity(config, as_identity)

    with handle_errors(), open_session(config) as session:
        directory = CompanyDirectory(session, config.marketplace)
        company = directory.require_profile(identity)
        applications = ApplicationLedger(session, directory=directory).list_by_applicant(company.id)

        if not applications:
            console.print("[dim]You have not applied to any tenders yet.[/dim]")
            return

        table = Table(title="Your Applications", show_header=True, header_style="bold magenta")
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Tender")
        table.add_column("Status", justify="center")
        table.add_column("Budget", justify="right")
        table.add_column("Submitted")

        for application in applications:
            table.add_row(
                str(application.id),
                f"#{application.tender.id} {escape(application.tender.title)}",
                application.tender.status,
                _budget_cell(application.budget, config.marketplace.currency_symbol),
                application.created_at.strftime("%Y-%m-%d %H:%M"),
            )
        console.print(table)
