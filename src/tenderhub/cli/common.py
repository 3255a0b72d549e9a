"""
Shared plumbing for CLI commands: config, sessions, identity and error display.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from typing import Generator

import typer
from rich.console import Console
from rich.markup import escape
from sqlalchemy.orm import Session

from tenderhub.core.config import AppConfig, ConfigError, load_app_config
from tenderhub.core.errors import (
    AuthenticationError,
    DuplicateApplicationError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from tenderhub.core.identity import EnvironmentIdentityProvider, Identity, StaticIdentityProvider
from tenderhub.core.logging import setup_logging
from tenderhub.core.normalize import days_until, deadline_label, format_range, is_past_deadline
from tenderhub.persistence.db import get_engine, get_session
from tenderhub.persistence.models import Tender, utcnow

console = Console()
err_console = Console(stderr=True)

IDENTITY_HELP = "Act as this identity (defaults to $TENDERHUB_IDENTITY)"

STATUS_STYLES = {
    "active": "green",
    "closed": "red",
    "cancelled": "dim",
}


def load_config() -> AppConfig:
    """Load configs/app.yaml and configure logging from it."""
    try:
        config = load_app_config()
    except ConfigError as e:
        err_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        if e.details:
            err_console.print(f"[dim]{escape(str(e.details))}[/dim]")
        raise typer.Exit(1)

    setup_logging(
        level=config.logging.level,
        log_file=config.logging.file,
        json_format=config.logging.json_format,
        rich_console=config.logging.rich_console,
    )
    return config


@contextmanager
def open_session(config: AppConfig) -> Generator[Session, None, None]:
    """Session bound to the configured database; commits on success."""
    get_engine(config.database.url, echo=config.database.echo, pool_size=config.database.pool_size)
    with get_session() as session:
        yield session


def resolve_identity(config: AppConfig, as_identity: str | None) -> Identity | None:
    """--as wins over the configured environment variable."""
    if as_identity:
        return StaticIdentityProvider(as_identity).current_identity()
    return EnvironmentIdentityProvider(config.identity.env_var).current_identity()


@contextmanager
def handle_errors() -> Generator[None, None, None]:
    """Print marketplace errors as friendly messages and exit non-zero.

    A duplicate application exits with code 2 so scripts can tell it
    apart from real failures.
    """
    try:
        yield
    except DuplicateApplicationError as e:
        err_console.print(f"[yellow]Already applied:[/yellow] {escape(str(e))}")
        raise typer.Exit(2)
    except AuthenticationError as e:
        err_console.print(f"[red]Authentication error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except ValidationError as e:
        err_console.print(f"[red]Invalid input:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except NotFoundError as e:
        err_console.print(f"[red]Not found:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except StoreError as e:
        err_console.print(f"[red]Database error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def budget_text(tender: Tender, config: AppConfig) -> str:
    return format_range(tender.budget_min, tender.budget_max, config.marketplace.currency_symbol)


def deadline_text(tender: Tender, now: datetime | None = None) -> str:
    """Deadline date plus a coloured countdown."""
    now = now or utcnow()
    days = days_until(tender.deadline, now)
    label = deadline_label(days)
    if is_past_deadline(tender.deadline, now):
        label = f"[dim]{label}[/dim]"
    elif days <= 3:
        label = f"[red bold]{label}[/red bold]"
    elif days <= 7:
        label = f"[yellow]{label}[/yellow]"
    return f"{tender.deadline.isoformat()} ({label})"


def status_text(status: str) -> str:
    style = STATUS_STYLES.get(status, "yellow")
    return f"[{style}]{status}[/{style}]"
