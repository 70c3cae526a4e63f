"""Helpers shared by the CLI commands."""

import logging
from datetime import date, datetime
from pathlib import Path

import pandas as pd
from rich.console import Console

from safespend.config import get_budget_config, get_configured_db_path
from safespend.domain.formatting import format_currency
from safespend.session import BudgetSession
from safespend.store.records import SqliteSink
from safespend.store.schema import get_db_path

console = Console()


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr; DEBUG when verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def resolve_db_path() -> Path:
    """Database path from config, or the XDG default."""
    return get_configured_db_path() or get_db_path()


def open_session() -> BudgetSession:
    """Create a session on the configured database and load stored state."""
    session = BudgetSession(SqliteSink(resolve_db_path()), default_config=get_budget_config())
    session.load()
    return session


def normalize_date(raw: str | None) -> str:
    """Normalise a user-typed date to YYYY-MM-DD (today when empty).

    Raises:
        ValueError: If pandas can't make sense of the date.
    """
    if not raw:
        return datetime.now().strftime("%Y-%m-%d")
    try:
        return date.fromisoformat(raw.strip()).isoformat()
    except ValueError:
        pass
    # DD/MM/YYYY, DD-MM-YYYY, "15 Jan 2025" etc.
    parsed = pd.to_datetime(raw, dayfirst=True, errors="raise")
    if pd.isna(parsed):
        raise ValueError(f"Invalid date: {raw}")
    return parsed.strftime("%Y-%m-%d")


def money_markup(amount: float) -> str:
    """Currency with red markup for negative amounts."""
    text = format_currency(amount)
    return f"[red]{text}[/red]" if amount < 0 else text
