"""Typer CLI for the daily drop (generate, season)."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from dotenv import load_dotenv
# load .env immediately so subsequent imports (which read settings at import time)
# pick up values from the .env file
load_dotenv()

# Configure top-level logging early so other modules pick it up.
import logging
from daily_drop.settings import settings

log_level = getattr(logging, (settings.LOG_LEVEL or "INFO").upper(), logging.INFO)
handlers = [logging.StreamHandler()]
if settings.LOG_FILE:
    handlers.append(logging.FileHandler(settings.LOG_FILE))
logging.basicConfig(
    level=log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    handlers=handlers,
)

# Quiet noisy third-party loggers while keeping our app logs
logging.getLogger("urllib3").setLevel(logging.WARNING)
logging.getLogger("requests").setLevel(logging.WARNING)

from daily_drop.orchestrate import run as orchestrator
from daily_drop.seasons import parse_hemisphere, resolve_season

app = typer.Typer()
console = Console()


@app.command()
def generate(
    date: Optional[str] = typer.Option(None, help="ISO date to generate (default: today, UTC)."),
    hemisphere: Optional[str] = typer.Option(None, help="Northern or Southern (default: DAILY_DROP_HEMISPHERE)."),
    out_dir: Optional[str] = typer.Option(None, help="Output directory (default: DAILY_DROP_OUT_DIR)."),
    local_only: bool = typer.Option(False, "--local-only", help="Skip providers and use the local generator."),
):
    """Generate the day's recipe document unless it already exists."""
    try:
        result = orchestrator.run_daily_drop(
            date_iso=date,
            hemisphere=hemisphere,
            out_dir=out_dir,
            providers=[] if local_only else None,
        )
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    if not result.written:
        console.print(f"Already exists: {result.path}")
        return
    if result.source == orchestrator.LOCAL_SOURCE:
        console.print("Using local generator fallback.")
    else:
        console.print(f"[green]Generated via {result.source}[/green]")
    console.print(f"Wrote {result.path}")


@app.command()
def season(date: str, hemisphere: Optional[str] = typer.Option(None)):
    """Print the season for DATE."""
    try:
        hemi = parse_hemisphere(hemisphere if hemisphere is not None else settings.HEMISPHERE)
        console.print(resolve_season(date, hemi).value)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
