"""Report export command for SpendLens CLI."""

import logging
from datetime import datetime
from pathlib import Path

import click

from spendlens.cli.output import console, fail
from spendlens.reports import render_report_csv, report_filename
from spendlens.store import AppState, get_report

logger = logging.getLogger(__name__)


@click.command()
@click.argument("report_id")
@click.option(
    "--dir",
    "-d",
    "directory",
    default=".",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to write the CSV into",
)
@click.pass_context
def export(ctx: click.Context, report_id: str, directory: Path) -> None:
    """Export a report as CSV.

    \b
    Examples:
        spendlens export report-1
        spendlens export report-5 --dir ./exports
    """
    try:
        report = get_report(AppState(), report_id)
    except KeyError:
        fail(f"Report '{report_id}' not found")

    now = datetime.utcnow()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / report_filename(report, now.date())
    path.write_text(render_report_csv(report, now), encoding="utf-8")
    logger.info(f"Wrote {path}")

    console.print(f"[green]✓[/green] Exported [bold]{report.name}[/bold] to {path}")
