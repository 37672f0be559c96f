"""Recommendation commands for SpendLens CLI."""

import click
from rich.panel import Panel
from rich.table import Table

from spendlens.cli.output import console, emit
from spendlens.currency import display
from spendlens.generators import generate_recommendations
from spendlens.models import Effort, Impact
from spendlens.rollup import recommendation_stats

IMPACT_COLORS = {Impact.HIGH: "red", Impact.MEDIUM: "yellow", Impact.LOW: "green"}
EFFORT_COLORS = {Effort.EASY: "green", Effort.MODERATE: "yellow", Effort.COMPLEX: "red"}


@click.command()
@click.option("--impact", type=click.Choice([i.value for i in Impact]), default=None, help="Filter by impact")
@click.option("--easy", is_flag=True, help="Only easy wins")
@click.pass_context
def recommendations(ctx: click.Context, impact: str | None, easy: bool) -> None:
    """List cost optimization recommendations.

    \b
    Examples:
        spendlens recommendations
        spendlens -t tenant-2 recommendations --impact high
        spendlens recommendations --easy
    """
    currency = ctx.obj["currency"]
    recs = generate_recommendations(ctx.obj["tenant"])
    if impact:
        recs = [r for r in recs if r.impact == Impact(impact)]
    if easy:
        recs = [r for r in recs if r.effort == Effort.EASY]

    if emit(recs, ctx.obj["output"]):
        return

    stats = recommendation_stats(recs)
    console.print(Panel(
        "\n".join([
            f"[bold]Open:[/bold] {stats.new_count}  [bold]High Impact:[/bold] {stats.high_impact}",
            f"[bold]Potential Savings:[/bold] [green]{display(stats.total_savings, currency)}/mo[/green]",
            f"[bold]Easy Wins:[/bold] {stats.easy_wins} ({display(stats.easy_win_savings, currency)}/mo)",
        ]),
        title="Recommendations",
        border_style="blue",
    ))

    if not recs:
        console.print("[green]✓ No recommendations match[/green]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Service")
    table.add_column("Savings", justify="right")
    table.add_column("Impact")
    table.add_column("Effort")
    table.add_column("Status")

    for rec in recs:
        impact_color = IMPACT_COLORS[rec.impact]
        effort_color = EFFORT_COLORS[rec.effort]
        table.add_row(
            rec.id,
            rec.title,
            rec.service.value,
            display(rec.projected_savings, currency),
            f"[{impact_color}]{rec.impact.value}[/{impact_color}]",
            f"[{effort_color}]{rec.effort.value}[/{effort_color}]",
            rec.status.value,
        )

    console.print(table)
