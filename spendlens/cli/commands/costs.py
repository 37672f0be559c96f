"""Cost commands for SpendLens CLI."""

import click
from rich.panel import Panel
from rich.table import Table

from spendlens.cli.output import console, emit, trend_markup
from spendlens.currency import NAMES, display
from spendlens.generators import (
    days_from_preset,
    generate_cost_trend,
    generate_kpis,
    generate_region_breakdown,
    generate_service_breakdown,
)
from spendlens.models import DateRangePreset
from spendlens.rollup import trend_stats

days_option = click.option(
    "--days", "-d", default=30, type=click.IntRange(1, 365), help="Period in days"
)
range_option = click.option(
    "--range",
    "-r",
    "date_range",
    type=click.Choice([p.value for p in DateRangePreset]),
    default=None,
    help="Date range preset, overrides --days",
)


def _period(days: int, date_range: str | None) -> int:
    return days_from_preset(date_range) if date_range else days


@click.command()
@days_option
@range_option
@click.pass_context
def kpis(ctx: click.Context, days: int, date_range: str | None) -> None:
    """Show dashboard KPIs for the selected tenant.

    \b
    Examples:
        spendlens kpis
        spendlens -t tenant-1 -c GBP kpis -d 90
        spendlens kpis --range thisMonth
    """
    days = _period(days, date_range)
    tenant = ctx.obj["tenant"]
    currency = ctx.obj["currency"]
    data = generate_kpis(tenant, days, rng=ctx.obj["rng"])

    if emit(data, ctx.obj["output"]):
        return

    budget_color = "red" if data.budget_used > 100 else "yellow" if data.budget_used > 80 else "green"
    lines = [
        f"[bold]Total Spend:[/bold] {display(data.total_spend, currency)} {trend_markup(data.spend_growth_rate)}",
        f"[bold]Previous Period:[/bold] {display(data.previous_spend, currency)}",
        f"[bold]Budget:[/bold] {display(data.total_budget, currency)} "
        f"([{budget_color}]{data.budget_used:.1f}% used[/{budget_color}])",
        f"[bold]Active Resources:[/bold] {data.active_resources}",
        f"[bold]Cost per Resource:[/bold] {display(data.cost_per_resource, currency)}",
        f"[bold]Optimization Opportunities:[/bold] {data.optimization_opportunities}",
        f"[bold]Potential Savings:[/bold] [green]{display(data.potential_savings, currency)}[/green]",
        f"[bold]Average Efficiency:[/bold] {data.average_efficiency:.1f}%",
    ]
    console.print(Panel(
        "\n".join(lines),
        title=f"SpendLens KPIs - {tenant} ({days}d)",
        subtitle=NAMES[currency],
        border_style="blue",
    ))


@click.command()
@days_option
@range_option
@click.pass_context
def trend(ctx: click.Context, days: int, date_range: str | None) -> None:
    """Show daily spend with a 7-day forecast."""
    days = _period(days, date_range)
    currency = ctx.obj["currency"]
    points = generate_cost_trend(ctx.obj["tenant"], days, rng=ctx.obj["rng"])

    if emit(points, ctx.obj["output"]):
        return

    table = Table(show_header=True, header_style="bold magenta", title="Cost Trend")
    table.add_column("Date", style="bold")
    table.add_column("Actual", justify="right")
    table.add_column("Forecast", justify="right")

    for point in points:
        if point.forecast is None:
            table.add_row(point.date, display(point.amount, currency), "-")
        else:
            table.add_row(f"[dim]{point.date}[/dim]", "-", f"[cyan]{display(point.forecast, currency)}[/cyan]")

    total = sum(point.amount for point in points)
    stats = trend_stats(points, total, days)
    table.caption = (
        f"Daily average {display(stats.daily_average, currency)} | "
        f"Peak {display(stats.peak_day, currency)} | "
        f"Lowest {display(stats.lowest_day, currency)}"
    )
    console.print(table)


@click.command()
@click.argument("dimension", type=click.Choice(["service", "region"]))
@days_option
@range_option
@click.option("--top", "-n", default=None, type=click.IntRange(min=1), help="Only show the largest N rows")
@click.pass_context
def breakdown(ctx: click.Context, dimension: str, days: int, date_range: str | None, top: int | None) -> None:
    """Show cost by service or region.

    \b
    Examples:
        spendlens breakdown service
        spendlens breakdown region --top 3
    """
    days = _period(days, date_range)
    currency = ctx.obj["currency"]
    if dimension == "service":
        rows = generate_service_breakdown(ctx.obj["tenant"], days, rng=ctx.obj["rng"])
    else:
        rows = generate_region_breakdown(ctx.obj["tenant"], days, rng=ctx.obj["rng"])
    if top is not None:
        rows = rows[:top]

    if emit(rows, ctx.obj["output"]):
        return

    table = Table(show_header=True, header_style="bold magenta", title=f"Cost by {dimension.capitalize()}")
    table.add_column(dimension.capitalize(), style="bold")
    table.add_column("Cost", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("Trend", justify="right")
    table.add_column("Resources", justify="right")

    for row in rows:
        key = row.service if dimension == "service" else row.region
        table.add_row(
            key.value,
            display(row.cost, currency),
            f"{row.percentage:.1f}%",
            trend_markup(row.trend),
            str(row.resource_count),
        )

    console.print(table)
