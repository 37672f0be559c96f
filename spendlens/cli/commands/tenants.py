"""Tenant commands for SpendLens CLI."""

import click
from rich.table import Table
from rich.tree import Tree

from spendlens import ALL_TENANTS
from spendlens.cli.output import console, emit, fail, trend_markup
from spendlens.currency import display
from spendlens.generators import generate_tenant_summaries
from spendlens.hierarchy import build_hierarchy, level_label
from spendlens.models import Currency, VDCNode
from spendlens.rollup import budget_utilization, tenant_overview
from spendlens.tenants import get_tenant


@click.command()
@click.pass_context
def hierarchy(ctx: click.Context) -> None:
    """Show the VDC tree of the selected tenant.

    \b
    Examples:
        spendlens -t tenant-3 hierarchy
    """
    tenant_id = ctx.obj["tenant"]
    if tenant_id == ALL_TENANTS:
        fail("Select a tenant with --tenant to view its hierarchy")
    tenant = get_tenant(tenant_id)

    root = build_hierarchy(tenant.id, tenant.budget, rng=ctx.obj["rng"])

    if emit(root, ctx.obj["output"]):
        return

    tree = Tree(f"[bold]{tenant.name}[/bold]")
    _add_node(tree, root, ctx.obj["currency"])
    console.print(tree)


def _add_node(parent: Tree, node: VDCNode, currency: Currency) -> None:
    used = budget_utilization(node.spend, node.budget)
    branch = parent.add(
        f"[cyan]{level_label(node.level)}[/cyan] [bold]{node.name}[/bold] "
        f"{display(node.spend, currency)} / {display(node.budget, currency)} ({used:.1f}%) "
        f"{node.resources} resources {trend_markup(node.trend)}"
    )
    for child in node.children or []:
        _add_node(branch, child, currency)


@click.command()
@click.pass_context
def tenants(ctx: click.Context) -> None:
    """Compare spend and budget usage across tenants."""
    currency = ctx.obj["currency"]
    summaries = generate_tenant_summaries(rng=ctx.obj["rng"])

    if emit(summaries, ctx.obj["output"]):
        return

    table = Table(show_header=True, header_style="bold magenta", title="Tenants")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Country")
    table.add_column("Spend", justify="right")
    table.add_column("Budget Used", justify="right")
    table.add_column("Efficiency", justify="right")
    table.add_column("Top Service")

    for summary in summaries:
        usage_color = "red" if summary.budget_usage > 100 else "yellow" if summary.budget_usage > 80 else "green"
        table.add_row(
            summary.tenant.id,
            summary.tenant.name,
            summary.tenant.country,
            display(summary.total_spend, currency),
            f"[{usage_color}]{summary.budget_usage:.1f}%[/{usage_color}]",
            f"{summary.efficiency_score:.0f}",
            summary.top_service.value,
        )

    overview = tenant_overview(summaries)
    table.caption = (
        f"Total spend {display(overview.total_spend, currency)} | "
        f"Avg efficiency {overview.average_efficiency:.0f}% | "
        f"{overview.total_recommendations} recommendations"
    )
    console.print(table)
