"""Main CLI entry point for SpendLens."""

import logging
import random

import click

from spendlens import ALL_TENANTS, __version__
from spendlens.cli.commands import costs, recommendations, reports, tenants
from spendlens.cli.output import fail
from spendlens.models import Currency
from spendlens.tenants import get_tenant


def setup_logging(level: str):
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


@click.group()
@click.version_option(version=__version__, prog_name="spendlens")
@click.option(
    "--tenant",
    "-t",
    default=ALL_TENANTS,
    help="Tenant id, or 'all' for every tenant",
)
@click.option(
    "--currency",
    "-c",
    type=click.Choice([c.value for c in Currency]),
    default=Currency.USD.value,
    help="Display currency",
)
@click.option("--seed", type=int, default=None, help="Seed for repeatable output")
@click.option(
    "--output",
    "-o",
    type=click.Choice(["table", "json", "yaml"]),
    default="table",
    help="Output format",
)
@click.option(
    "--log-level",
    "-l",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="warning",
    help="Log level",
)
@click.pass_context
def cli(ctx: click.Context, tenant: str, currency: str, seed: int | None, output: str, log_level: str) -> None:
    """SpendLens CLI - Multi-tenant cloud cost insights.

    Every figure is synthetic and regenerated on each run; pass --seed for
    repeatable numbers.

    \b
    Quick Commands:
        spendlens kpis                       # Dashboard KPIs for all tenants
        spendlens trend -d 7                 # Last week plus forecast
        spendlens breakdown service          # Cost by service
        spendlens -t tenant-3 hierarchy      # VDC tree of a tenant
        spendlens recommendations            # Optimization recommendations
        spendlens tenants                    # Compare tenants
        spendlens export report-1            # Download a report as CSV

    \b
    Examples with options:
        spendlens -t tenant-2 -c NGN kpis
        spendlens -o json --seed 42 breakdown region
    """
    setup_logging(log_level)
    if tenant != ALL_TENANTS and get_tenant(tenant) is None:
        fail(f"Unknown tenant '{tenant}'")

    ctx.ensure_object(dict)
    ctx.obj["tenant"] = tenant
    ctx.obj["currency"] = Currency(currency)
    ctx.obj["rng"] = random.Random(seed) if seed is not None else None
    ctx.obj["output"] = output


# Register commands
cli.add_command(costs.kpis)
cli.add_command(costs.trend)
cli.add_command(costs.breakdown)
cli.add_command(tenants.hierarchy)
cli.add_command(tenants.tenants)
cli.add_command(recommendations.recommendations)
cli.add_command(reports.export)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
