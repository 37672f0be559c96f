"""Summary statistics derived from generator output for display."""

import logging
import math
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Optional

from .config import config
from .models import (
    Budget,
    BudgetOverview,
    BudgetPeriod,
    BudgetRow,
    BudgetStatus,
    CostTrendPoint,
    DashboardKPIs,
    Effort,
    Impact,
    Recommendation,
    RecommendationStats,
    RecommendationStatus,
    Resource,
    ResourceStats,
    ResourceStatus,
    Tenant,
    TenantOverview,
    TenantSummary,
    TrendStats,
)

logger = logging.getLogger(__name__)

# Below this CPU and memory utilization a resource counts as underutilized
UNDERUTILIZED_THRESHOLD = 20.0

AT_RISK_THRESHOLD = 80.0


@dataclass
class GroupTotals:
    """Count and summed value for one group."""

    count: int = 0
    total: float = 0.0


def _value(item: Any, field: str) -> Any:
    if isinstance(item, dict):
        return item[field]
    return getattr(item, field)


def allocate_percentages(values: Sequence[float], decimals: int = 1) -> list[float]:
    """Shares of ``values`` in percent, rounded so they sum to exactly 100.

    Uses largest-remainder rounding: every share is floored to ``decimals``
    places and the leftover units go to the largest remainders, so each result
    is within one unit of its exact share.
    """
    total = sum(values)
    if not values or total <= 0:
        return [0.0 for _ in values]

    units = 100 * 10 ** decimals
    exact = [value / total * units for value in values]
    floors = [math.floor(share) for share in exact]
    leftover = units - sum(floors)

    by_remainder = sorted(range(len(values)), key=lambda i: exact[i] - floors[i], reverse=True)
    for i in by_remainder[:leftover]:
        floors[i] += 1

    return [round(count / 10 ** decimals, decimals) for count in floors]


def budget_utilization(spend: float, budget: float) -> float:
    """Spend as a percentage of budget, one decimal; zero for an empty budget."""
    if budget <= 0:
        return 0.0
    return round(spend / budget * 100, 1)


def top_n(items: Iterable[Any], field: str, n: int) -> list[Any]:
    """First ``n`` items by ``field``, largest first."""
    return sorted(items, key=lambda item: _value(item, field), reverse=True)[:max(n, 0)]


def percent_of_max(value: float, values: Iterable[float]) -> float:
    """``value`` relative to the largest of ``values``, in percent.

    Not clamped: a value above the maximum yields more than 100.
    """
    peak = max(values, default=0.0)
    if peak <= 0:
        return 0.0
    return value / peak * 100


def clamp_percent(percentage: float) -> float:
    """Clamp to [0, 100] for progress bars."""
    return min(100.0, max(0.0, percentage))


def budget_status(percentage: float) -> BudgetStatus:
    if percentage > 100:
        return BudgetStatus.OVER_BUDGET
    if percentage > AT_RISK_THRESHOLD:
        return BudgetStatus.AT_RISK
    return BudgetStatus.ON_TRACK


def group_by(
    items: Iterable[Any],
    key: str,
    value_field: Optional[str] = None,
    where: Optional[Callable[[Any], bool]] = None,
) -> dict[Any, GroupTotals]:
    """Count items per ``key`` and sum ``value_field``.

    Every item is counted; only items passing ``where`` contribute to the
    total (the recommendations view counts all types but sums savings of new
    items only).
    """
    groups: dict[Any, GroupTotals] = {}
    for item in items:
        totals = groups.setdefault(_value(item, key), GroupTotals())
        totals.count += 1
        if value_field is not None and (where is None or where(item)):
            totals.total += _value(item, value_field)
    return groups


# =============================================================================
# View Summaries
# =============================================================================

def recommendation_stats(recommendations: Sequence[Recommendation]) -> RecommendationStats:
    """Headline numbers for the recommendations view."""
    new = [r for r in recommendations if r.status == RecommendationStatus.NEW]
    easy = [r for r in new if r.effort == Effort.EASY]
    return RecommendationStats(
        new_count=len(new),
        total_savings=round(sum(r.projected_savings for r in new), 2),
        high_impact=sum(1 for r in new if r.impact == Impact.HIGH),
        easy_wins=len(easy),
        easy_win_savings=round(sum(r.projected_savings for r in easy), 2),
        implemented=sum(1 for r in recommendations if r.status == RecommendationStatus.IMPLEMENTED),
    )


def is_underutilized(resource: Resource) -> bool:
    return (
        resource.cpu_utilization < UNDERUTILIZED_THRESHOLD
        and resource.memory_utilization < UNDERUTILIZED_THRESHOLD
    )


def _mean(values: Sequence[float]) -> float:
    return round(sum(values) / len(values), 1) if values else 0.0


def resource_stats(resources: Sequence[Resource]) -> ResourceStats:
    """Headline numbers for the resource inventory and its utilization heatmap."""
    return ResourceStats(
        running=sum(1 for r in resources if r.status == ResourceStatus.RUNNING),
        stopped=sum(1 for r in resources if r.status == ResourceStatus.STOPPED),
        underutilized=sum(1 for r in resources if is_underutilized(r)),
        total_cost=round(sum(r.monthly_cost for r in resources), 2),
        average_cpu=_mean([r.cpu_utilization for r in resources]),
        average_memory=_mean([r.memory_utilization for r in resources]),
    )


def trend_stats(points: Sequence[CostTrendPoint], total_spend: float, period_days: int) -> TrendStats:
    """Daily average, peak and lowest day of a cost trend.

    The average spreads ``total_spend`` over the period. Peak and lowest are
    taken over historical points with a positive amount, so forecast rows
    never count.
    """
    if period_days < 1:
        raise ValueError(f"period_days must be at least 1, got {period_days}")

    actuals = [p.amount for p in points if p.forecast is None and p.amount > 0]
    return TrendStats(
        total_spend=total_spend,
        daily_average=round(total_spend / period_days, 2),
        peak_day=max(actuals, default=0.0),
        lowest_day=min(actuals, default=0.0),
    )


def tenant_overview(summaries: Sequence[TenantSummary]) -> TenantOverview:
    """Totals across the tenant comparison rows."""
    return TenantOverview(
        total_spend=round(sum(s.total_spend for s in summaries), 2),
        average_efficiency=_mean([s.efficiency_score for s in summaries]),
        total_recommendations=sum(s.recommendation_count for s in summaries),
    )


def budget_rows(
    budgets: Sequence[Budget],
    tenants: Sequence[Tenant],
    spend_for: Callable[[str], float],
    include_defaults: bool = True,
) -> list[BudgetRow]:
    """Join budgets with current spend.

    Tenants without an explicit budget get a default monthly row built from
    their registry budget when ``include_defaults`` is set.

    Args:
        budgets: Explicit budgets
        tenants: Known tenants
        spend_for: Current spend of a tenant id
        include_defaults: Add rows for tenants with no budget

    Returns:
        Explicit rows first, then default rows
    """
    names = {tenant.id: tenant.name for tenant in tenants}
    rows = []
    for budget in budgets:
        spent = spend_for(budget.tenant_id)
        rows.append(_budget_row(
            budget.id, budget.tenant_id, names.get(budget.tenant_id, "Unknown Tenant"),
            budget.name, budget.amount, budget.period, budget.alert_threshold, spent,
        ))

    if include_defaults:
        budgeted = {budget.tenant_id for budget in budgets}
        for tenant in tenants:
            if tenant.id in budgeted:
                continue
            rows.append(_budget_row(
                f"default-{tenant.id}", tenant.id, tenant.name, f"{tenant.name} (Default)",
                tenant.budget, BudgetPeriod.MONTHLY, config.store.default_alert_threshold,
                spend_for(tenant.id), is_default=True,
            ))
    return rows


def _budget_row(
    budget_id: str,
    tenant_id: str,
    tenant_name: str,
    name: str,
    amount: float,
    period: BudgetPeriod,
    alert_threshold: int,
    spent: float,
    is_default: bool = False,
) -> BudgetRow:
    percentage = spent / amount * 100 if amount > 0 else 0.0
    return BudgetRow(
        id=budget_id,
        tenant_id=tenant_id,
        tenant_name=tenant_name,
        name=name,
        amount=amount,
        period=period,
        alert_threshold=alert_threshold,
        spent=spent,
        percentage=round(percentage, 1),
        display_percentage=round(clamp_percent(percentage), 1),
        status=budget_status(percentage),
        is_default=is_default,
    )


def budget_overview(rows: Sequence[BudgetRow]) -> BudgetOverview:
    return BudgetOverview(
        total_budget=round(sum(row.amount for row in rows), 2),
        total_spent=round(sum(row.spent for row in rows), 2),
        over_budget=sum(1 for row in rows if row.status == BudgetStatus.OVER_BUDGET),
        at_risk=sum(1 for row in rows if row.status == BudgetStatus.AT_RISK),
        rows=list(rows),
    )


def reconcile_kpis(
    kpis: DashboardKPIs,
    resources: Sequence[Resource],
    recommendations: Sequence[Recommendation],
) -> DashboardKPIs:
    """Copy of ``kpis`` whose counts agree with a resource and recommendation list.

    Active resources become the running resources, optimization
    opportunities the open recommendations plus underutilized resources,
    average efficiency the mean CPU utilization of running resources. Spend
    and budget figures are kept.
    """
    running = [r for r in resources if r.status == ResourceStatus.RUNNING]
    open_recs = [r for r in recommendations if r.status == RecommendationStatus.NEW]
    active = max(1, len(running))

    if running:
        efficiency = round(sum(r.cpu_utilization for r in running) / len(running), 1)
    else:
        efficiency = 0.0

    logger.debug(f"Reconciled KPIs against {len(resources)} resources")
    return kpis.model_copy(update={
        "active_resources": active,
        "optimization_opportunities": len(open_recs) + sum(1 for r in running if is_underutilized(r)),
        "potential_savings": round(sum(r.projected_savings for r in open_recs), 2),
        "average_efficiency": efficiency,
        "cost_per_resource": round(kpis.total_spend / active, 2),
    })
