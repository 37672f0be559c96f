"""Synthetic cost, resource and recommendation generators.

Every call recomputes from scratch and returns freshly allocated models.
Randomness is drawn only from the ``rng`` argument (or the shared source),
so callers needing repeatable output inject ``random.Random(seed)`` or a
``SequenceRandom``.
"""

import logging
from collections.abc import Sequence
from datetime import date, datetime, timedelta
from typing import Optional, TypeVar

from . import ALL_TENANTS
from .config import config
from .models import (
    CostTrendPoint,
    DashboardKPIs,
    DateRangePreset,
    Effort,
    Impact,
    Recommendation,
    RecommendationStatus,
    RecommendationType,
    Region,
    RegionBreakdown,
    Resource,
    ResourceStatus,
    Service,
    ServiceBreakdown,
    Tenant,
    TenantSummary,
)
from .randomness import RandomSource, choice, jitter, randint, resolve, uniform
from .rollup import allocate_percentages, budget_utilization
from .tenants import TENANTS, tenant_budget

logger = logging.getLogger(__name__)

K = TypeVar("K")

# Aggregate monthly cost (USD) and resource count per service
SERVICE_BASELINES: dict[Service, tuple[float, int]] = {
    Service.ECS: (420_000.0, 180),
    Service.RDS: (300_000.0, 95),
    Service.OBS: (160_000.0, 60),
    Service.EVS: (120_000.0, 140),
    Service.ELB: (110_000.0, 40),
    Service.VPC: (65_000.0, 35),
    Service.CDN: (110_000.0, 20),
    Service.NAT: (45_000.0, 18),
    Service.WAF: (95_000.0, 12),
    Service.DCS: (95_000.0, 30),
    Service.DDS: (40_000.0, 14),
    Service.GAUSSDB: (90_000.0, 16),
    Service.FUNCTIONGRAPH: (40_000.0, 45),
    Service.APIG: (45_000.0, 15),
    Service.SMN: (18_000.0, 10),
    Service.CTS: (20_000.0, 8),
    Service.CCE: (60_000.0, 25),
    Service.SWR: (8_000.0, 6),
}

# Aggregate monthly cost (USD) and resource count per region
REGION_BASELINES: dict[Region, tuple[float, int]] = {
    Region.AF_SOUTH_1: (1_220_000.0, 600),
    Region.EU_WEST_0: (270_000.0, 130),
    Region.AP_SOUTHEAST_1: (170_000.0, 80),
    Region.AP_SOUTHEAST_3: (75_000.0, 40),
    Region.ME_EAST_1: (25_000.0, 12),
    Region.AP_SOUTHEAST_2: (12_000.0, 6),
    Region.CN_NORTH_4: (8_000.0, 5),
    Region.CN_EAST_3: (5_000.0, 4),
}

INSTANCE_TYPES: dict[Service, str] = {
    Service.ECS: "s6.xlarge.4",
    Service.RDS: "mysql.x1.large.4",
    Service.DCS: "redis.ha.xu1.large.r2.8",
    Service.GAUSSDB: "gaussdb.opengauss.ee.dn.m6.2xlarge.8",
    Service.CCE: "cce.s2.small",
}

ENVIRONMENTS = ("prod", "staging", "dev", "test", "qa")

RECOMMENDATION_CATALOG: tuple[Recommendation, ...] = (
    Recommendation(
        id="rec-1",
        tenant_id="tenant-1",
        type=RecommendationType.RIGHTSIZING,
        title="Downsize ECS Instance ecs-prod-web-01",
        description=(
            "This instance has averaged 12% CPU utilization over the past 30 days. "
            "Consider downsizing from s6.xlarge.4 to s6.large.2 to save costs."
        ),
        resource_id="ecs-prod-web-01",
        resource_name="ecs-prod-web-01",
        service=Service.ECS,
        current_cost=458.50,
        projected_savings=183.40,
        impact=Impact.HIGH,
        effort=Effort.EASY,
    ),
    Recommendation(
        id="rec-2",
        tenant_id="tenant-2",
        type=RecommendationType.IDLE_RESOURCE,
        title="Terminate Idle RDS Instance rds-staging-db",
        description=(
            "This RDS instance has had zero connections for 21 days. "
            "Consider terminating or snapshotting and removing."
        ),
        resource_id="rds-staging-db",
        resource_name="rds-staging-db",
        service=Service.RDS,
        current_cost=324.00,
        projected_savings=324.00,
        impact=Impact.HIGH,
        effort=Effort.EASY,
    ),
    Recommendation(
        id="rec-3",
        tenant_id="tenant-3",
        type=RecommendationType.RESERVED_INSTANCE,
        title="Purchase Reserved Instance for ECS Cluster",
        description=(
            "Your ECS cluster has stable usage patterns. Purchasing 1-year reserved "
            "instances could save 35% on compute costs."
        ),
        resource_id="ecs-cluster-prod",
        resource_name="Production ECS Cluster",
        service=Service.ECS,
        current_cost=2840.00,
        projected_savings=994.00,
        impact=Impact.HIGH,
        effort=Effort.MODERATE,
    ),
    Recommendation(
        id="rec-4",
        tenant_id="tenant-4",
        type=RecommendationType.STORAGE_OPTIMIZATION,
        title="Move Cold Data to OBS Standard-IA",
        description=(
            "Analysis shows 2.4TB of data in OBS Standard that hasn't been accessed in "
            "90+ days. Moving to Standard-IA could reduce costs by 40%."
        ),
        resource_id="obs-bucket-archive",
        resource_name="obs-bucket-archive",
        service=Service.OBS,
        current_cost=156.00,
        projected_savings=62.40,
        impact=Impact.MEDIUM,
        effort=Effort.EASY,
        status=RecommendationStatus.IN_PROGRESS,
    ),
    Recommendation(
        id="rec-5",
        tenant_id="tenant-5",
        type=RecommendationType.NETWORK_OPTIMIZATION,
        title="Optimize CDN Cache Rules",
        description=(
            "Your CDN has a 45% cache hit ratio. Optimizing cache rules could improve "
            "this to 85% and reduce origin traffic costs."
        ),
        resource_id="cdn-domain-main",
        resource_name="cdn-domain-main",
        service=Service.CDN,
        current_cost=890.00,
        projected_savings=356.00,
        impact=Impact.MEDIUM,
        effort=Effort.MODERATE,
    ),
    Recommendation(
        id="rec-6",
        tenant_id="tenant-6",
        type=RecommendationType.DATABASE_TUNING,
        title="Enable RDS Read Replicas",
        description=(
            "High read workload detected on primary RDS. Adding read replicas would "
            "improve performance and enable smaller primary instance."
        ),
        resource_id="rds-prod-primary",
        resource_name="rds-prod-primary",
        service=Service.RDS,
        current_cost=1240.00,
        projected_savings=372.00,
        impact=Impact.HIGH,
        effort=Effort.COMPLEX,
    ),
    Recommendation(
        id="rec-7",
        tenant_id="tenant-7",
        type=RecommendationType.IDLE_RESOURCE,
        title="Delete Unattached EVS Volumes",
        description=(
            "8 EVS volumes totaling 1.6TB are not attached to any instance. "
            "Delete or snapshot these to eliminate waste."
        ),
        resource_id="evs-unattached-group",
        resource_name="Unattached EVS Volumes",
        service=Service.EVS,
        current_cost=128.00,
        projected_savings=128.00,
        impact=Impact.MEDIUM,
        effort=Effort.EASY,
    ),
    Recommendation(
        id="rec-8",
        tenant_id="tenant-8",
        type=RecommendationType.RIGHTSIZING,
        title="Scale Down DCS Instance",
        description=(
            "Redis cache memory utilization averages 18%. "
            "Consider scaling from 16GB to 8GB instance."
        ),
        resource_id="dcs-redis-prod",
        resource_name="dcs-redis-prod",
        service=Service.DCS,
        current_cost=385.00,
        projected_savings=192.50,
        impact=Impact.MEDIUM,
        effort=Effort.EASY,
    ),
    Recommendation(
        id="rec-9",
        tenant_id="tenant-1",
        type=RecommendationType.RESERVED_INSTANCE,
        title="GaussDB Reserved Capacity",
        description=(
            "Your GaussDB usage has been consistent. "
            "Reserved capacity purchase could yield 25% savings."
        ),
        resource_id="gaussdb-cluster",
        resource_name="gaussdb-cluster",
        service=Service.GAUSSDB,
        current_cost=2100.00,
        projected_savings=525.00,
        impact=Impact.HIGH,
        effort=Effort.MODERATE,
    ),
    Recommendation(
        id="rec-10",
        tenant_id="tenant-2",
        type=RecommendationType.NETWORK_OPTIMIZATION,
        title="Consolidate NAT Gateways",
        description=(
            "Multiple NAT gateways detected in same VPC. "
            "Consolidating to single gateway could reduce costs."
        ),
        resource_id="nat-gateway-group",
        resource_name="VPC NAT Gateways",
        service=Service.NAT,
        current_cost=245.00,
        projected_savings=122.50,
        impact=Impact.LOW,
        effort=Effort.MODERATE,
    ),
)


def selector_scale(tenant_id: str) -> float:
    """Scale applied to aggregate figures: 1 for all tenants, a fixed share otherwise."""
    return 1.0 if tenant_id == ALL_TENANTS else config.generation.tenant_scale


def days_from_preset(preset: DateRangePreset, today: Optional[date] = None) -> int:
    """Number of days covered by a date range preset; unknown presets cover 30."""
    today = today or date.today()
    try:
        preset = DateRangePreset(preset)
    except ValueError:
        logger.debug(f"Unknown date range preset {preset!r}, using 30 days")
        return 30
    if preset == DateRangePreset.LAST_7_DAYS:
        return 7
    if preset == DateRangePreset.LAST_90_DAYS:
        return 90
    if preset == DateRangePreset.THIS_MONTH:
        return today.day
    if preset == DateRangePreset.LAST_MONTH:
        return (today.replace(day=1) - timedelta(days=1)).day
    return 30


# =============================================================================
# Cost Trend
# =============================================================================

def generate_cost_trend(
    tenant_id: str = ALL_TENANTS,
    period_days: int = 30,
    rng: Optional[RandomSource] = None,
    today: Optional[date] = None,
) -> list[CostTrendPoint]:
    """Daily spend ending today followed by a short forecast.

    Historical amounts are ``base + noise + growth * k`` with a weekend
    discount, floored at zero. Forecast points extrapolate from the last
    actual amount and carry ``amount == 0``.

    Args:
        tenant_id: Tenant id or ``"all"``
        period_days: Number of historical days
        rng: Random source
        today: Last historical day, defaults to the current date

    Returns:
        ``period_days + forecast_days`` points in ascending date order
    """
    if period_days < 1:
        raise ValueError(f"period_days must be at least 1, got {period_days}")

    gen = config.generation
    rng = resolve(rng)
    today = today or date.today()

    base = gen.daily_base * selector_scale(tenant_id)
    noise = base * gen.daily_noise_ratio
    growth = base * gen.daily_growth_ratio

    points: list[CostTrendPoint] = []
    for k in range(period_days):
        day = today - timedelta(days=period_days - 1 - k)
        amount = base + jitter(rng, noise) + growth * k
        if day.weekday() >= 5:
            amount *= gen.weekend_factor
        points.append(CostTrendPoint(date=day.isoformat(), amount=round(max(0.0, amount), 2)))

    last_actual = points[-1].amount
    for i in range(1, gen.forecast_days + 1):
        day = today + timedelta(days=i)
        forecast = last_actual + growth * i + jitter(rng, noise)
        points.append(CostTrendPoint(
            date=day.isoformat(),
            amount=0.0,
            forecast=max(round(forecast, 2), 0.01),
        ))

    logger.debug(f"Generated {len(points)} trend points for {tenant_id}")
    return points


# =============================================================================
# Breakdowns
# =============================================================================

def _breakdown_rows(
    baselines: dict[K, tuple[float, int]],
    tenant_id: str,
    period_days: int,
    rng: RandomSource,
) -> list[tuple[K, float, float, float, int]]:
    """Noisy cost, percentage, trend and resource count per catalog key."""
    gen = config.generation
    scale = selector_scale(tenant_id)
    period_factor = period_days / 30

    keys = list(baselines)
    costs = []
    for key in keys:
        baseline_cost, _ = baselines[key]
        cost = baseline_cost * scale * period_factor * (1 + jitter(rng, gen.breakdown_noise_ratio))
        costs.append(round(max(cost, gen.breakdown_floor), 2))

    percentages = allocate_percentages(costs)

    rows = []
    for key, cost, percentage in zip(keys, costs, percentages):
        _, baseline_count = baselines[key]
        trend = round(uniform(rng, *gen.trend_band), 1)
        count = max(1, round(baseline_count * scale * uniform(rng, 0.85, 1.15)))
        rows.append((key, cost, percentage, trend, count))

    rows.sort(key=lambda row: row[1], reverse=True)
    return rows


def generate_service_breakdown(
    tenant_id: str = ALL_TENANTS,
    period_days: int = 30,
    rng: Optional[RandomSource] = None,
) -> list[ServiceBreakdown]:
    """Cost by service, sorted by cost descending; percentages sum to 100."""
    if period_days < 1:
        raise ValueError(f"period_days must be at least 1, got {period_days}")
    rows = _breakdown_rows(SERVICE_BASELINES, tenant_id, period_days, resolve(rng))
    return [
        ServiceBreakdown(
            service=service,
            cost=cost,
            percentage=percentage,
            trend=trend,
            resource_count=count,
        )
        for service, cost, percentage, trend, count in rows
    ]


def generate_region_breakdown(
    tenant_id: str = ALL_TENANTS,
    period_days: int = 30,
    rng: Optional[RandomSource] = None,
) -> list[RegionBreakdown]:
    """Cost by region, sorted by cost descending; percentages sum to 100."""
    if period_days < 1:
        raise ValueError(f"period_days must be at least 1, got {period_days}")
    rows = _breakdown_rows(REGION_BASELINES, tenant_id, period_days, resolve(rng))
    return [
        RegionBreakdown(
            region=region,
            cost=cost,
            percentage=percentage,
            trend=trend,
            resource_count=count,
        )
        for region, cost, percentage, trend, count in rows
    ]


# =============================================================================
# KPIs
# =============================================================================

def generate_kpis(
    tenant_id: str = ALL_TENANTS,
    period_days: int = 30,
    rng: Optional[RandomSource] = None,
    registry: Sequence[Tenant] = TENANTS,
) -> DashboardKPIs:
    """Dashboard KPI snapshot.

    Spend figures and the budget are scaled to the period; the budget comes
    from the registry, falling back to the default budget for unknown ids.
    Resource, optimization and efficiency figures are drawn from fixed bands
    and do not agree with ``generate_resources`` output; see
    ``rollup.reconcile_kpis``.
    """
    if period_days < 1:
        raise ValueError(f"period_days must be at least 1, got {period_days}")

    gen = config.generation
    rng = resolve(rng)
    scale = selector_scale(tenant_id)
    period_factor = period_days / 30

    total_spend = round(uniform(rng, *gen.spend_band) * scale * period_factor, 2)
    previous_spend = round(total_spend * uniform(rng, *gen.previous_spend_band), 2)
    spend_growth_rate = round((total_spend - previous_spend) / previous_spend * 100, 1)

    if tenant_id == ALL_TENANTS:
        monthly_budget = gen.all_tenants_budget
    else:
        monthly_budget = tenant_budget(tenant_id, registry)
    total_budget = round(monthly_budget * period_factor, 2)

    active_resources = max(1, round(randint(rng, *gen.active_resources_band) * scale))
    optimization_opportunities = max(1, round(randint(rng, *gen.optimization_band) * scale))
    potential_savings = round(total_spend * uniform(rng, *gen.savings_ratio_band), 2)
    average_efficiency = round(uniform(rng, *gen.efficiency_band), 1)

    return DashboardKPIs(
        total_spend=total_spend,
        previous_spend=previous_spend,
        spend_growth_rate=spend_growth_rate,
        budget_used=budget_utilization(total_spend, total_budget),
        total_budget=total_budget,
        active_resources=active_resources,
        optimization_opportunities=optimization_opportunities,
        potential_savings=potential_savings,
        average_efficiency=average_efficiency,
        cost_per_resource=round(total_spend / active_resources, 2),
    )


# =============================================================================
# Resources
# =============================================================================

def generate_resources(
    tenant_id: str = ALL_TENANTS,
    rng: Optional[RandomSource] = None,
    now: Optional[datetime] = None,
    registry: Sequence[Tenant] = TENANTS,
) -> list[Resource]:
    """Synthetic resource inventory with independent random utilization."""
    gen = config.generation
    rng = resolve(rng)
    now = now or datetime.utcnow()

    if tenant_id == ALL_TENANTS:
        count = gen.resources_all
        owners = [tenant.id for tenant in registry]
    else:
        count = gen.resources_single
        owners = [tenant_id]

    services = list(SERVICE_BASELINES)
    regions = list(REGION_BASELINES)

    resources = []
    for i in range(count):
        owner = owners[i % len(owners)]
        service = choice(rng, services)
        region = choice(rng, regions)
        running = rng.random() < gen.running_probability
        resources.append(Resource(
            id=f"{owner}-resource-{i + 1}",
            tenant_id=owner,
            name=f"{service.value.lower()}-{ENVIRONMENTS[i % len(ENVIRONMENTS)]}-{i + 1:02d}",
            service=service,
            region=region,
            type=INSTANCE_TYPES.get(service, "standard"),
            status=ResourceStatus.RUNNING if running else ResourceStatus.STOPPED,
            cpu_utilization=round(uniform(rng, 0, 100)),
            memory_utilization=round(uniform(rng, 0, 100)),
            network_utilization=round(uniform(rng, 0, 100)),
            disk_utilization=round(uniform(rng, 0, 100)),
            monthly_cost=round(uniform(rng, *gen.monthly_cost_band), 2),
            created_at=now - timedelta(days=i * 2 + 30),
        ))

    logger.debug(f"Generated {len(resources)} resources for {tenant_id}")
    return resources


# =============================================================================
# Recommendations & Summaries
# =============================================================================

def generate_recommendations(
    tenant_id: str = ALL_TENANTS,
    catalog: Sequence[Recommendation] = RECOMMENDATION_CATALOG,
) -> list[Recommendation]:
    """Recommendation catalog for a selector.

    All tenants get every entry with its authored tenant. A single tenant
    gets the leading entries relabelled to that tenant, not the entries it
    owns.
    """
    if tenant_id == ALL_TENANTS:
        return [rec.model_copy() for rec in catalog]
    limit = config.generation.recommendations_per_tenant
    return [rec.model_copy(update={"tenant_id": tenant_id}) for rec in catalog[:limit]]


def generate_tenant_summaries(
    rng: Optional[RandomSource] = None,
    registry: Sequence[Tenant] = TENANTS,
) -> list[TenantSummary]:
    """One comparison row per tenant."""
    rng = resolve(rng)
    summaries = []
    for tenant in registry:
        kpis = generate_kpis(tenant.id, rng=rng, registry=registry)
        services = generate_service_breakdown(tenant.id, rng=rng)
        summaries.append(TenantSummary(
            tenant=tenant.model_copy(),
            total_spend=kpis.total_spend,
            budget_usage=kpis.budget_used,
            efficiency_score=tenant.efficiency_score,
            top_service=services[0].service,
            recommendation_count=len(generate_recommendations(tenant.id)),
        ))
    return summaries
