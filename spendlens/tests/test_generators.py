"""Tests for the synthetic data generators."""

import random
from datetime import date, datetime, timedelta

import pytest

from spendlens.generators import (
    RECOMMENDATION_CATALOG,
    REGION_BASELINES,
    SERVICE_BASELINES,
    days_from_preset,
    generate_cost_trend,
    generate_kpis,
    generate_recommendations,
    generate_region_breakdown,
    generate_resources,
    generate_service_breakdown,
    generate_tenant_summaries,
)
from spendlens.models import DateRangePreset, ResourceStatus, Service
from spendlens.randomness import SequenceRandom
from spendlens.rollup import budget_utilization

# A Wednesday
TODAY = date(2024, 1, 10)


def midpoint():
    """Random source whose jitter is always zero."""
    return SequenceRandom([0.5])


class TestCostTrend:
    """Tests for generate_cost_trend()."""

    def test_length_and_order(self):
        """History plus seven forecast days, strictly ascending by date."""
        points = generate_cost_trend("all", 30, rng=random.Random(1), today=TODAY)
        assert len(points) == 37

        dates = [date.fromisoformat(p.date) for p in points]
        assert all(b - a == timedelta(days=1) for a, b in zip(dates, dates[1:]))
        assert dates[29] == TODAY

    def test_history_and_forecast_shape(self):
        points = generate_cost_trend("all", 14, rng=random.Random(2), today=TODAY)
        history, forecast = points[:14], points[14:]

        assert all(p.forecast is None and p.amount >= 0 for p in history)
        assert all(p.amount == 0 and p.forecast >= 0.01 for p in forecast)

    def test_midpoint_values(self):
        """Without noise the amount is base plus linear growth."""
        points = generate_cost_trend("all", 3, rng=midpoint(), today=TODAY)
        assert points[0].amount == pytest.approx(59_240.0)
        assert points[2].amount == pytest.approx(59_240.0 + 2 * 118.48)
        assert points[3].forecast == pytest.approx(points[2].amount + 118.48)

    def test_weekend_discount(self):
        sunday = date(2024, 1, 7)
        points = generate_cost_trend("all", 1, rng=midpoint(), today=sunday)
        assert points[0].amount == pytest.approx(59_240.0 * 0.85)

    def test_single_tenant_scale(self):
        """A single tenant is a fixed share of the aggregate."""
        everyone = generate_cost_trend("all", 10, rng=midpoint(), today=TODAY)
        tenant = generate_cost_trend("tenant-3", 10, rng=midpoint(), today=TODAY)
        for total, share in zip(everyone[:10], tenant[:10]):
            assert share.amount == pytest.approx(total.amount * 0.15, abs=0.02)

    def test_invalid_period(self):
        with pytest.raises(ValueError, match="period_days"):
            generate_cost_trend("all", 0)


class TestBreakdowns:
    """Tests for service and region breakdowns."""

    @pytest.mark.parametrize("seed", [1, 2, 3, 42])
    def test_service_percentages_sum_to_100(self, seed):
        rows = generate_service_breakdown("all", 30, rng=random.Random(seed))
        assert round(sum(r.percentage for r in rows), 6) == 100.0
        assert len(rows) == len(SERVICE_BASELINES)

    @pytest.mark.parametrize("seed", [1, 2, 3, 42])
    def test_region_percentages_sum_to_100(self, seed):
        rows = generate_region_breakdown("tenant-5", 7, rng=random.Random(seed))
        assert round(sum(r.percentage for r in rows), 6) == 100.0
        assert len(rows) == len(REGION_BASELINES)

    def test_sorted_by_cost(self):
        rows = generate_service_breakdown("all", 30, rng=random.Random(5))
        costs = [r.cost for r in rows]
        assert costs == sorted(costs, reverse=True)

    def test_midpoint_values(self):
        rows = generate_service_breakdown("all", 30, rng=midpoint())
        assert rows[0].service == Service.ECS
        assert rows[0].cost == pytest.approx(420_000.0)
        assert rows[0].resource_count == 180
        assert rows[0].trend == pytest.approx(2.5)

    def test_tenant_scale(self):
        rows = generate_service_breakdown("tenant-3", 30, rng=midpoint())
        assert rows[0].cost == pytest.approx(63_000.0)

    def test_cost_floor(self):
        """Tiny scaled costs are lifted to the floor."""
        rows = generate_service_breakdown("tenant-3", 1, rng=midpoint())
        swr = next(r for r in rows if r.service == Service.SWR)
        assert swr.cost == 100.0
        assert all(r.cost >= 100.0 and r.resource_count >= 1 for r in rows)

    def test_invalid_period(self):
        with pytest.raises(ValueError):
            generate_region_breakdown("all", 0)


class TestKPIs:
    """Tests for generate_kpis()."""

    def test_midpoint_values(self):
        kpis = generate_kpis("all", 30, rng=midpoint())
        assert kpis.total_spend == pytest.approx(1_750_000.0)
        assert kpis.previous_spend == pytest.approx(1_610_000.0)
        assert kpis.spend_growth_rate == 8.7
        assert kpis.total_budget == 2_300_000.0
        assert kpis.budget_used == 76.1
        assert kpis.active_resources == 875
        assert kpis.optimization_opportunities == 28
        assert kpis.average_efficiency == 80.0
        assert kpis.cost_per_resource == 2000.0

    def test_budget_from_registry(self):
        kpis = generate_kpis("tenant-1", 30, rng=random.Random(3))
        assert kpis.total_budget == 250_000.0
        assert kpis.budget_used == budget_utilization(kpis.total_spend, 250_000.0)

    def test_budget_utilization_example(self):
        assert budget_utilization(100_000, 250_000) == 40.0

    def test_unknown_tenant_uses_default_budget(self):
        kpis = generate_kpis("tenant-99", 30, rng=random.Random(3))
        assert kpis.total_budget == 200_000.0

    def test_budget_prorated_by_period(self):
        kpis = generate_kpis("tenant-2", 15, rng=random.Random(3))
        assert kpis.total_budget == 250_000.0

    def test_tenant_scale(self):
        everyone = generate_kpis("all", 30, rng=midpoint())
        tenant = generate_kpis("tenant-1", 30, rng=midpoint())
        assert tenant.total_spend == pytest.approx(everyone.total_spend * 0.15)
        assert tenant.budget_used == 105.0

    def test_invalid_period(self):
        with pytest.raises(ValueError):
            generate_kpis("all", -1)


class TestResources:
    """Tests for generate_resources()."""

    def test_counts(self):
        assert len(generate_resources("all", rng=random.Random(1))) == 50
        assert len(generate_resources("tenant-4", rng=random.Random(1))) == 15

    def test_single_tenant_ownership(self):
        resources = generate_resources("tenant-4", rng=random.Random(1))
        assert all(r.tenant_id == "tenant-4" for r in resources)
        assert len({r.id for r in resources}) == 15

    def test_owners_cycle_for_all(self):
        resources = generate_resources("all", rng=random.Random(1))
        assert resources[0].tenant_id == "tenant-1"
        assert resources[7].tenant_id == "tenant-8"
        assert resources[8].tenant_id == "tenant-1"

    def test_midpoint_values(self):
        now = datetime(2024, 1, 10, 12, 0)
        resource = generate_resources("tenant-1", rng=midpoint(), now=now)[0]
        assert resource.id == "tenant-1-resource-1"
        assert resource.name == "dcs-prod-01"
        assert resource.service == Service.DCS
        assert resource.status == ResourceStatus.RUNNING
        assert resource.cpu_utilization == 50
        assert resource.monthly_cost == pytest.approx(1275.0)
        assert resource.created_at == now - timedelta(days=30)

    def test_utilization_bounds(self):
        for r in generate_resources("all", rng=random.Random(9)):
            for value in (r.cpu_utilization, r.memory_utilization, r.network_utilization, r.disk_utilization):
                assert 0 <= value <= 100


class TestRecommendations:
    """Tests for generate_recommendations()."""

    def test_all_tenants(self):
        recs = generate_recommendations("all")
        assert [r.id for r in recs] == [f"rec-{i}" for i in range(1, 11)]
        assert recs[2].tenant_id == "tenant-3"

    def test_single_tenant_relabelled(self):
        recs = generate_recommendations("tenant-3")
        assert len(recs) == 5
        assert all(r.tenant_id == "tenant-3" for r in recs)

    def test_catalog_not_mutated(self):
        generate_recommendations("tenant-6")
        assert RECOMMENDATION_CATALOG[0].tenant_id == "tenant-1"


class TestSummaries:
    """Tests for generate_tenant_summaries() and presets."""

    def test_one_row_per_tenant(self):
        summaries = generate_tenant_summaries(rng=midpoint())
        assert len(summaries) == 8
        assert all(s.top_service == Service.ECS for s in summaries)
        assert all(s.recommendation_count == 5 for s in summaries)

    @pytest.mark.parametrize("preset,expected", [
        (DateRangePreset.LAST_7_DAYS, 7),
        (DateRangePreset.LAST_30_DAYS, 30),
        (DateRangePreset.LAST_90_DAYS, 90),
        (DateRangePreset.THIS_MONTH, 15),
        (DateRangePreset.LAST_MONTH, 29),
        (DateRangePreset.CUSTOM, 30),
    ])
    def test_days_from_preset(self, preset, expected):
        assert days_from_preset(preset, today=date(2024, 3, 15)) == expected

    def test_days_from_preset_accepts_strings(self):
        assert days_from_preset("last90days") == 90

    @pytest.mark.parametrize("preset", ["bogus", "", "LAST7DAYS"])
    def test_unknown_preset_covers_30_days(self, preset):
        assert days_from_preset(preset, today=date(2024, 3, 15)) == 30
