"""Tests for the SpendLens API."""

import pytest
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from spendlens.app import app


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


class TestHealthEndpoints:
    """Test health check endpoints."""

    def test_health_check(self, client):
        """Test /health endpoint."""
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data

    def test_readiness_check(self, client):
        """Test /ready endpoint."""
        response = client.get("/ready")
        assert response.status_code == 200
        assert response.json() == {"status": "ready"}

    def test_metrics(self, client):
        """Test /metrics exposes request counters."""
        client.get("/health")
        response = client.get("/metrics")
        assert response.status_code == 200
        assert "spendlens_requests_total" in response.text


class TestTenantEndpoints:
    """Test tenant endpoints."""

    def test_list_tenants(self, client):
        """Tenants are serialized with camelCase keys."""
        response = client.get("/tenants")
        assert response.status_code == 200

        data = response.json()
        assert len(data) == 8
        assert data[0]["contactEmail"] == "chidi.okonkwo@dangote.com"
        assert "efficiencyScore" in data[0]

    def test_get_tenant(self, client):
        response = client.get("/tenants/tenant-3")
        assert response.status_code == 200
        assert response.json()["name"] == "Flutterwave"

    def test_unknown_tenant(self, client):
        assert client.get("/tenants/tenant-404").status_code == 404

    def test_hierarchy(self, client):
        response = client.get("/tenants/tenant-1/hierarchy", params={"seed": 7})
        assert response.status_code == 200

        root = response.json()
        assert root["id"] == "tenant-1-vdc1"
        assert root["resources"] == 150
        assert len(root["children"]) == 3
        assert sum(c["resources"] for c in root["children"]) == 150

    def test_hierarchy_unknown_tenant(self, client):
        assert client.get("/tenants/tenant-404/hierarchy").status_code == 404

    def test_summaries(self, client):
        response = client.get("/tenants/summaries", params={"seed": 1})
        assert response.status_code == 200

        data = response.json()
        assert len(data) == 8
        assert "topService" in data[0]

    def test_overview(self, client):
        response = client.get("/tenants/overview", params={"seed": 1})
        assert response.status_code == 200

        data = response.json()
        assert data["totalRecommendations"] == 40
        assert data["totalSpend"] > 0
        assert 0 < data["averageEfficiency"] <= 100


class TestCostEndpoints:
    """Test cost endpoints."""

    def test_trend(self, client):
        response = client.get("/costs/trend", params={"days": 7, "seed": 1})
        assert response.status_code == 200

        data = response.json()
        assert len(data) == 14
        assert all(p["forecast"] is None for p in data[:7])
        assert all(p["forecast"] is not None and p["amount"] == 0 for p in data[7:])

    @pytest.mark.parametrize("days", [0, 366])
    def test_trend_invalid_days(self, client, days):
        assert client.get("/costs/trend", params={"days": days}).status_code == 422

    def test_trend_preset_overrides_days(self, client):
        response = client.get("/costs/trend", params={"preset": "last7days", "days": 90, "seed": 1})
        assert response.status_code == 200
        assert len(response.json()) == 14

    def test_unknown_preset(self, client):
        assert client.get("/costs/trend", params={"preset": "bogus"}).status_code == 422

    def test_stats(self, client):
        response = client.get("/costs/stats", params={"preset": "last7days", "seed": 2})
        assert response.status_code == 200

        data = response.json()
        assert data["dailyAverage"] == pytest.approx(data["totalSpend"] / 7, abs=0.01)
        assert 0 < data["lowestDay"] <= data["peakDay"]

    def test_services(self, client):
        response = client.get("/costs/services", params={"seed": 3})
        assert response.status_code == 200

        data = response.json()
        assert len(data) == 18
        assert sum(r["percentage"] for r in data) == pytest.approx(100.0)
        assert "resourceCount" in data[0]

    def test_regions(self, client):
        response = client.get("/costs/regions", params={"tenant_id": "tenant-2", "days": 90})
        assert response.status_code == 200
        assert len(response.json()) == 8

    def test_kpis(self, client):
        response = client.get("/kpis", params={"tenant_id": "tenant-1"})
        assert response.status_code == 200
        assert response.json()["totalBudget"] == 250_000.0

    def test_seed_is_repeatable(self, client):
        first = client.get("/kpis", params={"seed": 42}).json()
        second = client.get("/kpis", params={"seed": 42}).json()
        assert first == second


class TestResourceEndpoints:
    """Test resource and recommendation endpoints."""

    def test_resources(self, client):
        response = client.get("/resources", params={"tenant_id": "tenant-2"})
        assert response.status_code == 200

        data = response.json()
        assert len(data) == 15
        assert all(r["tenantId"] == "tenant-2" for r in data)

    def test_resource_stats(self, client):
        response = client.get("/resources/stats", params={"tenant_id": "tenant-2", "seed": 4})
        assert response.status_code == 200

        data = response.json()
        assert data["running"] + data["stopped"] == 15
        assert 0 <= data["averageCpu"] <= 100
        assert 0 <= data["averageMemory"] <= 100

    def test_recommendations(self, client):
        assert len(client.get("/recommendations").json()) == 10

        data = client.get("/recommendations", params={"tenant_id": "tenant-3"}).json()
        assert len(data) == 5
        assert all(r["tenantId"] == "tenant-3" for r in data)


class TestCurrencyAndReports:
    """Test currency and report endpoints."""

    def test_convert(self, client):
        response = client.get("/currency/convert", params={"amount": 1234.5})
        assert response.status_code == 200

        data = response.json()
        assert data["formatted"] == "$1,234.50"
        assert data["compact"] == "$1.2K"

    def test_convert_whole_units(self, client):
        data = client.get("/currency/convert", params={"amount": 10, "currency": "JPY"}).json()
        assert data["converted"] == 1495.0
        assert data["formatted"] == "¥1,495"

    def test_convert_unknown_currency(self, client):
        response = client.get("/currency/convert", params={"amount": 10, "currency": "XYZ"})
        assert response.status_code == 422

    def test_export_report(self, client):
        response = client.get("/reports/report-1/export")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert 'filename="Monthly_Cost_Summary_' in response.headers["content-disposition"]
        assert response.text.startswith("Report: Monthly Cost Summary\nType: Cost Analysis\n")
        assert response.text.endswith('"Other","$97,000","52%"')

    def test_export_unknown_report(self, client):
        assert client.get("/reports/report-404/export").status_code == 404


def requests_total(endpoint, status):
    return REGISTRY.get_sample_value(
        "spendlens_requests_total",
        {"endpoint": endpoint, "method": "GET", "status": status},
    ) or 0.0


class TestErrorHandling:
    """Test rejected and failing requests."""

    @pytest.mark.parametrize("amount", ["inf", "-inf", "nan"])
    def test_convert_rejects_non_finite_amounts(self, client, amount):
        response = client.get("/currency/convert", params={"amount": amount})
        assert response.status_code == 422

    def test_unexpected_failure_returns_500(self, client, monkeypatch):
        """A crash while formatting is logged and counted as a 500, not a 200."""
        def broken(*args, **kwargs):
            raise ArithmeticError("formatting failed")

        monkeypatch.setattr("spendlens.app.format_currency", broken)
        ok_before = requests_total("/currency/convert", "200")
        failed_before = requests_total("/currency/convert", "500")

        response = client.get("/currency/convert", params={"amount": 10})
        assert response.status_code == 500
        assert response.json()["detail"] == "formatting failed"
        assert requests_total("/currency/convert", "200") == ok_before
        assert requests_total("/currency/convert", "500") == failed_before + 1

    def test_generator_failure_returns_500(self, client, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("generator failed")

        monkeypatch.setattr("spendlens.app.generate_kpis", broken)
        response = client.get("/kpis")
        assert response.status_code == 500
        assert 'endpoint="/kpis",method="GET",status="500"' in client.get("/metrics").text
