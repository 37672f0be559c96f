"""Tests for the SpendLens CLI."""

import json

import pytest
import yaml
from click.testing import CliRunner

from spendlens.cli.main import cli


@pytest.fixture
def runner():
    return CliRunner()


class TestGlobalOptions:
    """Tests for group-level options."""

    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "breakdown" in result.output

    def test_unknown_tenant(self, runner):
        result = runner.invoke(cli, ["-t", "tenant-404", "kpis"])
        assert result.exit_code == 1
        assert "Unknown tenant" in result.output

    def test_unknown_currency(self, runner):
        result = runner.invoke(cli, ["-c", "XYZ", "kpis"])
        assert result.exit_code == 2


class TestCostCommands:
    """Tests for kpis, trend and breakdown."""

    def test_kpis_json(self, runner):
        result = runner.invoke(cli, ["--seed", "1", "-o", "json", "-t", "tenant-1", "kpis"])
        assert result.exit_code == 0

        data = json.loads(result.output)
        assert data["totalBudget"] == 250_000.0

    def test_kpis_table(self, runner):
        result = runner.invoke(cli, ["-c", "NGN", "kpis"])
        assert result.exit_code == 0
        assert "Total Spend" in result.output
        assert "₦" in result.output

    def test_seed_is_repeatable(self, runner):
        first = runner.invoke(cli, ["--seed", "5", "-o", "json", "trend", "-d", "7"])
        second = runner.invoke(cli, ["--seed", "5", "-o", "json", "trend", "-d", "7"])
        assert first.output == second.output
        assert len(json.loads(first.output)) == 14

    def test_trend_invalid_days(self, runner):
        result = runner.invoke(cli, ["trend", "-d", "0"])
        assert result.exit_code == 2

    def test_range_overrides_days(self, runner):
        result = runner.invoke(cli, ["-o", "json", "trend", "-d", "90", "--range", "last7days"])
        assert result.exit_code == 0
        assert len(json.loads(result.output)) == 14

    def test_invalid_range(self, runner):
        result = runner.invoke(cli, ["kpis", "--range", "bogus"])
        assert result.exit_code == 2

    def test_trend_table_shows_stats(self, runner):
        result = runner.invoke(cli, ["trend", "-r", "last7days"])
        assert result.exit_code == 0
        assert "Peak" in result.output
        assert "Lowest" in result.output

    def test_breakdown_top(self, runner):
        result = runner.invoke(cli, ["-o", "yaml", "breakdown", "region", "--top", "3"])
        assert result.exit_code == 0

        rows = yaml.safe_load(result.output)
        assert len(rows) == 3
        assert rows[0]["cost"] >= rows[1]["cost"] >= rows[2]["cost"]

    def test_breakdown_table(self, runner):
        result = runner.invoke(cli, ["breakdown", "service"])
        assert result.exit_code == 0
        assert "ECS" in result.output

    def test_breakdown_invalid_dimension(self, runner):
        result = runner.invoke(cli, ["breakdown", "zone"])
        assert result.exit_code == 2


class TestTenantCommands:
    """Tests for hierarchy and tenants."""

    def test_hierarchy_requires_tenant(self, runner):
        result = runner.invoke(cli, ["hierarchy"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_hierarchy_json(self, runner):
        result = runner.invoke(cli, ["-t", "tenant-3", "-o", "json", "hierarchy"])
        assert result.exit_code == 0

        root = json.loads(result.output)
        assert root["id"] == "tenant-3-vdc1"
        assert root["budget"] == 180_000

    def test_hierarchy_tree(self, runner):
        result = runner.invoke(cli, ["-t", "tenant-3", "hierarchy"])
        assert result.exit_code == 0
        assert "Flutterwave" in result.output

    def test_tenants(self, runner):
        result = runner.invoke(cli, ["-o", "json", "tenants"])
        assert result.exit_code == 0
        assert len(json.loads(result.output)) == 8

    def test_tenants_table_shows_overview(self, runner):
        result = runner.invoke(cli, ["tenants"])
        assert result.exit_code == 0
        assert "recommendations" in result.output


class TestRecommendationCommands:
    """Tests for recommendations."""

    def test_easy_filter(self, runner):
        result = runner.invoke(cli, ["-o", "json", "recommendations", "--easy"])
        assert result.exit_code == 0

        recs = json.loads(result.output)
        assert [r["id"] for r in recs] == ["rec-1", "rec-2", "rec-4", "rec-7", "rec-8"]

    def test_impact_filter(self, runner):
        result = runner.invoke(cli, ["-t", "tenant-2", "-o", "json", "recommendations", "--impact", "high"])
        recs = json.loads(result.output)
        assert all(r["impact"] == "high" and r["tenantId"] == "tenant-2" for r in recs)

    def test_table(self, runner):
        result = runner.invoke(cli, ["recommendations"])
        assert result.exit_code == 0
        assert "Potential Savings" in result.output


class TestExportCommand:
    """Tests for export."""

    def test_export_writes_csv(self, runner, tmp_path):
        result = runner.invoke(cli, ["export", "report-1", "--dir", str(tmp_path)])
        assert result.exit_code == 0

        files = list(tmp_path.glob("Monthly_Cost_Summary_*.csv"))
        assert len(files) == 1
        assert files[0].read_text(encoding="utf-8").startswith("Report: Monthly Cost Summary\n")

    def test_export_unknown_report(self, runner, tmp_path):
        result = runner.invoke(cli, ["export", "report-404", "--dir", str(tmp_path)])
        assert result.exit_code == 1
        assert "not found" in result.output
