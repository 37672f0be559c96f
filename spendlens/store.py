"""Dashboard application state and reducer-style updates.

``AppState`` is an immutable value owned by whoever composes the
application. Every update function takes a state and returns a new one;
nothing here mutates shared data. The async operations fake a remote call
with a fixed delay and cannot be cancelled once started.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from typing import Any, Optional

from . import ALL_TENANTS
from .config import config
from .generators import generate_recommendations
from .models import (
    ApiCredentials,
    Budget,
    BudgetPeriod,
    Currency,
    DateRange,
    DateRangePreset,
    Effort,
    FilterState,
    NotificationSettings,
    ProfileSettings,
    Recommendation,
    RecommendationStatus,
    Region,
    Report,
    ReportSchedule,
    ReportStatus,
    ReportType,
    SecuritySettings,
    Service,
    Settings,
    Tenant,
)
from .tenants import TENANTS

logger = logging.getLogger(__name__)


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def _today() -> str:
    return date.today().isoformat()


def default_budgets() -> tuple[Budget, ...]:
    return (
        Budget(id="budget-1", tenant_id="tenant-1", name="Dangote Monthly Budget",
               amount=250_000, alert_threshold=80, created_at="2024-01-01"),
        Budget(id="budget-2", tenant_id="tenant-2", name="MTN Monthly Budget",
               amount=500_000, alert_threshold=85, created_at="2024-01-01"),
        Budget(id="budget-3", tenant_id="tenant-3", name="Flutterwave Monthly Budget",
               amount=180_000, alert_threshold=75, created_at="2024-01-01"),
    )


def default_reports() -> tuple[Report, ...]:
    return (
        Report(id="report-1", name="Monthly Cost Summary", type=ReportType.COST_ANALYSIS,
               schedule=ReportSchedule.MONTHLY, last_run="2024-01-01"),
        Report(id="report-2", name="Resource Utilization Report", type=ReportType.UTILIZATION,
               schedule=ReportSchedule.WEEKLY, last_run="2024-01-03"),
        Report(id="report-3", name="Optimization Opportunities", type=ReportType.RECOMMENDATIONS,
               schedule=ReportSchedule.DAILY, last_run="2024-01-05"),
        Report(id="report-4", name="Tenant Cost Breakdown", type=ReportType.COST_ALLOCATION,
               schedule=ReportSchedule.MONTHLY, last_run="2024-01-01"),
        Report(id="report-5", name="Budget vs Actual", type=ReportType.BUDGET,
               schedule=ReportSchedule.WEEKLY, last_run="2024-01-04"),
    )


def default_settings() -> Settings:
    return Settings(
        profile=ProfileSettings(first_name="Chidi", last_name="Okonkwo", email="chidi@company.com"),
    )


def default_filters(today: Optional[date] = None) -> FilterState:
    today = today or date.today()
    return FilterState(
        date_range=DateRange(
            preset=DateRangePreset.LAST_30_DAYS,
            start_date=(today - timedelta(days=30)).isoformat(),
            end_date=today.isoformat(),
        ),
    )


@dataclass(frozen=True)
class AppState:
    """Everything the dashboard can change at runtime."""

    tenants: tuple[Tenant, ...] = field(default_factory=lambda: tuple(t.model_copy() for t in TENANTS))
    budgets: tuple[Budget, ...] = field(default_factory=default_budgets)
    reports: tuple[Report, ...] = field(default_factory=default_reports)
    recommendations: tuple[Recommendation, ...] = field(
        default_factory=lambda: tuple(generate_recommendations(ALL_TENANTS))
    )
    settings: Settings = field(default_factory=default_settings)
    filters: FilterState = field(default_factory=default_filters)


def _find(items: tuple, item_id: str, kind: str) -> Any:
    for item in items:
        if item.id == item_id:
            return item
    raise KeyError(f"{kind} '{item_id}' not found")


def _replace_item(items: tuple, item_id: str, kind: str, updates: dict[str, Any]) -> tuple:
    current = _find(items, item_id, kind)
    updated = current.model_validate({**current.model_dump(), **updates})
    return tuple(updated if item.id == item_id else item for item in items)


# =============================================================================
# Tenants
# =============================================================================

def add_tenant(state: AppState, **fields: Any) -> tuple[AppState, Tenant]:
    tenant = Tenant(id=_new_id("tenant"), **fields)
    logger.info(f"Tenant added: {tenant.name}")
    return replace(state, tenants=state.tenants + (tenant,)), tenant


def update_tenant(state: AppState, tenant_id: str, **updates: Any) -> AppState:
    tenants = _replace_item(state.tenants, tenant_id, "Tenant", updates)
    logger.info(f"Tenant updated: {tenant_id}")
    return replace(state, tenants=tenants)


def delete_tenant(state: AppState, tenant_id: str) -> AppState:
    """Remove a tenant together with its budgets."""
    tenant = _find(state.tenants, tenant_id, "Tenant")
    logger.info(f"Tenant deleted: {tenant.name}")
    return replace(
        state,
        tenants=tuple(t for t in state.tenants if t.id != tenant_id),
        budgets=tuple(b for b in state.budgets if b.tenant_id != tenant_id),
    )


# =============================================================================
# Budgets
# =============================================================================

def add_budget(
    state: AppState,
    tenant_id: str,
    name: str,
    amount: float,
    period: BudgetPeriod = BudgetPeriod.MONTHLY,
    alert_threshold: Optional[int] = None,
) -> tuple[AppState, Budget]:
    _find(state.tenants, tenant_id, "Tenant")
    budget = Budget(
        id=_new_id("budget"),
        tenant_id=tenant_id,
        name=name,
        amount=amount,
        period=period,
        alert_threshold=config.store.default_alert_threshold if alert_threshold is None else alert_threshold,
        created_at=_today(),
    )
    logger.info(f"Budget created: {budget.name}")
    return replace(state, budgets=state.budgets + (budget,)), budget


def update_budget(state: AppState, budget_id: str, **updates: Any) -> AppState:
    budgets = _replace_item(state.budgets, budget_id, "Budget", updates)
    logger.info(f"Budget updated: {budget_id}")
    return replace(state, budgets=budgets)


def delete_budget(state: AppState, budget_id: str) -> AppState:
    _find(state.budgets, budget_id, "Budget")
    logger.info(f"Budget deleted: {budget_id}")
    return replace(state, budgets=tuple(b for b in state.budgets if b.id != budget_id))


# =============================================================================
# Reports
# =============================================================================

def add_report(
    state: AppState,
    name: str,
    type: ReportType,
    schedule: ReportSchedule,
) -> tuple[AppState, Report]:
    report = Report(id=_new_id("report"), name=name, type=type, schedule=schedule)
    logger.info(f"Report created: {report.name}")
    return replace(state, reports=state.reports + (report,)), report


def update_report(state: AppState, report_id: str, **updates: Any) -> AppState:
    reports = _replace_item(state.reports, report_id, "Report", updates)
    logger.info(f"Report updated: {report_id}")
    return replace(state, reports=reports)


def delete_report(state: AppState, report_id: str) -> AppState:
    _find(state.reports, report_id, "Report")
    logger.info(f"Report deleted: {report_id}")
    return replace(state, reports=tuple(r for r in state.reports if r.id != report_id))


def get_report(state: AppState, report_id: str) -> Report:
    return _find(state.reports, report_id, "Report")


async def run_report(state: AppState, report_id: str, delay: Optional[float] = None) -> AppState:
    """Mark a report running, wait the simulated generation time, mark it ready."""
    delay = config.store.simulated_delay_seconds if delay is None else delay
    running = update_report(state, report_id, status=ReportStatus.RUNNING)
    logger.info(f"Generating report {report_id}...")
    await asyncio.sleep(delay)
    logger.info(f"Report ready: {report_id}")
    return update_report(running, report_id, status=ReportStatus.READY, last_run=_today())


# =============================================================================
# Recommendations
# =============================================================================

def _set_recommendation_status(
    state: AppState, recommendation_id: str, status: RecommendationStatus
) -> AppState:
    return replace(
        state,
        recommendations=_replace_item(
            state.recommendations, recommendation_id, "Recommendation", {"status": status}
        ),
    )


def implement_recommendation(state: AppState, recommendation_id: str) -> AppState:
    new_state = _set_recommendation_status(state, recommendation_id, RecommendationStatus.IMPLEMENTED)
    rec = _find(new_state.recommendations, recommendation_id, "Recommendation")
    logger.info(f"Recommendation implemented: saved ${rec.projected_savings:.2f} per month")
    return new_state


def dismiss_recommendation(state: AppState, recommendation_id: str) -> AppState:
    logger.info(f"Recommendation dismissed: {recommendation_id}")
    return _set_recommendation_status(state, recommendation_id, RecommendationStatus.DISMISSED)


def _is_easy_win(rec: Recommendation) -> bool:
    return rec.effort == Effort.EASY and rec.status == RecommendationStatus.NEW


def implement_easy_wins(state: AppState) -> tuple[AppState, int]:
    """Implement every new, easy recommendation; returns the count."""
    easy_wins = [r for r in state.recommendations if _is_easy_win(r)]
    savings = sum(r.projected_savings for r in easy_wins)
    recommendations = tuple(
        r.model_copy(update={"status": RecommendationStatus.IMPLEMENTED}) if _is_easy_win(r) else r
        for r in state.recommendations
    )
    logger.info(f"{len(easy_wins)} recommendations implemented. Saving ${savings:.2f}/month.")
    return replace(state, recommendations=recommendations), len(easy_wins)


# =============================================================================
# Settings
# =============================================================================

def _update_settings(state: AppState, **updates: Any) -> AppState:
    return replace(state, settings=state.settings.model_copy(update=updates))


def update_profile(state: AppState, **profile: Any) -> AppState:
    logger.info("Profile updated")
    return _update_settings(state, profile=state.settings.profile.model_copy(update=profile))


def update_timezone(state: AppState, timezone: str) -> AppState:
    logger.info(f"Timezone updated: {timezone}")
    return _update_settings(state, timezone=timezone)


def update_notifications(state: AppState, **notifications: bool) -> AppState:
    current = state.settings.notifications
    logger.info("Notification preferences updated")
    return _update_settings(state, notifications=NotificationSettings(**{**current.model_dump(), **notifications}))


def update_security(state: AppState, two_factor_enabled: bool) -> AppState:
    status = "enabled" if two_factor_enabled else "disabled"
    logger.info(f"Two-factor authentication has been {status}")
    return _update_settings(state, security=SecuritySettings(two_factor_enabled=two_factor_enabled))


async def connect_api(
    state: AppState,
    access_key: str,
    secret_key: str,
    project_id: str,
    delay: Optional[float] = None,
) -> AppState:
    """Pretend to verify cloud API credentials, then mark them connected."""
    delay = config.store.simulated_delay_seconds if delay is None else delay
    logger.info("Verifying API credentials...")
    await asyncio.sleep(delay)
    credentials = ApiCredentials(
        access_key=access_key, secret_key=secret_key, project_id=project_id, is_connected=True
    )
    logger.info("Connected to cloud API")
    return _update_settings(state, api_credentials=credentials)


def disconnect_api(state: AppState) -> AppState:
    logger.info("Disconnected from cloud API")
    return _update_settings(state, api_credentials=ApiCredentials())


async def change_password(state: AppState, new_password: str, delay: Optional[float] = None) -> AppState:
    """Validate and pretend to change the password; the state is unchanged."""
    minimum = config.store.min_password_length
    if len(new_password) < minimum:
        raise ValueError(f"Password must be at least {minimum} characters.")
    delay = config.store.simulated_delay_seconds * 0.75 if delay is None else delay
    logger.info("Changing password...")
    await asyncio.sleep(delay)
    logger.info("Password changed")
    return state


# =============================================================================
# Filters
# =============================================================================

def select_tenant(state: AppState, tenant_id: str) -> AppState:
    if tenant_id != ALL_TENANTS:
        _find(state.tenants, tenant_id, "Tenant")
    logger.info(f"Tenant selected: {tenant_id}")
    return replace(state, filters=state.filters.model_copy(update={"tenant_id": tenant_id}))


def set_currency(state: AppState, currency: Currency) -> AppState:
    currency = Currency(currency)
    logger.info(f"Currency set: {currency.value}")
    return replace(state, filters=state.filters.model_copy(update={"currency": currency}))


def set_date_range(state: AppState, date_range: DateRange) -> AppState:
    logger.info(f"Date range set: {date_range.preset.value}")
    return replace(state, filters=state.filters.model_copy(update={"date_range": date_range}))


def set_services(state: AppState, services: list[Service]) -> AppState:
    services = [Service(s) for s in services]
    logger.info(f"Service filter set: {len(services)} services")
    return replace(state, filters=state.filters.model_copy(update={"services": services}))


def set_regions(state: AppState, regions: list[Region]) -> AppState:
    regions = [Region(r) for r in regions]
    logger.info(f"Region filter set: {len(regions)} regions")
    return replace(state, filters=state.filters.model_copy(update={"regions": regions}))
