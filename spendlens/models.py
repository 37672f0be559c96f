"""Pydantic models for SpendLens."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing with the dashboard's camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Currency(str, Enum):
    """Display currencies."""
    USD = "USD"
    GBP = "GBP"
    EUR = "EUR"
    JPY = "JPY"
    CNY = "CNY"
    NGN = "NGN"


class Service(str, Enum):
    """Cloud service codes."""
    ECS = "ECS"
    RDS = "RDS"
    OBS = "OBS"
    EVS = "EVS"
    ELB = "ELB"
    VPC = "VPC"
    CDN = "CDN"
    NAT = "NAT"
    WAF = "WAF"
    DCS = "DCS"
    DDS = "DDS"
    GAUSSDB = "GaussDB"
    FUNCTIONGRAPH = "FunctionGraph"
    APIG = "APIG"
    SMN = "SMN"
    CTS = "CTS"
    CCE = "CCE"
    SWR = "SWR"


class Region(str, Enum):
    """Cloud region codes."""
    AF_SOUTH_1 = "af-south-1"
    EU_WEST_0 = "eu-west-0"
    AP_SOUTHEAST_1 = "ap-southeast-1"
    AP_SOUTHEAST_2 = "ap-southeast-2"
    AP_SOUTHEAST_3 = "ap-southeast-3"
    CN_NORTH_4 = "cn-north-4"
    CN_EAST_3 = "cn-east-3"
    ME_EAST_1 = "me-east-1"


class TenantStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class ResourceStatus(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"


class RecommendationType(str, Enum):
    """Types of cost optimization recommendations."""
    RIGHTSIZING = "rightsizing"
    IDLE_RESOURCE = "idle_resource"
    RESERVED_INSTANCE = "reserved_instance"
    STORAGE_OPTIMIZATION = "storage_optimization"
    NETWORK_OPTIMIZATION = "network_optimization"
    DATABASE_TUNING = "database_tuning"


class Impact(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Effort(str, Enum):
    EASY = "easy"
    MODERATE = "moderate"
    COMPLEX = "complex"


class RecommendationStatus(str, Enum):
    NEW = "new"
    IN_PROGRESS = "in_progress"
    IMPLEMENTED = "implemented"
    DISMISSED = "dismissed"


class VDCLevel(str, Enum):
    """Virtual data center levels, enterprise down to project."""
    VDC1 = "vdc1"
    VDC2 = "vdc2"
    VDC3 = "vdc3"
    VDC4 = "vdc4"
    VDC5 = "vdc5"


# =============================================================================
# Tenant Models
# =============================================================================

class Tenant(CamelModel):
    """A modeled customer organization."""
    id: str
    name: str
    industry: str
    country: str
    contact_name: str
    contact_email: str
    budget: float = Field(..., description="Monthly budget in USD")
    efficiency_score: float = Field(..., ge=0, le=100)
    status: TenantStatus = TenantStatus.ACTIVE


class TenantSummary(CamelModel):
    """Per-tenant row for the comparison view."""
    tenant: Tenant
    total_spend: float
    budget_usage: float
    efficiency_score: float
    top_service: Service
    recommendation_count: int


# =============================================================================
# Cost Models
# =============================================================================

class CostTrendPoint(CamelModel):
    """Daily cost point; forecast-only points carry amount 0."""
    date: str = Field(..., description="ISO date")
    amount: float
    forecast: Optional[float] = None


class ServiceBreakdown(CamelModel):
    """Cost share of one service."""
    service: Service
    cost: float
    percentage: float
    trend: float = Field(..., description="Period-over-period change in percent")
    resource_count: int


class RegionBreakdown(CamelModel):
    """Cost share of one region."""
    region: Region
    cost: float
    percentage: float
    trend: float = Field(..., description="Period-over-period change in percent")
    resource_count: int


class DashboardKPIs(CamelModel):
    """Scalar snapshot shown on the dashboard overview."""
    total_spend: float
    previous_spend: float
    spend_growth_rate: float
    budget_used: float
    total_budget: float
    active_resources: int
    optimization_opportunities: int
    potential_savings: float
    average_efficiency: float
    cost_per_resource: float


# =============================================================================
# Resource & Recommendation Models
# =============================================================================

class Resource(CamelModel):
    """Synthetic compute or storage unit."""
    id: str
    tenant_id: str
    name: str
    service: Service
    region: Region
    type: str
    status: ResourceStatus
    cpu_utilization: float = Field(..., ge=0, le=100)
    memory_utilization: float = Field(..., ge=0, le=100)
    network_utilization: float = Field(..., ge=0, le=100)
    disk_utilization: float = Field(..., ge=0, le=100)
    monthly_cost: float
    created_at: datetime


class Recommendation(CamelModel):
    """Pre-authored cost optimization suggestion."""
    id: str
    tenant_id: str
    type: RecommendationType
    title: str
    description: str
    resource_id: str
    resource_name: str
    service: Service
    current_cost: float
    projected_savings: float
    impact: Impact
    effort: Effort
    status: RecommendationStatus = RecommendationStatus.NEW


# =============================================================================
# Hierarchy Models
# =============================================================================

class VDCNode(CamelModel):
    """Node of a tenant's virtual data center tree."""
    id: str
    name: str
    level: VDCLevel
    spend: float
    budget: float
    resources: int
    trend: float
    children: Optional[list["VDCNode"]] = None

    @property
    def is_leaf(self) -> bool:
        return not self.children


# =============================================================================
# Dashboard State Models
# =============================================================================

class BudgetPeriod(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class Budget(CamelModel):
    """Budget set by a user for one tenant."""
    id: str
    tenant_id: str
    name: str
    amount: float = Field(..., gt=0)
    period: BudgetPeriod = BudgetPeriod.MONTHLY
    alert_threshold: int = Field(80, ge=0, le=100)
    created_at: str = ""


class ReportType(str, Enum):
    COST_ANALYSIS = "Cost Analysis"
    UTILIZATION = "Utilization"
    RECOMMENDATIONS = "Recommendations"
    COST_ALLOCATION = "Cost Allocation"
    BUDGET = "Budget"


class ReportSchedule(str, Enum):
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    ON_DEMAND = "On-demand"


class ReportStatus(str, Enum):
    READY = "ready"
    RUNNING = "running"
    FAILED = "failed"


class Report(CamelModel):
    """Saved report definition."""
    id: str
    name: str
    type: ReportType
    schedule: ReportSchedule
    last_run: str = "Never"
    status: ReportStatus = ReportStatus.READY


class ProfileSettings(CamelModel):
    first_name: str
    last_name: str
    email: str


class NotificationSettings(CamelModel):
    budget_alerts: bool = True
    cost_anomalies: bool = True
    new_recommendations: bool = True
    report_ready: bool = True


class ApiCredentials(CamelModel):
    access_key: str = ""
    secret_key: str = ""
    project_id: str = ""
    is_connected: bool = False


class SecuritySettings(CamelModel):
    two_factor_enabled: bool = False


class Settings(CamelModel):
    """User settings held in the dashboard state."""
    profile: ProfileSettings
    timezone: str = "africa-lagos"
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    api_credentials: ApiCredentials = Field(default_factory=ApiCredentials)
    security: SecuritySettings = Field(default_factory=SecuritySettings)


class DateRangePreset(str, Enum):
    LAST_7_DAYS = "last7days"
    LAST_30_DAYS = "last30days"
    LAST_90_DAYS = "last90days"
    THIS_MONTH = "thisMonth"
    LAST_MONTH = "lastMonth"
    CUSTOM = "custom"


class DateRange(CamelModel):
    preset: DateRangePreset = DateRangePreset.LAST_30_DAYS
    start_date: str
    end_date: str


class FilterState(CamelModel):
    """Dashboard filter selection."""
    tenant_id: str = "all"
    date_range: DateRange
    services: list[Service] = Field(default_factory=list)
    regions: list[Region] = Field(default_factory=list)
    currency: Currency = Currency.USD


# =============================================================================
# Rollup Models
# =============================================================================

class BudgetStatus(str, Enum):
    """Budget badge shown next to a utilization bar."""
    ON_TRACK = "on_track"
    AT_RISK = "at_risk"
    OVER_BUDGET = "over_budget"


class BudgetRow(CamelModel):
    """Budget joined with the tenant's current spend."""
    id: str
    tenant_id: str
    tenant_name: str
    name: str
    amount: float
    period: BudgetPeriod
    alert_threshold: int
    spent: float
    percentage: float = Field(..., description="Spend over amount, not clamped")
    display_percentage: float = Field(..., ge=0, le=100)
    status: BudgetStatus
    is_default: bool = False


class BudgetOverview(CamelModel):
    total_budget: float
    total_spent: float
    over_budget: int
    at_risk: int
    rows: list[BudgetRow]


class RecommendationStats(CamelModel):
    new_count: int
    total_savings: float
    high_impact: int
    easy_wins: int
    easy_win_savings: float
    implemented: int


class ResourceStats(CamelModel):
    running: int
    stopped: int
    underutilized: int
    total_cost: float
    average_cpu: float
    average_memory: float


class TrendStats(CamelModel):
    """Headline figures of the analytics view."""
    total_spend: float
    daily_average: float
    peak_day: float
    lowest_day: float


class TenantOverview(CamelModel):
    total_spend: float
    average_efficiency: float
    total_recommendations: int


# =============================================================================
# API Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class ConversionResponse(CamelModel):
    """Currency conversion response."""
    amount: float
    currency: Currency
    converted: float
    formatted: str
    compact: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    details: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=datetime.utcnow)
