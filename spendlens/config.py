"""Configuration for SpendLens."""

import os
from dataclasses import dataclass, field


@dataclass
class ServerConfig:
    """HTTP server configuration."""

    host: str = field(default_factory=lambda: os.environ.get("SPENDLENS_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.environ.get("SPENDLENS_PORT", "8082")))
    workers: int = field(default_factory=lambda: int(os.environ.get("SPENDLENS_WORKERS", "1")))
    log_level: str = field(default_factory=lambda: os.environ.get("SPENDLENS_LOG_LEVEL", "info"))


@dataclass
class GenerationConfig:
    """Bands and constants used by the mock data generators."""

    # Single tenants are shown at a fixed share of the aggregate
    tenant_scale: float = field(
        default_factory=lambda: float(os.environ.get("SPENDLENS_TENANT_SCALE", "0.15"))
    )

    # Cost trend (USD per day, aggregate)
    daily_base: float = 59_240.0
    daily_noise_ratio: float = 0.10
    daily_growth_ratio: float = 0.002
    weekend_factor: float = 0.85
    forecast_days: int = 7

    # Breakdowns
    breakdown_noise_ratio: float = 0.15
    breakdown_floor: float = 100.0
    trend_band: tuple[float, float] = (-10.0, 15.0)

    # KPIs (USD per 30 days, aggregate)
    spend_band: tuple[float, float] = (1_600_000.0, 1_900_000.0)
    previous_spend_band: tuple[float, float] = (0.88, 0.96)
    all_tenants_budget: float = 2_300_000.0
    default_budget: float = 200_000.0
    active_resources_band: tuple[int, int] = (800, 950)
    optimization_band: tuple[int, int] = (15, 40)
    savings_ratio_band: tuple[float, float] = (0.08, 0.15)
    efficiency_band: tuple[float, float] = (70.0, 90.0)

    # Resources
    resources_all: int = 50
    resources_single: int = 15
    running_probability: float = 0.9
    monthly_cost_band: tuple[float, float] = (50.0, 2_500.0)

    # Recommendations
    recommendations_per_tenant: int = 5


@dataclass
class StoreConfig:
    """Application state configuration."""

    simulated_delay_seconds: float = field(
        default_factory=lambda: float(os.environ.get("SPENDLENS_SIMULATED_DELAY", "2.0"))
    )
    min_password_length: int = 8
    default_alert_threshold: int = 80


@dataclass
class Config:
    """Main configuration."""

    server: ServerConfig = field(default_factory=ServerConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    environment: str = field(default_factory=lambda: os.environ.get("ENVIRONMENT", "development"))


# Global config instance
config = Config()
