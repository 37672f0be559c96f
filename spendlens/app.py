"""SpendLens API - FastAPI Application."""

import logging
import random
from contextlib import asynccontextmanager
from datetime import datetime
from typing import NoReturn, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.responses import JSONResponse, PlainTextResponse, Response

from . import ALL_TENANTS, __version__
from .config import config
from .currency import convert, format_compact, format_currency
from .generators import (
    days_from_preset,
    generate_cost_trend,
    generate_kpis,
    generate_recommendations,
    generate_region_breakdown,
    generate_resources,
    generate_service_breakdown,
    generate_tenant_summaries,
)
from .hierarchy import build_hierarchy
from .models import (
    ConversionResponse,
    CostTrendPoint,
    Currency,
    DashboardKPIs,
    DateRangePreset,
    ErrorResponse,
    HealthResponse,
    Recommendation,
    RegionBreakdown,
    Resource,
    ResourceStats,
    ServiceBreakdown,
    Tenant,
    TenantOverview,
    TenantSummary,
    TrendStats,
    VDCNode,
)
from .randomness import RandomSource
from .reports import render_report_csv, report_filename
from .rollup import resource_stats, tenant_overview, trend_stats
from .store import AppState, get_report
from .tenants import get_tenant

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.server.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Prometheus metrics
REQUEST_COUNT = Counter(
    "spendlens_requests_total",
    "Total SpendLens API requests",
    ["endpoint", "method", "status"]
)

REQUEST_LATENCY = Histogram(
    "spendlens_request_latency_seconds",
    "Request latency",
    ["endpoint"]
)

# Runtime state shared by the report endpoints
state = AppState()


def _rng(seed: Optional[int]) -> Optional[RandomSource]:
    return random.Random(seed) if seed is not None else None


def _tenant_or_404(tenant_id: str, endpoint: str) -> Tenant:
    tenant = get_tenant(tenant_id, state.tenants)
    if tenant is None:
        REQUEST_COUNT.labels(endpoint=endpoint, method="GET", status="404").inc()
        raise HTTPException(status_code=404, detail=f"Tenant '{tenant_id}' not found")
    return tenant


def _period(days: int, preset: Optional[DateRangePreset]) -> int:
    return days_from_preset(preset) if preset is not None else days


def _server_error(endpoint: str, exc: Exception) -> NoReturn:
    logger.error(f"{endpoint} failed: {exc}")
    REQUEST_COUNT.labels(endpoint=endpoint, method="GET", status="500").inc()
    raise HTTPException(status_code=500, detail=str(exc))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting SpendLens API...")
    yield
    logger.info("Shutting down SpendLens API...")


# Create FastAPI app
app = FastAPI(
    title="SpendLens",
    description="Multi-tenant cloud cost dashboard API backed by synthetic data",
    version=__version__,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Invalid generator arguments become 400 responses."""
    logger.warning(f"Rejected {request.url.path}: {exc}")
    REQUEST_COUNT.labels(endpoint=request.url.path, method=request.method, status="400").inc()
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error=str(exc)).model_dump(mode="json")
    )


# =============================================================================
# Health Endpoints
# =============================================================================

@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint."""
    REQUEST_COUNT.labels(endpoint="/health", method="GET", status="200").inc()
    return HealthResponse(
        status="healthy",
        version=__version__
    )


@app.get("/ready", tags=["Health"])
async def readiness_check():
    """Readiness check endpoint."""
    REQUEST_COUNT.labels(endpoint="/ready", method="GET", status="200").inc()
    return {"status": "ready"}


# =============================================================================
# Tenant Endpoints
# =============================================================================

@app.get("/tenants", response_model=list[Tenant], tags=["Tenants"])
async def list_tenants():
    """List registered tenants."""
    REQUEST_COUNT.labels(endpoint="/tenants", method="GET", status="200").inc()
    return list(state.tenants)


@app.get("/tenants/summaries", response_model=list[TenantSummary], tags=["Tenants"])
async def get_tenant_summaries(seed: Optional[int] = Query(None, description="Random seed")):
    """Spend, budget usage and top service per tenant."""
    with REQUEST_LATENCY.labels(endpoint="/tenants/summaries").time():
        try:
            summaries = generate_tenant_summaries(rng=_rng(seed), registry=state.tenants)
        except ValueError:
            raise
        except Exception as e:
            _server_error("/tenants/summaries", e)
        REQUEST_COUNT.labels(endpoint="/tenants/summaries", method="GET", status="200").inc()
        return summaries


@app.get("/tenants/overview", response_model=TenantOverview, tags=["Tenants"])
async def get_tenant_overview(seed: Optional[int] = Query(None, description="Random seed")):
    """Total spend, average efficiency and open recommendations across tenants."""
    with REQUEST_LATENCY.labels(endpoint="/tenants/overview").time():
        try:
            overview = tenant_overview(generate_tenant_summaries(rng=_rng(seed), registry=state.tenants))
        except ValueError:
            raise
        except Exception as e:
            _server_error("/tenants/overview", e)
        REQUEST_COUNT.labels(endpoint="/tenants/overview", method="GET", status="200").inc()
        return overview


@app.get("/tenants/{tenant_id}", response_model=Tenant, tags=["Tenants"])
async def get_tenant_detail(tenant_id: str):
    """Get a single tenant."""
    tenant = _tenant_or_404(tenant_id, "/tenants/{id}")
    REQUEST_COUNT.labels(endpoint="/tenants/{id}", method="GET", status="200").inc()
    return tenant


@app.get("/tenants/{tenant_id}/hierarchy", response_model=VDCNode, tags=["Tenants"])
async def get_hierarchy(
    tenant_id: str,
    seed: Optional[int] = Query(None, description="Random seed")
):
    """Get the VDC tree of a tenant."""
    tenant = _tenant_or_404(tenant_id, "/tenants/{id}/hierarchy")
    with REQUEST_LATENCY.labels(endpoint="/tenants/{id}/hierarchy").time():
        try:
            root = build_hierarchy(tenant.id, tenant.budget, rng=_rng(seed))
        except ValueError:
            raise
        except Exception as e:
            _server_error("/tenants/{id}/hierarchy", e)
        REQUEST_COUNT.labels(endpoint="/tenants/{id}/hierarchy", method="GET", status="200").inc()
        return root


# =============================================================================
# Cost Endpoints
# =============================================================================

@app.get("/costs/trend", response_model=list[CostTrendPoint], tags=["Costs"])
async def get_cost_trend(
    tenant_id: str = Query(ALL_TENANTS, description="Tenant id or 'all'"),
    days: int = Query(30, ge=1, le=365, description="Historical days"),
    preset: Optional[DateRangePreset] = Query(None, description="Date range preset, overrides days"),
    seed: Optional[int] = Query(None, description="Random seed")
):
    """Daily spend followed by a 7-day forecast."""
    with REQUEST_LATENCY.labels(endpoint="/costs/trend").time():
        try:
            points = generate_cost_trend(tenant_id, _period(days, preset), rng=_rng(seed))
        except ValueError:
            raise
        except Exception as e:
            _server_error("/costs/trend", e)
        REQUEST_COUNT.labels(endpoint="/costs/trend", method="GET", status="200").inc()
        return points


@app.get("/costs/stats", response_model=TrendStats, tags=["Costs"])
async def get_cost_stats(
    tenant_id: str = Query(ALL_TENANTS, description="Tenant id or 'all'"),
    days: int = Query(30, ge=1, le=365, description="Period in days"),
    preset: Optional[DateRangePreset] = Query(None, description="Date range preset, overrides days"),
    seed: Optional[int] = Query(None, description="Random seed")
):
    """Total spend, daily average, peak and lowest day of the period."""
    with REQUEST_LATENCY.labels(endpoint="/costs/stats").time():
        try:
            period = _period(days, preset)
            rng = _rng(seed)
            kpis = generate_kpis(tenant_id, period, rng=rng, registry=state.tenants)
            points = generate_cost_trend(tenant_id, period, rng=rng)
            stats = trend_stats(points, kpis.total_spend, period)
        except ValueError:
            raise
        except Exception as e:
            _server_error("/costs/stats", e)
        REQUEST_COUNT.labels(endpoint="/costs/stats", method="GET", status="200").inc()
        return stats


@app.get("/costs/services", response_model=list[ServiceBreakdown], tags=["Costs"])
async def get_service_breakdown(
    tenant_id: str = Query(ALL_TENANTS, description="Tenant id or 'all'"),
    days: int = Query(30, ge=1, le=365, description="Period in days"),
    preset: Optional[DateRangePreset] = Query(None, description="Date range preset, overrides days"),
    seed: Optional[int] = Query(None, description="Random seed")
):
    """Cost by service, largest first."""
    with REQUEST_LATENCY.labels(endpoint="/costs/services").time():
        try:
            rows = generate_service_breakdown(tenant_id, _period(days, preset), rng=_rng(seed))
        except ValueError:
            raise
        except Exception as e:
            _server_error("/costs/services", e)
        REQUEST_COUNT.labels(endpoint="/costs/services", method="GET", status="200").inc()
        return rows


@app.get("/costs/regions", response_model=list[RegionBreakdown], tags=["Costs"])
async def get_region_breakdown(
    tenant_id: str = Query(ALL_TENANTS, description="Tenant id or 'all'"),
    days: int = Query(30, ge=1, le=365, description="Period in days"),
    preset: Optional[DateRangePreset] = Query(None, description="Date range preset, overrides days"),
    seed: Optional[int] = Query(None, description="Random seed")
):
    """Cost by region, largest first."""
    with REQUEST_LATENCY.labels(endpoint="/costs/regions").time():
        try:
            rows = generate_region_breakdown(tenant_id, _period(days, preset), rng=_rng(seed))
        except ValueError:
            raise
        except Exception as e:
            _server_error("/costs/regions", e)
        REQUEST_COUNT.labels(endpoint="/costs/regions", method="GET", status="200").inc()
        return rows


@app.get("/kpis", response_model=DashboardKPIs, tags=["Costs"])
async def get_kpis(
    tenant_id: str = Query(ALL_TENANTS, description="Tenant id or 'all'"),
    days: int = Query(30, ge=1, le=365, description="Period in days"),
    preset: Optional[DateRangePreset] = Query(None, description="Date range preset, overrides days"),
    seed: Optional[int] = Query(None, description="Random seed")
):
    """Dashboard KPI snapshot."""
    with REQUEST_LATENCY.labels(endpoint="/kpis").time():
        try:
            kpis = generate_kpis(tenant_id, _period(days, preset), rng=_rng(seed), registry=state.tenants)
        except ValueError:
            raise
        except Exception as e:
            _server_error("/kpis", e)
        REQUEST_COUNT.labels(endpoint="/kpis", method="GET", status="200").inc()
        return kpis


# =============================================================================
# Resource & Recommendation Endpoints
# =============================================================================

@app.get("/resources", response_model=list[Resource], tags=["Resources"])
async def get_resources(
    tenant_id: str = Query(ALL_TENANTS, description="Tenant id or 'all'"),
    seed: Optional[int] = Query(None, description="Random seed")
):
    """Synthetic resource inventory."""
    with REQUEST_LATENCY.labels(endpoint="/resources").time():
        try:
            resources = generate_resources(tenant_id, rng=_rng(seed), registry=state.tenants)
        except ValueError:
            raise
        except Exception as e:
            _server_error("/resources", e)
        REQUEST_COUNT.labels(endpoint="/resources", method="GET", status="200").inc()
        return resources


@app.get("/resources/stats", response_model=ResourceStats, tags=["Resources"])
async def get_resource_stats(
    tenant_id: str = Query(ALL_TENANTS, description="Tenant id or 'all'"),
    seed: Optional[int] = Query(None, description="Random seed")
):
    """Status counts, cost and average utilization of the inventory."""
    with REQUEST_LATENCY.labels(endpoint="/resources/stats").time():
        try:
            stats = resource_stats(generate_resources(tenant_id, rng=_rng(seed), registry=state.tenants))
        except ValueError:
            raise
        except Exception as e:
            _server_error("/resources/stats", e)
        REQUEST_COUNT.labels(endpoint="/resources/stats", method="GET", status="200").inc()
        return stats


@app.get("/recommendations", response_model=list[Recommendation], tags=["Resources"])
async def get_recommendations(
    tenant_id: str = Query(ALL_TENANTS, description="Tenant id or 'all'")
):
    """Optimization recommendations for a tenant selector."""
    REQUEST_COUNT.labels(endpoint="/recommendations", method="GET", status="200").inc()
    return generate_recommendations(tenant_id)


# =============================================================================
# Currency & Report Endpoints
# =============================================================================

@app.get("/currency/convert", response_model=ConversionResponse, tags=["Currency"])
async def convert_currency(
    amount: float = Query(..., allow_inf_nan=False, description="Amount in USD"),
    currency: Currency = Query(Currency.USD, description="Target currency")
):
    """Convert a USD amount and render it for display."""
    try:
        converted = convert(amount, currency)
        response = ConversionResponse(
            amount=amount,
            currency=currency,
            converted=round(converted, 2),
            formatted=format_currency(converted, currency),
            compact=format_compact(converted, currency),
        )
    except ValueError:
        raise
    except Exception as e:
        _server_error("/currency/convert", e)
    REQUEST_COUNT.labels(endpoint="/currency/convert", method="GET", status="200").inc()
    return response



@app.get("/reports/{report_id}/export", tags=["Reports"])
async def export_report(report_id: str):
    """Download a report as CSV."""
    try:
        report = get_report(state, report_id)
    except KeyError:
        REQUEST_COUNT.labels(endpoint="/reports/{id}/export", method="GET", status="404").inc()
        raise HTTPException(status_code=404, detail=f"Report '{report_id}' not found")

    now = datetime.utcnow()
    filename = report_filename(report, now.date())
    logger.info(f"Exporting report {report_id} as {filename}")
    REQUEST_COUNT.labels(endpoint="/reports/{id}/export", method="GET", status="200").inc()
    return PlainTextResponse(
        content=render_report_csv(report, now),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


# =============================================================================
# Metrics Endpoint
# =============================================================================

@app.get("/metrics", tags=["Metrics"])
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "spendlens.app:app",
        host=config.server.host,
        port=config.server.port,
        workers=config.server.workers,
        log_level=config.server.log_level
    )
