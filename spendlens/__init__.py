"""SpendLens - synthetic FinOps data and rollups for multi-tenant cloud spend."""

__version__ = "0.1.0"

ALL_TENANTS = "all"
