"""Static tenant registry."""

from collections.abc import Sequence
from typing import Optional

from .config import config
from .models import Tenant

TENANTS: tuple[Tenant, ...] = (
    Tenant(
        id="tenant-1",
        name="Dangote Industries",
        industry="Manufacturing",
        country="Nigeria",
        contact_name="Chidi Okonkwo",
        contact_email="chidi.okonkwo@dangote.com",
        budget=250_000,
        efficiency_score=78,
    ),
    Tenant(
        id="tenant-2",
        name="MTN Nigeria",
        industry="Telecommunications",
        country="Nigeria",
        contact_name="Amaka Eze",
        contact_email="amaka.eze@mtn.ng",
        budget=500_000,
        efficiency_score=85,
    ),
    Tenant(
        id="tenant-3",
        name="Flutterwave",
        industry="Fintech",
        country="Nigeria",
        contact_name="Oluwaseun Adeyemi",
        contact_email="oluwaseun@flutterwave.com",
        budget=180_000,
        efficiency_score=92,
    ),
    Tenant(
        id="tenant-4",
        name="Safaricom Kenya",
        industry="Telecommunications",
        country="Kenya",
        contact_name="Wanjiku Kamau",
        contact_email="wanjiku.kamau@safaricom.co.ke",
        budget=320_000,
        efficiency_score=81,
    ),
    Tenant(
        id="tenant-5",
        name="Standard Bank SA",
        industry="Banking",
        country="South Africa",
        contact_name="Thabo Molefe",
        contact_email="thabo.molefe@standardbank.co.za",
        budget=420_000,
        efficiency_score=75,
    ),
    Tenant(
        id="tenant-6",
        name="Andela",
        industry="Technology",
        country="Nigeria",
        contact_name="Ngozi Obi",
        contact_email="ngozi.obi@andela.com",
        budget=150_000,
        efficiency_score=88,
    ),
    Tenant(
        id="tenant-7",
        name="Jumia Group",
        industry="E-commerce",
        country="Nigeria",
        contact_name="Emmanuel Nwosu",
        contact_email="emmanuel.nwosu@jumia.com",
        budget=280_000,
        efficiency_score=72,
    ),
    Tenant(
        id="tenant-8",
        name="Interswitch",
        industry="Fintech",
        country="Nigeria",
        contact_name="Chioma Ikenna",
        contact_email="chioma.ikenna@interswitch.com",
        budget=200_000,
        efficiency_score=84,
    ),
)


def get_tenant(tenant_id: str, registry: Sequence[Tenant] = TENANTS) -> Optional[Tenant]:
    """Look up a tenant by id."""
    for tenant in registry:
        if tenant.id == tenant_id:
            return tenant
    return None


def tenant_budget(tenant_id: str, registry: Sequence[Tenant] = TENANTS) -> float:
    """Monthly budget of a tenant, or the default budget for unknown ids."""
    tenant = get_tenant(tenant_id, registry)
    if tenant is None:
        return config.generation.default_budget
    return tenant.budget
