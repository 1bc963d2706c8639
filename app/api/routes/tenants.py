"""Tenant subscription management."""

import logging

from fastapi import APIRouter
from pydantic import BaseModel
from sqlmodel import select

from app.api.deps import AdminAuth, Session
from app.core.errors import Forbidden, NotFound
from app.models.base import utcnow
from app.models.tenant import SubscriptionPlan, Tenant, TenantRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tenants", tags=["tenants"])


class UpgradeResponse(BaseModel):
    message: str
    tenant: TenantRead


@router.post("/{slug}/upgrade", response_model=UpgradeResponse)
async def upgrade_tenant(slug: str, auth: AdminAuth, session: Session) -> UpgradeResponse:
    """Move the caller's own tenant to the PRO plan.

    Admins only, and only for the tenant their token was issued for.
    Upgrading a PRO tenant again is accepted and changes nothing.
    """
    if auth.tenant_slug != slug:
        raise Forbidden("Cannot upgrade other tenants")

    result = await session.execute(select(Tenant).where(Tenant.slug == slug))
    tenant = result.scalar_one_or_none()
    if tenant is None:
        raise NotFound("Tenant not found")

    if tenant.subscription_plan != SubscriptionPlan.PRO:
        tenant.subscription_plan = SubscriptionPlan.PRO
        tenant.updated_at = utcnow()
        session.add(tenant)
        await session.commit()
        await session.refresh(tenant)
        logger.info("Tenant %s upgraded to PRO by %s", slug, auth.email)

    return UpgradeResponse(
        message="Tenant upgraded to Pro plan successfully",
        tenant=TenantRead.model_validate(tenant),
    )
