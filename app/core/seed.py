"""Demo tenants and accounts for local development."""

import logging

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.security import hash_password
from app.models.tenant import SubscriptionPlan, Tenant
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password"

DEMO_TENANTS: list[tuple[str, str]] = [
    ("acme", "Acme Corporation"),
    ("globex", "Globex Corporation"),
]


async def seed_demo_data(session: AsyncSession) -> bool:
    """Create the demo tenants with one admin and one member each.

    Does nothing when any tenant already exists. Returns True when rows
    were written.
    """
    result = await session.execute(select(func.count()).select_from(Tenant))
    if result.scalar_one() > 0:
        return False

    # One hash shared by every demo account
    password_hash = hash_password(DEMO_PASSWORD)

    for slug, name in DEMO_TENANTS:
        tenant = Tenant(slug=slug, name=name, subscription_plan=SubscriptionPlan.FREE)
        session.add(tenant)
        await session.flush()  # populate tenant.id

        session.add(User(
            tenant_id=tenant.id,
            email=f"admin@{slug}.test",
            password_hash=password_hash,
            role=UserRole.ADMIN,
        ))
        session.add(User(
            tenant_id=tenant.id,
            email=f"user@{slug}.test",
            password_hash=password_hash,
            role=UserRole.MEMBER,
        ))

    await session.commit()
    logger.info("Seeded demo tenants: %s", ", ".join(slug for slug, _ in DEMO_TENANTS))
    return True
