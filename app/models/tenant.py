"""Tenant model: top-level isolation boundary."""

import uuid
from enum import StrEnum

from sqlmodel import Field, SQLModel

from app.models.base import CamelModel, TimestampMixin, new_uuid


class SubscriptionPlan(StrEnum):
    FREE = "FREE"
    PRO = "PRO"


class Tenant(TimestampMixin, SQLModel, table=True):
    __tablename__ = "tenants"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    name: str = Field(max_length=255, nullable=False)
    slug: str = Field(max_length=100, unique=True, nullable=False, index=True)

    # Only the upgrade endpoint moves a tenant off FREE
    subscription_plan: SubscriptionPlan = Field(default=SubscriptionPlan.FREE)


# ── API schemas ──────────────────────────────────────────────

class TenantRead(CamelModel):
    id: uuid.UUID
    slug: str
    name: str
    subscription_plan: SubscriptionPlan
