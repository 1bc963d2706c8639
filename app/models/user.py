"""User model: belongs to exactly one tenant."""

import uuid
from enum import StrEnum

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from app.models.base import CamelModel, TimestampMixin, new_uuid
from app.models.tenant import TenantRead


class UserRole(StrEnum):
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class User(TimestampMixin, SQLModel, table=True):
    __tablename__ = "users"
    # The same email may sign up in several tenants as distinct users
    __table_args__ = (UniqueConstraint("email", "tenant_id", name="uq_users_email_tenant"),)

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    tenant_id: uuid.UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    email: str = Field(max_length=320, nullable=False, index=True)
    password_hash: str = Field(nullable=False)
    role: UserRole = Field(default=UserRole.MEMBER)


# ── API schemas ──────────────────────────────────────────────

class UserRead(CamelModel):
    id: uuid.UUID
    email: str
    role: UserRole
    tenant: TenantRead
