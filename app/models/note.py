"""Note model: owned by a user, scoped to the owner's tenant."""

import uuid
from datetime import datetime

from sqlalchemy import Text
from sqlmodel import Column, Field, SQLModel

from app.models.base import CamelModel, TimestampMixin, new_uuid
from app.models.user import UserRole


class Note(TimestampMixin, SQLModel, table=True):
    __tablename__ = "notes"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    tenant_id: uuid.UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
    title: str = Field(sa_column=Column(Text, nullable=False))
    content: str = Field(sa_column=Column(Text, nullable=False))


# ── API schemas ──────────────────────────────────────────────

class NoteWrite(CamelModel):
    """Create / update body. Emptiness is checked by the route."""
    title: str | None = None
    content: str | None = None


class NoteAuthor(CamelModel):
    id: uuid.UUID
    email: str
    role: UserRole


class NoteRead(CamelModel):
    id: uuid.UUID
    title: str
    content: str
    user_id: uuid.UUID
    tenant_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    user: NoteAuthor
