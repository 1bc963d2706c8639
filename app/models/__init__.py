"""Import all models so SQLModel.metadata picks them up."""

from app.models.note import Note, NoteAuthor, NoteRead, NoteWrite
from app.models.tenant import SubscriptionPlan, Tenant, TenantRead
from app.models.user import User, UserRead, UserRole

__all__ = [
    "Note",
    "NoteAuthor",
    "NoteRead",
    "NoteWrite",
    "SubscriptionPlan",
    "Tenant",
    "TenantRead",
    "User",
    "UserRead",
    "UserRole",
]
