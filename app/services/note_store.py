"""Tenant-scoped note persistence with plan-limit enforcement.

Every lookup filters on ``tenant_id``, so a note owned by another tenant
behaves exactly like a missing one.

Creation is a check-then-insert against the plan quota. Creates for one
tenant are serialized by a per-tenant asyncio lock, and the tenant row is
read ``FOR UPDATE`` so that several API processes sharing one PostgreSQL
database serialize as well.
"""

import asyncio
import logging
import uuid
import weakref

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.errors import NotFound, PlanLimitExceeded
from app.core.security import TokenClaims
from app.models.base import utcnow
from app.models.note import Note
from app.models.tenant import SubscriptionPlan, Tenant
from app.models.user import User

logger = logging.getLogger(__name__)


class NoteStore:
    def __init__(self, free_plan_note_limit: int) -> None:
        self.free_plan_note_limit = free_plan_note_limit
        # Entries vanish once no create for the tenant holds or awaits the lock
        self._create_locks: weakref.WeakValueDictionary[uuid.UUID, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _create_lock(self, tenant_id: uuid.UUID) -> asyncio.Lock:
        lock = self._create_locks.get(tenant_id)
        if lock is None:
            lock = asyncio.Lock()
            self._create_locks[tenant_id] = lock
        return lock

    async def list_for_tenant(
        self, session: AsyncSession, tenant_id: uuid.UUID
    ) -> list[tuple[Note, User]]:
        stmt = (
            select(Note, User)
            .join(User, Note.user_id == User.id)
            .where(Note.tenant_id == tenant_id)
            .order_by(Note.updated_at.desc())  # type: ignore[union-attr]
        )
        result = await session.execute(stmt)
        return [(note, author) for note, author in result.all()]

    async def get_for_tenant(
        self, session: AsyncSession, tenant_id: uuid.UUID, note_id: str
    ) -> tuple[Note, User]:
        try:
            parsed_id = uuid.UUID(note_id)
        except ValueError:
            raise NotFound("Note not found") from None

        stmt = (
            select(Note, User)
            .join(User, Note.user_id == User.id)
            .where(
                Note.id == parsed_id,
                Note.tenant_id == tenant_id,
            )
        )
        result = await session.execute(stmt)
        row = result.one_or_none()
        if row is None:
            raise NotFound("Note not found")
        return row[0], row[1]

    async def count_for_tenant(self, session: AsyncSession, tenant_id: uuid.UUID) -> int:
        stmt = select(func.count()).select_from(Note).where(Note.tenant_id == tenant_id)
        result = await session.execute(stmt)
        return result.scalar_one()

    async def create(
        self,
        session: AsyncSession,
        claims: TokenClaims,
        title: str,
        content: str,
    ) -> Note:
        """Insert a note for the caller, honouring the tenant's plan quota."""
        async with self._create_lock(claims.tenant_id):
            stmt = select(Tenant).where(Tenant.id == claims.tenant_id).with_for_update()
            result = await session.execute(stmt)
            tenant = result.scalar_one_or_none()
            if tenant is None:
                await session.rollback()
                raise NotFound("Tenant not found")

            if tenant.subscription_plan == SubscriptionPlan.FREE:
                count = await self.count_for_tenant(session, tenant.id)
                if count >= self.free_plan_note_limit:
                    # Rollback expires tenant; log first
                    logger.info(
                        "Note limit reached for tenant %s (%d notes)", tenant.slug, count
                    )
                    await session.rollback()
                    raise PlanLimitExceeded()

            note = Note(
                tenant_id=tenant.id,
                user_id=claims.user_id,
                title=title,
                content=content,
            )
            session.add(note)
            await session.commit()

        await session.refresh(note)
        return note

    async def update(
        self, session: AsyncSession, note: Note, title: str, content: str
    ) -> Note:
        note.title = title
        note.content = content
        note.updated_at = utcnow()
        session.add(note)
        await session.commit()
        await session.refresh(note)
        return note

    async def delete(self, session: AsyncSession, note: Note) -> None:
        await session.delete(note)
        await session.commit()
