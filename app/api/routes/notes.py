"""Notes CRUD: every query scoped to the caller's tenant."""

from fastapi import APIRouter, Request, status
from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from app.api.deps import Auth, Notes, Session
from app.core.errors import Forbidden, ValidationError
from app.core.security import TokenClaims
from app.models.note import Note, NoteAuthor, NoteRead, NoteWrite
from app.models.user import User, UserRole

router = APIRouter(prefix="/notes", tags=["notes"])


class NoteList(BaseModel):
    notes: list[NoteRead]


class NoteEnvelope(BaseModel):
    note: NoteRead


class DeleteResponse(BaseModel):
    message: str


def _to_read(note: Note, author: User | NoteAuthor) -> NoteRead:
    return NoteRead(
        id=note.id,
        title=note.title,
        content=note.content,
        user_id=note.user_id,
        tenant_id=note.tenant_id,
        created_at=note.created_at,
        updated_at=note.updated_at,
        user=NoteAuthor.model_validate(author),
    )


async def _read_note_body(request: Request) -> tuple[str, str]:
    """Parse and check a note body.

    Handlers call this after the ``Auth`` dependency has run, so an
    unauthenticated request is rejected with 401 before its body is looked at.
    """
    try:
        body = NoteWrite.model_validate(await request.json())
    except (ValueError, SchemaError):
        raise ValidationError("Invalid request body") from None
    if not body.title or not body.content:
        raise ValidationError("Title and content are required")
    return body.title, body.content


def _require_owner_or_admin(note: Note, auth: TokenClaims) -> None:
    """Raise 403 unless the caller wrote the note or is a tenant admin."""
    if note.user_id != auth.user_id and auth.role != UserRole.ADMIN:
        raise Forbidden("Permission denied")


@router.get("", response_model=NoteList)
async def list_notes(auth: Auth, session: Session, notes: Notes) -> NoteList:
    rows = await notes.list_for_tenant(session, auth.tenant_id)
    return NoteList(notes=[_to_read(note, author) for note, author in rows])


@router.post("", response_model=NoteEnvelope, status_code=status.HTTP_201_CREATED)
async def create_note(
    request: Request,
    auth: Auth,
    session: Session,
    notes: Notes,
) -> NoteEnvelope:
    title, content = await _read_note_body(request)
    note = await notes.create(session, auth, title, content)
    author = NoteAuthor(id=auth.user_id, email=auth.email, role=auth.role)
    return NoteEnvelope(note=_to_read(note, author))


@router.get("/{note_id}", response_model=NoteEnvelope)
async def get_note(
    note_id: str,
    auth: Auth,
    session: Session,
    notes: Notes,
) -> NoteEnvelope:
    note, author = await notes.get_for_tenant(session, auth.tenant_id, note_id)
    return NoteEnvelope(note=_to_read(note, author))


@router.put("/{note_id}", response_model=NoteEnvelope)
async def update_note(
    note_id: str,
    request: Request,
    auth: Auth,
    session: Session,
    notes: Notes,
) -> NoteEnvelope:
    title, content = await _read_note_body(request)
    note, author = await notes.get_for_tenant(session, auth.tenant_id, note_id)
    _require_owner_or_admin(note, auth)

    note = await notes.update(session, note, title, content)
    return NoteEnvelope(note=_to_read(note, author))


@router.delete("/{note_id}", response_model=DeleteResponse)
async def delete_note(
    note_id: str,
    auth: Auth,
    session: Session,
    notes: Notes,
) -> DeleteResponse:
    note, _author = await notes.get_for_tenant(session, auth.tenant_id, note_id)
    _require_owner_or_admin(note, auth)

    await notes.delete(session, note)
    return DeleteResponse(message="Note deleted successfully")
