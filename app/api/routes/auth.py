"""Authentication endpoints: login + current user."""

from fastapi import APIRouter
from pydantic import BaseModel
from sqlmodel import select

from app.api.deps import Auth, Session
from app.core.errors import InvalidCredentials, NotFound, ValidationError
from app.core.security import TokenClaims, create_jwt, hash_password, verify_password
from app.models.base import CamelModel
from app.models.tenant import Tenant, TenantRead
from app.models.user import User, UserRead

router = APIRouter(prefix="/auth", tags=["auth"])

# Checked when no account matches, so unknown emails cost one Argon2 verify too
_DUMMY_HASH = hash_password("unused-login-placeholder")


# ── Schemas ──────────────────────────────────────────────────

class LoginRequest(CamelModel):
    email: str | None = None
    password: str | None = None
    # Emails are unique per tenant only; the slug picks one account
    tenant_slug: str | None = None


class LoginResponse(BaseModel):
    token: str
    user: UserRead


class MeResponse(BaseModel):
    user: UserRead


def _to_user_read(user: User, tenant: Tenant) -> UserRead:
    return UserRead(
        id=user.id,
        email=user.email,
        role=user.role,
        tenant=TenantRead.model_validate(tenant),
    )


# ── Routes ───────────────────────────────────────────────────

@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, session: Session) -> LoginResponse:
    """Authenticate with email + password, receive a JWT."""
    if not body.email or not body.password:
        raise ValidationError("Email and password are required")

    stmt = (
        select(User, Tenant)
        .join(Tenant, User.tenant_id == Tenant.id)
        .where(User.email == body.email)
        .order_by(User.created_at.asc())  # type: ignore[union-attr]
    )
    if body.tenant_slug:
        stmt = stmt.where(Tenant.slug == body.tenant_slug)
    rows = (await session.execute(stmt)).all()
    if not rows:
        verify_password(body.password, _DUMMY_HASH)
        raise InvalidCredentials()

    for user, tenant in rows:
        if verify_password(body.password, user.password_hash):
            break
    else:
        raise InvalidCredentials()

    token = create_jwt(TokenClaims(
        user_id=user.id,
        email=user.email,
        role=user.role,
        tenant_id=tenant.id,
        tenant_slug=tenant.slug,
    ))

    return LoginResponse(token=token, user=_to_user_read(user, tenant))


@router.get("/me", response_model=MeResponse)
async def get_me(auth: Auth, session: Session) -> MeResponse:
    """Return the current user with the tenant as currently stored."""
    user = await session.get(User, auth.user_id)
    if user is None:
        raise NotFound("User not found")

    tenant = await session.get(Tenant, user.tenant_id)
    if tenant is None:
        raise NotFound("Tenant not found")

    return MeResponse(user=_to_user_read(user, tenant))
