"""FastAPI dependencies for authentication and role checks."""

import logging
from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.core.errors import InsufficientPermissions, InvalidOrExpiredToken, MissingToken
from app.core.security import TokenClaims, TokenError, decode_jwt
from app.models.user import UserRole
from app.services.note_store import NoteStore

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_token(header_value: str | None) -> str | None:
    """Return the token of a ``Bearer <token>`` header, else None."""
    if not header_value or not header_value.startswith(BEARER_PREFIX):
        return None
    return header_value[len(BEARER_PREFIX):]


def authenticate(header_value: str | None) -> TokenClaims:
    """Resolve an Authorization header value to verified claims."""
    token = extract_token(header_value)
    if not token:
        raise MissingToken()

    try:
        return decode_jwt(token)
    except TokenError as exc:
        logger.warning("Rejected bearer token: %s", exc)
        raise InvalidOrExpiredToken() from exc


async def get_auth_context(
    authorization: Annotated[str | None, Header()] = None,
) -> TokenClaims:
    """Claims of the caller. The route never runs if this fails."""
    return authenticate(authorization)


def require_roles(*roles: UserRole) -> Callable[..., Awaitable[TokenClaims]]:
    """Build a dependency that authenticates and then checks the role."""
    allowed = frozenset(roles)

    async def _check_role(
        claims: Annotated[TokenClaims, Depends(get_auth_context)],
    ) -> TokenClaims:
        if claims.role not in allowed:
            raise InsufficientPermissions()
        return claims

    return _check_role


def get_note_store(request: Request) -> NoteStore:
    """The application's single NoteStore instance."""
    return request.app.state.note_store


# Typed shorthand for use in route signatures
Auth = Annotated[TokenClaims, Depends(get_auth_context)]
AdminAuth = Annotated[TokenClaims, Depends(require_roles(UserRole.ADMIN))]
Session = Annotated[AsyncSession, Depends(get_session)]
Notes = Annotated[NoteStore, Depends(get_note_store)]
