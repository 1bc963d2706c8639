"""Security utilities: password hashing and identity tokens."""

import uuid
from datetime import datetime, timedelta, timezone

import pydantic
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from app.core.config import get_settings
from app.models.base import CamelModel
from app.models.user import UserRole

settings = get_settings()

# ── Password hashing (Argon2) ────────────────────────────────

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


# ── JWT ───────────────────────────────────────────────────────

class TokenError(Exception):
    """Base class for token verification failures."""


class InvalidToken(TokenError):
    """Signature mismatch, malformed token, or incomplete payload."""


class ExpiredToken(TokenError):
    """Token was valid but is past its ``exp``."""


class TokenClaims(CamelModel):
    """Identity embedded in a token. Trusted verbatim until expiry."""

    user_id: uuid.UUID
    email: str
    role: UserRole
    tenant_id: uuid.UUID
    tenant_slug: str


def create_jwt(claims: TokenClaims, expires_delta: timedelta | None = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.jwt_expire_days))
    payload = {
        **claims.model_dump(mode="json", by_alias=True),
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_jwt(token: str) -> TokenClaims:
    """Verify a JWT and return its claims.

    Raises ExpiredToken past ``exp`` and InvalidToken for anything else
    that fails verification, including payloads missing identity fields.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as exc:
        raise ExpiredToken(str(exc)) from exc
    except JWTError as exc:
        raise InvalidToken(str(exc)) from exc

    try:
        return TokenClaims.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise InvalidToken("Malformed token payload") from exc
