"""JWT helpers for the bearer tokens issued by the auth service."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import jwt

from cookbook.core.settings import settings


def create_access_token(subject: str, extra_claims: dict[str, str] | None = None) -> str:
    """Create a signed access token whose ``sub`` claim is the user id."""
    to_encode: dict[str, object] = {"sub": subject}
    if extra_claims:
        to_encode.update(extra_claims)
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_subject(token: str) -> str | None:
    """Return the ``sub`` claim of a valid token.

    Raises:
        jose.JWTError: If the token signature or expiry is invalid.
    """
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    subject = payload.get("sub")
    return str(subject) if subject is not None else None


@dataclass(frozen=True)
class Actor:
    """Authenticated caller as seen by the services."""

    id: str
    is_elevated: bool = False

    def can_edit(self, author_id: str) -> bool:
        """Return True if the actor authored the content or holds elevated rights."""
        return self.is_elevated or self.id == author_id
