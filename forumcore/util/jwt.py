"""Session tokens.

Users authenticate elsewhere; the forum only needs to know who is acting
and with which role. Tokens are HS256 JWTs carried in the ``auth_token``
cookie.
"""

from datetime import datetime, timedelta

import jwt
from pydantic import BaseModel, ValidationError

from forumcore.config import AuthSettings
from forumcore.domain.value import Role
from forumcore.util.clock import utc_now

REQUIRED_CLAIMS = ["exp", "iat", "sub"]


class JWTError(Exception):
    """The token is missing, malformed, forged or expired."""


class SessionClaims(BaseModel):
    sub: str
    handle: str
    role: Role = Role.MEMBER
    iat: datetime
    exp: datetime

    @property
    def user_id(self) -> str:
        return self.sub


def issue_token(
    user_id: str,
    handle: str,
    role: Role,
    settings: AuthSettings,
    now: datetime | None = None,
) -> str:
    issued_at = now or utc_now()
    claims = {
        "sub": user_id,
        "handle": handle,
        "role": role.value,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.jwt_expiry_days),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: AuthSettings) -> SessionClaims:
    """Check the signature and expiry of ``token`` and return its claims.

    Raises:
        JWTError: Any reason the token cannot be trusted, including an
            unknown role.
    """
    try:
        raw = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as e:
        raise JWTError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise JWTError(f"Invalid token: {e}") from e

    try:
        return SessionClaims.model_validate(raw)
    except ValidationError as e:
        raise JWTError("Token claims are malformed") from e
