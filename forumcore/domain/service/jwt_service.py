"""Turns session tokens into the acting user."""

from uuid import UUID

import logfire

from forumcore.config import AuthSettings
from forumcore.domain.value import Actor, Role
from forumcore.util.jwt import JWTError, SessionClaims, decode_token, issue_token

from .base import Service


class JWTService(Service):
    """Issues session tokens and resolves them to an ``Actor``."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        self.auth_settings = auth_settings

    def create_token(self, user_id: str, handle: str, role: Role = Role.MEMBER) -> str:
        with logfire.span("jwt_service.create_token", user_id=user_id, role=role.value):
            return issue_token(user_id, handle, role, self.auth_settings)

    def verify_token(self, token: str) -> SessionClaims:
        """Decode a token, raising ``JWTError`` when it cannot be trusted."""
        with logfire.span("jwt_service.verify_token"):
            try:
                claims = decode_token(token, self.auth_settings)
            except JWTError as e:
                logfire.warn("Session token rejected", error=str(e))
                raise
            logfire.debug("Session token accepted", user_id=claims.user_id)
            return claims

    def get_actor_from_token(self, token: str | None) -> Actor | None:
        """Resolve the acting user, or ``None`` for anonymous callers.

        A missing or untrusted token means anonymous rather than an error;
        routes that need a user turn ``None`` into 401 themselves.

        The actor may downvote when their role is one of
        ``auth.downvote_roles``.
        """
        if not token:
            return None
        try:
            claims = self.verify_token(token)
            user_id = UUID(claims.user_id)
        except (JWTError, ValueError):
            return None

        return Actor(
            user_id=user_id,
            role=claims.role,
            can_downvote=claims.role in self.auth_settings.downvote_roles,
        )
