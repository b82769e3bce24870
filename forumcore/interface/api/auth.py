"""Request authentication helpers for the API routes."""

from forumcore.domain.service import JWTService
from forumcore.domain.value import Actor
from forumcore.interface.error import unauthenticated


def require_actor(jwt_service: JWTService, auth_token: str | None) -> Actor:
    """Acting user from the auth_token cookie.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    if not auth_token:
        raise unauthenticated()

    actor = jwt_service.get_actor_from_token(auth_token)
    if actor is None:
        raise unauthenticated("Invalid or expired authentication token")
    return actor
