"""Unit tests for JWTService."""

from datetime import timedelta
from uuid import uuid4

import jwt
import pytest

from forumcore.config import AuthSettings
from forumcore.domain.service import JWTService
from forumcore.domain.value import Role
from forumcore.util.clock import utc_now
from forumcore.util.jwt import JWTError, issue_token


class TestJWTService:
    """Token round trip and actor derivation."""

    def test_member_token_yields_actor_without_downvote(self, jwt_service):
        user_id = str(uuid4())
        token = jwt_service.create_token(user_id, "ada")

        actor = jwt_service.get_actor_from_token(token)

        assert str(actor.user_id) == user_id
        assert actor.role == Role.MEMBER
        assert actor.can_downvote is False

    def test_moderator_token_grants_downvote(self, jwt_service):
        token = jwt_service.create_token(str(uuid4()), "mod", Role.MODERATOR)

        actor = jwt_service.get_actor_from_token(token)

        assert actor.is_moderator
        assert actor.can_downvote is True

    def test_downvote_roles_are_configurable(self):
        service = JWTService(AuthSettings(downvote_roles=[Role.MEMBER]))
        token = service.create_token(str(uuid4()), "ada")

        assert service.get_actor_from_token(token).can_downvote is True

    def test_missing_or_invalid_token_is_anonymous(self, jwt_service):
        assert jwt_service.get_actor_from_token(None) is None
        assert jwt_service.get_actor_from_token("not-a-jwt") is None

    def test_token_signed_with_other_secret_rejected(self, jwt_service):
        other = JWTService(AuthSettings(jwt_secret="another-secret"))
        token = other.create_token(str(uuid4()), "eve")

        with pytest.raises(JWTError):
            jwt_service.verify_token(token)

    def test_expired_token_is_anonymous(self, jwt_service):
        settings = jwt_service.auth_settings
        issued = utc_now() - timedelta(days=settings.jwt_expiry_days + 1)
        token = issue_token(str(uuid4()), "old", Role.MEMBER, settings, now=issued)

        with pytest.raises(JWTError, match="expired"):
            jwt_service.verify_token(token)
        assert jwt_service.get_actor_from_token(token) is None

    def test_token_without_subject_rejected(self, jwt_service):
        settings = jwt_service.auth_settings
        now = utc_now()
        token = jwt.encode(
            {"handle": "nobody", "iat": now, "exp": now + timedelta(hours=1)},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(JWTError):
            jwt_service.verify_token(token)

    def test_non_uuid_subject_is_anonymous(self, jwt_service):
        token = jwt_service.create_token("not-a-uuid", "odd")

        assert jwt_service.verify_token(token).user_id == "not-a-uuid"
        assert jwt_service.get_actor_from_token(token) is None
