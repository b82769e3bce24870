"""Test configuration and fixtures."""

import pytest

from forumcore.config import AuthSettings, ForumSettings
from forumcore.domain.service import JWTService
from tests.factories import FrozenClock


@pytest.fixture
def forum_settings() -> ForumSettings:
    """Default reply and voting rules."""
    return ForumSettings()


@pytest.fixture
def jwt_service() -> JWTService:
    """JWT service with the default test secret."""
    return JWTService(auth_settings=AuthSettings())


@pytest.fixture
def clock() -> FrozenClock:
    """Clock frozen at the factories' base time."""
    return FrozenClock()
