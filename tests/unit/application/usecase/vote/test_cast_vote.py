"""Unit tests for vote use cases."""

import pytest

from forumcore.application.usecase.vote import (
    CastVoteRequest,
    CastVoteUseCase,
    GetVoteStateRequest,
    GetVoteStateUseCase,
)
from forumcore.domain.error import InvalidVoteValueError
from forumcore.domain.repository import TopicRepository
from forumcore.domain.value import Role, SubjectType
from tests.factories import make_actor, make_topic
from tests.harness import create_env_fixture

# Unit test fixture - in-memory persistence, no database needed
unit_env = create_env_fixture()


class TestCastVoteUseCase:
    """Tests for CastVoteUseCase."""

    @pytest.mark.asyncio
    async def test_cast_and_read_back(self, unit_env):
        # Arrange
        topic = make_topic()
        await (await unit_env.get(TopicRepository)).save(topic)
        cast = await unit_env.get(CastVoteUseCase)
        get_state = await unit_env.get(GetVoteStateUseCase)
        voter = make_actor()

        # Act
        response = await cast.execute(
            CastVoteRequest(
                subject_type=SubjectType.TOPIC,
                subject_id=str(topic.id),
                value=1,
                actor=voter,
            )
        )

        # Assert
        assert response.score == 1
        assert response.user_vote == 1
        assert response.hidden is False

        mine = await get_state.execute(
            GetVoteStateRequest(
                subject_type=SubjectType.TOPIC, subject_id=str(topic.id), viewer=voter
            )
        )
        anonymous = await get_state.execute(
            GetVoteStateRequest(subject_type=SubjectType.TOPIC, subject_id=str(topic.id))
        )
        assert (mine.score, mine.user_vote) == (1, 1)
        assert (anonymous.score, anonymous.user_vote) == (1, 0)

    @pytest.mark.asyncio
    async def test_out_of_range_value_rejected(self, unit_env):
        topic = make_topic()
        await (await unit_env.get(TopicRepository)).save(topic)
        cast = await unit_env.get(CastVoteUseCase)

        with pytest.raises(InvalidVoteValueError):
            await cast.execute(
                CastVoteRequest(
                    subject_type=SubjectType.TOPIC,
                    subject_id=str(topic.id),
                    value=2,
                    actor=make_actor(Role.ADMIN),
                )
            )
