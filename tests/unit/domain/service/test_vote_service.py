"""Unit tests for VoteService."""

import asyncio
import random
from uuid import uuid4

import pytest

from forumcore.domain.error import (
    ContentDeletedError,
    DailyVoteLimitError,
    InsufficientStandingError,
    InvalidVoteValueError,
    NotFoundError,
    SelfVoteError,
    TopicLockedError,
)
from forumcore.domain.repository import ReplyRepository, TopicRepository, VoteRepository
from forumcore.domain.service import VoteService
from forumcore.domain.value import Role, Subject, SubjectType, UserId, VoteValue
from tests.factories import BASE_TIME, FrozenClock, make_actor, make_reply, make_topic
from tests.harness import create_env_fixture

# Unit test fixture - in-memory persistence, no database needed
unit_env = create_env_fixture()


async def _reply_subject(env, **reply_overrides) -> Subject:
    topic = make_topic()
    await (await env.get(TopicRepository)).save(topic)
    reply = make_reply(topic, **reply_overrides)
    await (await env.get(ReplyRepository)).save(reply)
    return Subject(subject_type=SubjectType.REPLY, subject_id=reply.id)


class TestCastVote:
    """Tests for cast_vote toggle semantics."""

    @pytest.mark.asyncio
    async def test_upvote_then_repeat_then_downvote(self, unit_env):
        """+1, +1, -1 from one user moves the score 1, 0, -1."""
        # Arrange
        vote_service = await unit_env.get(VoteService)
        subject = await _reply_subject(unit_env)
        user_id = UserId(uuid4())

        # Act & Assert
        first = await vote_service.cast_vote(subject, user_id, VoteValue.UP)
        assert (first.score, first.user_vote) == (1, VoteValue.UP)

        second = await vote_service.cast_vote(subject, user_id, VoteValue.UP)
        assert (second.score, second.user_vote) == (0, VoteValue.NONE)

        third = await vote_service.cast_vote(
            subject, user_id, VoteValue.DOWN, can_downvote=True
        )
        assert (third.score, third.user_vote) == (-1, VoteValue.DOWN)

    @pytest.mark.asyncio
    async def test_repeat_cast_removes_vote_row(self, unit_env):
        """Retracting a vote deletes the row instead of storing a zero."""
        vote_service = await unit_env.get(VoteService)
        vote_repo = await unit_env.get(VoteRepository)
        subject = await _reply_subject(unit_env)
        user_id = UserId(uuid4())

        await vote_service.cast_vote(subject, user_id, VoteValue.UP)
        await vote_service.cast_vote(subject, user_id, VoteValue.UP)

        assert await vote_repo.find_by_user_and_subject(subject, user_id) is None
        assert await vote_service.get_user_vote(subject, user_id) == VoteValue.NONE

    @pytest.mark.asyncio
    async def test_none_always_retracts(self, unit_env):
        """Casting NONE clears the vote and is a no-op without one."""
        vote_service = await unit_env.get(VoteService)
        subject = await _reply_subject(unit_env)
        user_id = UserId(uuid4())

        empty = await vote_service.cast_vote(subject, user_id, VoteValue.NONE)
        assert (empty.score, empty.user_vote) == (0, VoteValue.NONE)

        await vote_service.cast_vote(subject, user_id, VoteValue.UP)
        cleared = await vote_service.cast_vote(subject, user_id, VoteValue.NONE)
        assert (cleared.score, cleared.user_vote) == (0, VoteValue.NONE)

    @pytest.mark.asyncio
    async def test_switching_direction_replaces_vote(self, unit_env):
        """Down after up swings the score by two."""
        vote_service = await unit_env.get(VoteService)
        subject = await _reply_subject(unit_env)
        user_id = UserId(uuid4())

        await vote_service.cast_vote(subject, user_id, VoteValue.UP)
        outcome = await vote_service.cast_vote(
            subject, user_id, VoteValue.DOWN, can_downvote=True
        )

        assert outcome.score == -1
        assert outcome.user_vote == VoteValue.DOWN

    @pytest.mark.asyncio
    async def test_downvote_without_standing_changes_nothing(self, unit_env):
        """Downvote without permission fails and leaves the vote in place."""
        vote_service = await unit_env.get(VoteService)
        subject = await _reply_subject(unit_env)
        user_id = UserId(uuid4())
        await vote_service.cast_vote(subject, user_id, VoteValue.UP)

        with pytest.raises(InsufficientStandingError):
            await vote_service.cast_vote(subject, user_id, VoteValue.DOWN)

        assert await vote_service.get_score(subject) == 1
        assert await vote_service.get_user_vote(subject, user_id) == VoteValue.UP

    @pytest.mark.asyncio
    async def test_unknown_subject_raises_not_found(self, unit_env):
        vote_service = await unit_env.get(VoteService)
        subject = Subject(subject_type=SubjectType.TOPIC, subject_id=uuid4())

        with pytest.raises(NotFoundError):
            await vote_service.cast_vote(subject, UserId(uuid4()), VoteValue.UP)

    @pytest.mark.asyncio
    async def test_vote_on_deleted_reply_rejected(self, unit_env):
        vote_service = await unit_env.get(VoteService)
        subject = await _reply_subject(unit_env, is_deleted=True, content="[Deleted]")

        with pytest.raises(ContentDeletedError):
            await vote_service.cast_vote(subject, UserId(uuid4()), VoteValue.UP)

    @pytest.mark.asyncio
    async def test_self_vote_rejected(self, unit_env):
        """Authors cannot vote on their own topic or reply."""
        vote_service = await unit_env.get(VoteService)
        author = make_actor()
        topic = make_topic(author=author)
        await (await unit_env.get(TopicRepository)).save(topic)
        reply = make_reply(topic, author=author)
        await (await unit_env.get(ReplyRepository)).save(reply)
        user_id = UserId(author.user_id)

        with pytest.raises(SelfVoteError):
            await vote_service.cast_vote(
                Subject(subject_type=SubjectType.TOPIC, subject_id=topic.id),
                user_id,
                VoteValue.UP,
            )
        with pytest.raises(SelfVoteError):
            await vote_service.cast_vote(
                Subject(subject_type=SubjectType.REPLY, subject_id=reply.id),
                user_id,
                VoteValue.DOWN,
                can_downvote=True,
            )

        assert await vote_service.get_scores(SubjectType.REPLY, [reply.id]) == {
            reply.id: 0
        }

    @pytest.mark.asyncio
    async def test_locked_topic_rejects_votes(self, unit_env):
        """A locked topic freezes votes on itself and on its replies."""
        vote_service = await unit_env.get(VoteService)
        topic = make_topic(is_locked=True)
        await (await unit_env.get(TopicRepository)).save(topic)
        reply = make_reply(topic)
        await (await unit_env.get(ReplyRepository)).save(reply)

        for subject in (
            Subject(subject_type=SubjectType.TOPIC, subject_id=topic.id),
            Subject(subject_type=SubjectType.REPLY, subject_id=reply.id),
        ):
            with pytest.raises(TopicLockedError):
                await vote_service.cast_vote(subject, UserId(uuid4()), VoteValue.UP)

    @pytest.mark.asyncio
    async def test_votes_on_topics(self, unit_env):
        """Topics are subjects too."""
        vote_service = await unit_env.get(VoteService)
        topic = make_topic()
        await (await unit_env.get(TopicRepository)).save(topic)
        subject = Subject(subject_type=SubjectType.TOPIC, subject_id=topic.id)

        outcome = await vote_service.cast_vote(subject, UserId(uuid4()), VoteValue.UP)

        assert outcome.score == 1

    @pytest.mark.asyncio
    async def test_hidden_flag_at_threshold(self, unit_env):
        """Scores at or below the auto-hide threshold are reported hidden."""
        vote_service = await unit_env.get(VoteService)
        subject = await _reply_subject(unit_env)
        vote_service.auto_hide_threshold = -1

        outcome = await vote_service.cast_vote(
            subject, UserId(uuid4()), VoteValue.DOWN, can_downvote=True
        )

        assert outcome.hidden is True


class TestScore:
    """Score is always the live sum of per-user votes."""

    @pytest.mark.asyncio
    async def test_score_equals_sum_of_user_votes(self, unit_env):
        vote_service = await unit_env.get(VoteService)
        subject = await _reply_subject(unit_env)
        users = [UserId(uuid4()) for _ in range(6)]
        rng = random.Random(7)

        for _ in range(60):
            user_id = rng.choice(users)
            requested = rng.choice(list(VoteValue))
            await vote_service.cast_vote(subject, user_id, requested, can_downvote=True)

            votes = [await vote_service.get_user_vote(subject, u) for u in users]
            assert await vote_service.get_score(subject) == sum(int(v) for v in votes)

    @pytest.mark.asyncio
    async def test_get_scores_fills_missing_with_zero(self, unit_env):
        vote_service = await unit_env.get(VoteService)
        subject = await _reply_subject(unit_env)
        await vote_service.cast_vote(subject, UserId(uuid4()), VoteValue.UP)
        other = uuid4()

        scores = await vote_service.get_scores(
            SubjectType.REPLY, [subject.subject_id, other]
        )

        assert scores == {subject.subject_id: 1, other: 0}

    @pytest.mark.asyncio
    async def test_get_score_unknown_subject(self, unit_env):
        vote_service = await unit_env.get(VoteService)

        with pytest.raises(NotFoundError):
            await vote_service.get_score(
                Subject(subject_type=SubjectType.REPLY, subject_id=uuid4())
            )


class TestConcurrentCasts:
    """Racing casts are serialized per (subject, user)."""

    @pytest.mark.asyncio
    async def test_same_user_racing_toggles_lose_no_update(self, unit_env):
        """Ten racing upvotes from one user toggle ten times: back to zero."""
        vote_service = await unit_env.get(VoteService)
        subject = await _reply_subject(unit_env)
        user_id = UserId(uuid4())

        await asyncio.gather(
            *(vote_service.cast_vote(subject, user_id, VoteValue.UP) for _ in range(10))
        )

        assert await vote_service.get_score(subject) == 0
        assert await vote_service.get_user_vote(subject, user_id) == VoteValue.NONE

    @pytest.mark.asyncio
    async def test_different_users_do_not_interfere(self, unit_env):
        vote_service = await unit_env.get(VoteService)
        subject = await _reply_subject(unit_env)

        await asyncio.gather(
            *(
                vote_service.cast_vote(subject, UserId(uuid4()), VoteValue.UP)
                for _ in range(25)
            )
        )

        assert await vote_service.get_score(subject) == 25


class TestDailyVoteLimit:
    """New vote rows per UTC day are capped by forum.daily_vote_limit."""

    @pytest.mark.asyncio
    async def test_third_new_vote_refused(self, unit_env):
        vote_service = await unit_env.get(VoteService)
        vote_service.daily_vote_limit = 2
        user_id = UserId(uuid4())
        subjects = [await _reply_subject(unit_env) for _ in range(3)]

        for subject in subjects[:2]:
            await vote_service.cast_vote(subject, user_id, VoteValue.UP)

        with pytest.raises(DailyVoteLimitError):
            await vote_service.cast_vote(subjects[2], user_id, VoteValue.UP)
        assert await vote_service.get_score(subjects[2]) == 0

    @pytest.mark.asyncio
    async def test_changes_and_retractions_are_free(self, unit_env):
        """Only creating a row counts; switching or retracting does not."""
        vote_service = await unit_env.get(VoteService)
        vote_service.daily_vote_limit = 1
        user_id = UserId(uuid4())
        subject = await _reply_subject(unit_env)
        await vote_service.cast_vote(subject, user_id, VoteValue.UP)

        switched = await vote_service.cast_vote(
            subject, user_id, VoteValue.DOWN, can_downvote=True
        )
        retracted = await vote_service.cast_vote(subject, user_id, VoteValue.NONE)

        assert switched.user_vote == VoteValue.DOWN
        assert retracted.user_vote == VoteValue.NONE

    @pytest.mark.asyncio
    async def test_allowance_resets_at_utc_midnight(self, unit_env):
        vote_service = await unit_env.get(VoteService)
        vote_service.daily_vote_limit = 1
        clock = FrozenClock(BASE_TIME.replace(hour=23, minute=30))
        vote_service.clock = clock
        user_id = UserId(uuid4())
        first, second = await _reply_subject(unit_env), await _reply_subject(unit_env)
        await vote_service.cast_vote(first, user_id, VoteValue.UP)

        with pytest.raises(DailyVoteLimitError):
            await vote_service.cast_vote(second, user_id, VoteValue.UP)

        clock.advance(hours=1)
        outcome = await vote_service.cast_vote(second, user_id, VoteValue.UP)
        assert outcome.user_vote == VoteValue.UP

    @pytest.mark.asyncio
    async def test_limit_disabled(self, unit_env):
        vote_service = await unit_env.get(VoteService)
        vote_service.daily_vote_limit = None
        user_id = UserId(uuid4())

        for _ in range(3):
            subject = await _reply_subject(unit_env)
            outcome = await vote_service.cast_vote(subject, user_id, VoteValue.UP)
            assert outcome.score == 1


class TestVoteValue:
    """Boundary mapping of raw integers."""

    def test_parse_accepts_only_known_values(self):
        assert VoteValue.parse(1) is VoteValue.UP
        assert VoteValue.parse(-1) is VoteValue.DOWN
        assert VoteValue.parse(0) is VoteValue.NONE

    @pytest.mark.parametrize("raw", [2, -2, True])
    def test_parse_rejects_out_of_range(self, raw):
        with pytest.raises(InvalidVoteValueError):
            VoteValue.parse(raw)

    def test_actor_role_grants_moderation(self):
        assert make_actor(Role.ADMIN).is_moderator
        assert not make_actor().is_moderator
