"""Unit tests for reply listing use cases."""

import pytest

from forumcore.application.usecase.reply import (
    GetFlatRepliesRequest,
    GetFlatRepliesUseCase,
    GetRepliesRequest,
    GetRepliesUseCase,
)
from forumcore.domain.error import ValidationError
from forumcore.domain.model import HIDDEN_CONTENT
from forumcore.domain.repository import ReplyRepository, TopicRepository
from forumcore.domain.service import AcceptanceService, VoteService
from forumcore.domain.value import Role, SortMode, Subject, SubjectType, UserId, VoteValue
from tests.factories import make_actor, make_reply, make_topic
from tests.harness import create_env_fixture

# Unit test fixture - in-memory persistence, no database needed
unit_env = create_env_fixture()


async def _seed_thread(env):
    """Question with r1 (score 0) and r2 (score 3), plus a reply under r1."""
    author = make_actor()
    topic = make_topic(author=author)
    await (await env.get(TopicRepository)).save(topic)
    reply_repo = await env.get(ReplyRepository)
    r1 = make_reply(topic, minutes=0)
    r2 = make_reply(topic, minutes=1)
    r1_child = make_reply(topic, parent=r1, minutes=2)
    for reply in (r1, r2, r1_child):
        await reply_repo.save(reply)

    vote_service = await env.get(VoteService)
    for _ in range(3):
        await vote_service.cast_vote(
            Subject(subject_type=SubjectType.REPLY, subject_id=r2.id),
            UserId(make_actor().user_id),
            VoteValue.UP,
        )
    return author, topic, r1, r2, r1_child


class TestGetRepliesUseCase:
    """Tests for the nested listing."""

    @pytest.mark.asyncio
    async def test_most_voted_and_oldest_orders(self, unit_env):
        _, topic, r1, r2, r1_child = await _seed_thread(unit_env)
        use_case = await unit_env.get(GetRepliesUseCase)

        most_voted = await use_case.execute(
            GetRepliesRequest(topic_id=str(topic.id), sort=SortMode.MOST_VOTED)
        )
        oldest = await use_case.execute(
            GetRepliesRequest(topic_id=str(topic.id), sort=SortMode.OLDEST)
        )

        assert [r.reply_id for r in most_voted.replies] == [str(r2.id), str(r1.id)]
        assert most_voted.replies[0].score == 3
        assert [r.reply_id for r in oldest.replies] == [str(r1.id), str(r2.id)]
        assert [c.reply_id for c in oldest.replies[0].children] == [str(r1_child.id)]
        assert oldest.total == 3

    @pytest.mark.asyncio
    async def test_accepted_flag_and_viewer_vote(self, unit_env):
        author, topic, r1, r2, _ = await _seed_thread(unit_env)
        await (await unit_env.get(AcceptanceService)).accept(topic.id, r1.id, author)
        viewer = make_actor()
        await (await unit_env.get(VoteService)).cast_vote(
            Subject(subject_type=SubjectType.REPLY, subject_id=r2.id),
            UserId(viewer.user_id),
            VoteValue.UP,
        )
        use_case = await unit_env.get(GetRepliesUseCase)

        response = await use_case.execute(
            GetRepliesRequest(topic_id=str(topic.id), viewer=viewer)
        )

        by_id = {r.reply_id: r for r in response.replies}
        assert by_id[str(r1.id)].is_accepted is True
        assert by_id[str(r2.id)].is_accepted is False
        assert by_id[str(r2.id)].user_vote == 1
        assert by_id[str(r1.id)].user_vote == 0

    @pytest.mark.asyncio
    async def test_hidden_content_masked_for_members(self, unit_env):
        _, topic, r1, _, _ = await _seed_thread(unit_env)
        reply_repo = await unit_env.get(ReplyRepository)
        await reply_repo.save(r1.model_copy(update={"is_hidden": True}))
        use_case = await unit_env.get(GetRepliesUseCase)

        as_member = await use_case.execute(
            GetRepliesRequest(topic_id=str(topic.id), viewer=make_actor())
        )
        as_moderator = await use_case.execute(
            GetRepliesRequest(topic_id=str(topic.id), viewer=make_actor(Role.MODERATOR))
        )

        assert as_member.replies[0].content == HIDDEN_CONTENT
        assert as_moderator.replies[0].content == r1.content

    @pytest.mark.asyncio
    async def test_nesting_stops_at_max_tree_depth(self, unit_env):
        """Replies below the last level hang off it in pre-order."""
        topic = make_topic()
        await (await unit_env.get(TopicRepository)).save(topic)
        reply_repo = await unit_env.get(ReplyRepository)
        chain, parent = [], None
        for minutes in range(5):
            parent = make_reply(topic, parent=parent, minutes=minutes)
            await reply_repo.save(parent)
            chain.append(parent)
        use_case = await unit_env.get(GetRepliesUseCase)
        use_case.max_tree_depth = 2

        response = await use_case.execute(GetRepliesRequest(topic_id=str(topic.id)))

        level_1 = response.replies[0].children[0]
        assert [c.reply_id for c in level_1.children] == [str(r.id) for r in chain[2:]]
        assert all(c.children == [] for c in level_1.children)
        assert response.max_depth == 2
        assert response.total == 5

    @pytest.mark.asyncio
    async def test_very_deep_chain_serializes(self, unit_env):
        topic = make_topic()
        await (await unit_env.get(TopicRepository)).save(topic)
        reply_repo = await unit_env.get(ReplyRepository)
        parent = None
        for minutes in range(400):
            parent = make_reply(topic, parent=parent, minutes=minutes)
            await reply_repo.save(parent)
        use_case = await unit_env.get(GetRepliesUseCase)

        response = await use_case.execute(GetRepliesRequest(topic_id=str(topic.id)))

        assert response.total == 400
        assert len(response.model_dump_json()) > 0


class TestGetFlatRepliesUseCase:
    """Tests for the capped-depth listing."""

    @pytest.mark.asyncio
    async def test_flat_listing_levels(self, unit_env):
        _, topic, r1, r2, r1_child = await _seed_thread(unit_env)
        use_case = await unit_env.get(GetFlatRepliesUseCase)

        response = await use_case.execute(
            GetFlatRepliesRequest(topic_id=str(topic.id), max_depth=0)
        )

        assert [e.reply.reply_id for e in response.replies] == [
            str(r1.id),
            str(r1_child.id),
            str(r2.id),
        ]
        assert [e.level for e in response.replies] == [0, 0, 0]
        assert response.total == 3

    @pytest.mark.asyncio
    async def test_default_depth_from_settings(self, unit_env):
        _, topic, *_ = await _seed_thread(unit_env)
        use_case = await unit_env.get(GetFlatRepliesUseCase)

        response = await use_case.execute(GetFlatRepliesRequest(topic_id=str(topic.id)))

        assert response.max_depth == 3

    @pytest.mark.asyncio
    async def test_negative_depth_rejected(self, unit_env):
        _, topic, *_ = await _seed_thread(unit_env)
        use_case = await unit_env.get(GetFlatRepliesUseCase)

        with pytest.raises(ValidationError):
            await use_case.execute(
                GetFlatRepliesRequest(topic_id=str(topic.id), max_depth=-1)
            )
