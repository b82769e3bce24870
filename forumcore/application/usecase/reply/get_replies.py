"""Get replies use cases (nested tree and capped-depth flat list)."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from forumcore.config import ForumSettings
from forumcore.domain.model import ThreadNode
from forumcore.domain.service import (
    ReplyService,
    TopicService,
    VoteService,
    assemble_thread,
    flatten_thread,
)
from forumcore.domain.value import (
    Actor,
    SortMode,
    SubjectType,
    TopicId,
    UserId,
    VoteValue,
)

from .view import FlatReplyItem, ReplyNodeItem, to_reply_item


class GetRepliesRequest(BaseModel):
    """Get replies request."""

    topic_id: str  # UUID string
    sort: SortMode = SortMode.OLDEST
    viewer: Actor | None = None


class GetRepliesResponse(BaseModel):
    """Reply tree of a topic."""

    topic_id: str
    sort: SortMode
    max_depth: int  # Deepest nesting level in replies
    replies: list[ReplyNodeItem]
    total: int


class GetFlatRepliesRequest(GetRepliesRequest):
    """Get flat replies request."""

    max_depth: int | None = None  # Defaults to forum.default_max_depth


class GetFlatRepliesResponse(BaseModel):
    """Replies in pre-order with capped display levels."""

    topic_id: str
    sort: SortMode
    max_depth: int
    replies: list[FlatReplyItem]
    total: int


class _ThreadLoader:
    """Loads a topic's replies and assembles the annotated forest."""

    def __init__(
        self,
        topic_service: TopicService,
        reply_service: ReplyService,
        vote_service: VoteService,
    ) -> None:
        self.topic_service = topic_service
        self.reply_service = reply_service
        self.vote_service = vote_service

    async def load(self, request: GetRepliesRequest):
        topic_id = TopicId(UUID(request.topic_id))
        topic = await self.topic_service.get_topic(topic_id)
        replies = await self.reply_service.list_by_topic(topic_id)

        reply_ids: list[UUID] = [r.id for r in replies]
        scores = await self.vote_service.get_scores(SubjectType.REPLY, reply_ids)
        user_votes = {}
        if request.viewer:
            user_votes = await self.vote_service.get_user_votes(
                SubjectType.REPLY, reply_ids, UserId(request.viewer.user_id)
            )

        forest = assemble_thread(replies, request.sort, scores)

        def item(node: ThreadNode):
            return to_reply_item(
                node.reply,
                topic=topic,
                score=node.score,
                user_vote=user_votes.get(node.reply.id, VoteValue.NONE),
                viewer=request.viewer,
            )

        return forest, item


class GetRepliesUseCase(_ThreadLoader):
    """Use case for getting a topic's replies as a sorted tree."""

    def __init__(
        self,
        topic_service: TopicService,
        reply_service: ReplyService,
        vote_service: VoteService,
        forum_settings: ForumSettings,
    ) -> None:
        super().__init__(topic_service, reply_service, vote_service)
        self.max_tree_depth = forum_settings.max_tree_depth

    async def execute(self, request: GetRepliesRequest) -> GetRepliesResponse:
        """Execute get replies flow.

        Nesting stops at forum.max_tree_depth: replies below that level are
        listed in pre-order as children of their ancestor at the last level,
        so no reply is dropped however deep the thread goes.

        Args:
            request: Topic, sort mode and optional viewer

        Returns:
            Root replies with children sorted at every level

        Raises:
            NotFoundError: If the topic does not exist
            StructuralInvariantError: If stored replies do not form a tree
        """
        with logfire.span(
            "get_replies.execute", topic_id=request.topic_id, sort=request.sort.value
        ):
            forest, item = await self.load(request)

            roots: list[ReplyNodeItem] = []
            # open_levels[n] is the latest item emitted at level n
            open_levels: list[ReplyNodeItem] = []
            flat = flatten_thread(forest, self.max_tree_depth)
            for entry in flat:
                level = entry.level
                node_item = ReplyNodeItem(**item(entry.node).model_dump(), children=[])
                del open_levels[level:]
                if level:
                    open_levels[-1].children.append(node_item)
                else:
                    roots.append(node_item)
                open_levels.append(node_item)

            return GetRepliesResponse(
                topic_id=request.topic_id,
                sort=request.sort,
                max_depth=self.max_tree_depth,
                replies=roots,
                total=len(flat),
            )


class GetFlatRepliesUseCase(_ThreadLoader):
    """Use case for getting a topic's replies as a capped-depth sequence."""

    def __init__(
        self,
        topic_service: TopicService,
        reply_service: ReplyService,
        vote_service: VoteService,
        forum_settings: ForumSettings,
    ) -> None:
        super().__init__(topic_service, reply_service, vote_service)
        self.default_max_depth = forum_settings.default_max_depth

    async def execute(self, request: GetFlatRepliesRequest) -> GetFlatRepliesResponse:
        """Execute get flat replies flow.

        Raises:
            NotFoundError: If the topic does not exist
            ValidationError: If max_depth is negative
        """
        max_depth = (
            request.max_depth
            if request.max_depth is not None
            else self.default_max_depth
        )
        with logfire.span(
            "get_flat_replies.execute",
            topic_id=request.topic_id,
            sort=request.sort.value,
            max_depth=max_depth,
        ):
            forest, item = await self.load(request)
            flat = flatten_thread(forest, max_depth)

            return GetFlatRepliesResponse(
                topic_id=request.topic_id,
                sort=request.sort,
                max_depth=max_depth,
                replies=[
                    FlatReplyItem(reply=item(entry.node), level=entry.level)
                    for entry in flat
                ],
                total=len(flat),
            )
