"""Use case providers.

Use cases only depend on domain services and settings, so they are wired
straight from their constructor annotations.
"""

from dishka import Scope, provide

from forumcore.application.usecase.reply import (
    CreateReplyUseCase,
    DeleteReplyUseCase,
    GetEditHistoryUseCase,
    GetFlatRepliesUseCase,
    GetRepliesUseCase,
    ModerateReplyUseCase,
    UpdateReplyUseCase,
)
from forumcore.application.usecase.topic import (
    AcceptAnswerUseCase,
    CreateTopicUseCase,
    GetTopicUseCase,
    ModerateTopicUseCase,
)
from forumcore.application.usecase.vote import CastVoteUseCase, GetVoteStateUseCase
from forumcore.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    scope = Scope.REQUEST

    cast_vote = provide(CastVoteUseCase)
    get_vote_state = provide(GetVoteStateUseCase)

    get_replies = provide(GetRepliesUseCase)
    get_flat_replies = provide(GetFlatRepliesUseCase)
    create_reply = provide(CreateReplyUseCase)
    update_reply = provide(UpdateReplyUseCase)
    delete_reply = provide(DeleteReplyUseCase)
    moderate_reply = provide(ModerateReplyUseCase)
    get_edit_history = provide(GetEditHistoryUseCase)

    create_topic = provide(CreateTopicUseCase)
    get_topic = provide(GetTopicUseCase)
    moderate_topic = provide(ModerateTopicUseCase)
    accept_answer = provide(AcceptAnswerUseCase)
