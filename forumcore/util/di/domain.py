"""Domain service providers."""

from dishka import Scope, provide

from forumcore.domain.service import (
    AcceptanceService,
    JWTService,
    ReplyService,
    TopicService,
    VoteService,
)
from forumcore.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Domain services, one set per request.

    They share the request's repositories, so everything a request does
    happens in the same transaction and under the same locks.
    """

    scope = Scope.REQUEST

    jwt = provide(JWTService)
    votes = provide(VoteService)
    replies = provide(ReplyService)
    topics = provide(TopicService)
    acceptance = provide(AcceptanceService)
