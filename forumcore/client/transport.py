"""Transports used by the optimistic reconcilers.

A transport performs the authoritative mutation and answers with server
truth. The HTTP implementation lives in forumcore.adapter.http; the ledger
implementation below talks to a VoteService in the same process.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from forumcore.domain.service import VoteService
from forumcore.domain.value import Actor, ReplyId, Subject, UserId, VoteValue


@dataclass(frozen=True)
class VoteState:
    """What a viewer sees for one subject: live score and their own vote."""

    score: int
    user_vote: VoteValue = VoteValue.NONE


class VoteTransport(ABC):
    """Authoritative vote operations for the calling user."""

    @abstractmethod
    async def cast(self, subject: Subject, value: VoteValue) -> VoteState:
        """Cast a vote and return the ledger's result.

        Raises:
            DomainError: The ledger rejected the vote
            TransportError: The ledger could not be reached
        """
        pass

    @abstractmethod
    async def fetch(self, subject: Subject) -> VoteState:
        """Read the current score and the caller's vote."""
        pass


class ReplyEditTransport(ABC):
    """Authoritative reply edits for the calling user."""

    @abstractmethod
    async def edit(
        self, reply_id: ReplyId, content: str, reason: str | None = None
    ) -> str:
        """Edit a reply and return the content as stored.

        Raises:
            DomainError: The edit was rejected
            TransportError: The server could not be reached
        """
        pass


class LedgerVoteTransport(VoteTransport):
    """Vote transport backed by an in-process VoteService."""

    def __init__(self, vote_service: VoteService, actor: Actor) -> None:
        self.vote_service = vote_service
        self.actor = actor

    async def cast(self, subject: Subject, value: VoteValue) -> VoteState:
        outcome = await self.vote_service.cast_vote(
            subject,
            UserId(self.actor.user_id),
            value,
            can_downvote=self.actor.can_downvote,
        )
        return VoteState(score=outcome.score, user_vote=outcome.user_vote)

    async def fetch(self, subject: Subject) -> VoteState:
        score = await self.vote_service.get_score(subject)
        user_vote = await self.vote_service.get_user_vote(
            subject, UserId(self.actor.user_id)
        )
        return VoteState(score=score, user_vote=user_vote)
