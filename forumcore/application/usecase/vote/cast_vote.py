"""Cast vote use case."""

from uuid import UUID

from pydantic import BaseModel

from forumcore.domain.service import VoteService
from forumcore.domain.value import Actor, Subject, SubjectType, UserId, VoteValue


class CastVoteRequest(BaseModel):
    """Cast vote request."""

    subject_type: SubjectType
    subject_id: str  # UUID string
    value: int  # -1, 0 or 1
    actor: Actor  # Authenticated user


class CastVoteResponse(BaseModel):
    """Cast vote response with the authoritative state."""

    subject_type: SubjectType
    subject_id: str
    score: int
    user_vote: int
    hidden: bool


class CastVoteUseCase:
    """Use case for casting, changing or retracting a vote."""

    def __init__(self, vote_service: VoteService) -> None:
        """Initialize cast vote use case.

        Args:
            vote_service: Vote domain service
        """
        self.vote_service = vote_service

    async def execute(self, request: CastVoteRequest) -> CastVoteResponse:
        """Execute cast vote flow.

        Args:
            request: Cast vote request

        Returns:
            New score and the user's effective vote

        Raises:
            InvalidVoteValueError: If value is not -1, 0 or 1
            InsufficientStandingError: Downvote without permission
            NotFoundError: If the subject does not exist
            ContentDeletedError: If the subject is a deleted reply
        """
        requested = VoteValue.parse(request.value)
        subject = Subject(
            subject_type=request.subject_type,
            subject_id=UUID(request.subject_id),
        )

        outcome = await self.vote_service.cast_vote(
            subject=subject,
            user_id=UserId(request.actor.user_id),
            requested=requested,
            can_downvote=request.actor.can_downvote,
        )

        return CastVoteResponse(
            subject_type=subject.subject_type,
            subject_id=str(subject.subject_id),
            score=outcome.score,
            user_vote=int(outcome.user_vote),
            hidden=outcome.hidden,
        )
