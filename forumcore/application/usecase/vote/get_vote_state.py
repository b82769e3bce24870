"""Get vote state use case."""

from uuid import UUID

from pydantic import BaseModel

from forumcore.domain.service import VoteService
from forumcore.domain.value import Actor, Subject, SubjectType, UserId, VoteValue


class GetVoteStateRequest(BaseModel):
    """Get vote state request."""

    subject_type: SubjectType
    subject_id: str  # UUID string
    viewer: Actor | None = None  # Anonymous viewers get user_vote 0


class GetVoteStateResponse(BaseModel):
    """Current score and the viewer's vote."""

    score: int
    user_vote: int


class GetVoteStateUseCase:
    """Use case for reading a subject's live score."""

    def __init__(self, vote_service: VoteService) -> None:
        self.vote_service = vote_service

    async def execute(self, request: GetVoteStateRequest) -> GetVoteStateResponse:
        """Execute get vote state flow.

        Raises:
            NotFoundError: If the subject does not exist
        """
        subject = Subject(
            subject_type=request.subject_type,
            subject_id=UUID(request.subject_id),
        )
        score = await self.vote_service.get_score(subject)

        user_vote = VoteValue.NONE
        if request.viewer:
            user_vote = await self.vote_service.get_user_vote(
                subject, UserId(request.viewer.user_id)
            )

        return GetVoteStateResponse(score=score, user_vote=int(user_vote))
