"""Vote routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie
from pydantic import BaseModel

from forumcore.application.usecase.vote import (
    CastVoteRequest,
    CastVoteResponse,
    CastVoteUseCase,
    GetVoteStateRequest,
    GetVoteStateResponse,
    GetVoteStateUseCase,
)
from forumcore.domain.error import DomainError
from forumcore.domain.service import JWTService
from forumcore.domain.value import SubjectType
from forumcore.interface.api.auth import require_actor
from forumcore.interface.error import http_error

router = APIRouter(prefix="/votes", tags=["votes"], route_class=DishkaRoute)


class CastVoteAPIRequest(BaseModel):
    """API request body for casting a vote."""

    value: int  # -1, 0 or 1; repeating the current value retracts it


@router.post("/{subject_type}/{subject_id}", response_model=CastVoteResponse)
async def cast_vote(
    subject_type: SubjectType,
    subject_id: UUID,
    request: CastVoteAPIRequest,
    cast_vote_use_case: FromDishka[CastVoteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> CastVoteResponse:
    """Cast, change or retract a vote on a topic or reply.

    Requires authentication. Downvoting requires a role listed in
    auth.downvote_roles.

    Args:
        subject_type: "topic" or "reply"
        subject_id: Subject UUID
        request: Requested vote value
        cast_vote_use_case: Cast vote use case from DI
        jwt_service: JWT service for token verification (injected)
        auth_token: JWT token from cookie

    Returns:
        Authoritative score and the user's effective vote

    Raises:
        HTTPException: 401 unauthenticated, 422 invalid value, 403 no downvote
            permission, 404 unknown subject, 409 deleted reply
    """
    actor = require_actor(jwt_service, auth_token)

    try:
        return await cast_vote_use_case.execute(
            CastVoteRequest(
                subject_type=subject_type,
                subject_id=str(subject_id),
                value=request.value,
                actor=actor,
            )
        )
    except DomainError as e:
        raise http_error(e, "Vote")


@router.get("/{subject_type}/{subject_id}", response_model=GetVoteStateResponse)
async def get_vote_state(
    subject_type: SubjectType,
    subject_id: UUID,
    get_vote_state_use_case: FromDishka[GetVoteStateUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> GetVoteStateResponse:
    """Get a subject's live score and, when authenticated, the caller's vote.

    Raises:
        HTTPException: 404 if the subject does not exist
    """
    try:
        return await get_vote_state_use_case.execute(
            GetVoteStateRequest(
                subject_type=subject_type,
                subject_id=str(subject_id),
                viewer=jwt_service.get_actor_from_token(auth_token),
            )
        )
    except DomainError as e:
        raise http_error(e, "Vote state lookup")
