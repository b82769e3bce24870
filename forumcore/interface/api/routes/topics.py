"""Topic routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, status
from pydantic import BaseModel

from forumcore.application.usecase.topic import (
    AcceptAnswerRequest,
    AcceptAnswerUseCase,
    CreateTopicRequest,
    CreateTopicUseCase,
    GetTopicRequest,
    GetTopicUseCase,
    ModerateTopicRequest,
    ModerateTopicUseCase,
    TopicItem,
    TopicModerationAction,
)
from forumcore.domain.error import DomainError
from forumcore.domain.service import JWTService
from forumcore.domain.value import TopicType
from forumcore.interface.api.auth import require_actor
from forumcore.interface.error import http_error

router = APIRouter(prefix="/topics", tags=["topics"], route_class=DishkaRoute)


class CreateTopicAPIRequest(BaseModel):
    """API request body for creating a topic."""

    type: TopicType = TopicType.DISCUSSION
    title: str


class AcceptAnswerAPIRequest(BaseModel):
    """API request body for accepting an answer."""

    reply_id: UUID


@router.post("", response_model=TopicItem, status_code=status.HTTP_201_CREATED)
async def create_topic(
    request: CreateTopicAPIRequest,
    create_topic_use_case: FromDishka[CreateTopicUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> TopicItem:
    """Open a new topic.

    Requires authentication.

    Raises:
        HTTPException: 401 unauthenticated, 422 title length
    """
    actor = require_actor(jwt_service, auth_token)

    try:
        return await create_topic_use_case.execute(
            CreateTopicRequest(type=request.type, title=request.title, actor=actor)
        )
    except DomainError as e:
        raise http_error(e, "Topic creation")


@router.get("/{topic_id}", response_model=TopicItem)
async def get_topic(
    topic_id: UUID,
    get_topic_use_case: FromDishka[GetTopicUseCase],
) -> TopicItem:
    """Get a topic with its live score.

    Raises:
        HTTPException: 404 if the topic does not exist
    """
    try:
        return await get_topic_use_case.execute(GetTopicRequest(topic_id=str(topic_id)))
    except DomainError as e:
        raise http_error(e, "Topic lookup")


async def _moderate(
    use_case: ModerateTopicUseCase,
    jwt_service: JWTService,
    auth_token: str | None,
    topic_id: UUID,
    action: TopicModerationAction,
) -> TopicItem:
    actor = require_actor(jwt_service, auth_token)

    try:
        return await use_case.execute(
            ModerateTopicRequest(topic_id=str(topic_id), action=action, actor=actor)
        )
    except DomainError as e:
        raise http_error(e, f"Topic {action.value}")


@router.post("/{topic_id}/accept", response_model=TopicItem)
async def accept_answer(
    topic_id: UUID,
    request: AcceptAnswerAPIRequest,
    accept_answer_use_case: FromDishka[AcceptAnswerUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> TopicItem:
    """Mark a reply as the accepted answer of a question topic.

    Accepting a different reply replaces the previous answer.

    Raises:
        HTTPException: 401 unauthenticated, 403 not topic author or moderator,
            404 topic missing, 409 not a question, reply not in topic or deleted
    """
    actor = require_actor(jwt_service, auth_token)

    try:
        return await accept_answer_use_case.execute(
            AcceptAnswerRequest(
                topic_id=str(topic_id),
                reply_id=str(request.reply_id),
                actor=actor,
            )
        )
    except DomainError as e:
        raise http_error(e, "Answer acceptance")


@router.post("/{topic_id}/lock", response_model=TopicItem)
async def lock_topic(
    topic_id: UUID,
    moderate_topic_use_case: FromDishka[ModerateTopicUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> TopicItem:
    """Lock a topic against new replies (moderators only)."""
    return await _moderate(
        moderate_topic_use_case,
        jwt_service,
        auth_token,
        topic_id,
        TopicModerationAction.LOCK,
    )


@router.post("/{topic_id}/unlock", response_model=TopicItem)
async def unlock_topic(
    topic_id: UUID,
    moderate_topic_use_case: FromDishka[ModerateTopicUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> TopicItem:
    """Reopen a locked topic (moderators only)."""
    return await _moderate(
        moderate_topic_use_case,
        jwt_service,
        auth_token,
        topic_id,
        TopicModerationAction.UNLOCK,
    )


@router.post("/{topic_id}/pin", response_model=TopicItem)
async def pin_topic(
    topic_id: UUID,
    moderate_topic_use_case: FromDishka[ModerateTopicUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> TopicItem:
    """Pin a topic (moderators only)."""
    return await _moderate(
        moderate_topic_use_case,
        jwt_service,
        auth_token,
        topic_id,
        TopicModerationAction.PIN,
    )


@router.post("/{topic_id}/unpin", response_model=TopicItem)
async def unpin_topic(
    topic_id: UUID,
    moderate_topic_use_case: FromDishka[ModerateTopicUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> TopicItem:
    """Unpin a topic (moderators only)."""
    return await _moderate(
        moderate_topic_use_case,
        jwt_service,
        auth_token,
        topic_id,
        TopicModerationAction.UNPIN,
    )
