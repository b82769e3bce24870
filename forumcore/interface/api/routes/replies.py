"""Reply routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Query, status
from pydantic import BaseModel, Field

from forumcore.application.usecase.reply import (
    CreateReplyRequest,
    CreateReplyUseCase,
    DeleteReplyRequest,
    DeleteReplyUseCase,
    GetEditHistoryRequest,
    GetEditHistoryResponse,
    GetEditHistoryUseCase,
    GetFlatRepliesRequest,
    GetFlatRepliesResponse,
    GetFlatRepliesUseCase,
    GetRepliesRequest,
    GetRepliesResponse,
    GetRepliesUseCase,
    ModerateReplyRequest,
    ModerateReplyUseCase,
    ReplyItem,
    ReplyModerationAction,
    UpdateReplyRequest,
    UpdateReplyUseCase,
)
from forumcore.domain.error import DomainError
from forumcore.domain.service import JWTService
from forumcore.domain.value import SortMode
from forumcore.interface.api.auth import require_actor
from forumcore.interface.error import http_error

router = APIRouter(tags=["replies"], route_class=DishkaRoute)


class CreateReplyAPIRequest(BaseModel):
    """API request body for creating a reply."""

    content: str
    parent_reply_id: UUID | None = None  # None for a top-level reply
    quoted_reply_id: UUID | None = None


class UpdateReplyAPIRequest(BaseModel):
    """API request body for editing a reply."""

    content: str
    reason: str | None = Field(default=None, max_length=500)


class MoveReplyAPIRequest(BaseModel):
    """API request body for moving a reply."""

    parent_reply_id: UUID | None = None  # None moves the reply to top level


@router.get("/topics/{topic_id}/replies", response_model=GetRepliesResponse)
async def get_replies(
    topic_id: UUID,
    get_replies_use_case: FromDishka[GetRepliesUseCase],
    jwt_service: FromDishka[JWTService],
    sort: SortMode = Query(default=SortMode.OLDEST),
    auth_token: str | None = Cookie(default=None),
) -> GetRepliesResponse:
    """Get a topic's replies as a nested tree.

    Each sibling group is sorted independently by the requested mode.
    Deleted replies stay in place as tombstones so their children keep
    their position. Nesting stops at forum.max_tree_depth; deeper replies
    follow in pre-order under their ancestor at that level.

    Args:
        topic_id: Topic UUID
        get_replies_use_case: Get replies use case from DI
        jwt_service: JWT service for optional authentication (injected)
        sort: oldest, newest or most_voted
        auth_token: JWT token from cookie (optional, adds user votes)

    Returns:
        Reply tree with scores

    Raises:
        HTTPException: 404 if the topic does not exist
    """
    try:
        return await get_replies_use_case.execute(
            GetRepliesRequest(
                topic_id=str(topic_id),
                sort=sort,
                viewer=jwt_service.get_actor_from_token(auth_token),
            )
        )
    except DomainError as e:
        raise http_error(e, "Reply listing")


@router.get("/topics/{topic_id}/replies/flat", response_model=GetFlatRepliesResponse)
async def get_flat_replies(
    topic_id: UUID,
    get_flat_replies_use_case: FromDishka[GetFlatRepliesUseCase],
    jwt_service: FromDishka[JWTService],
    sort: SortMode = Query(default=SortMode.OLDEST),
    max_depth: int | None = Query(default=None),
    auth_token: str | None = Cookie(default=None),
) -> GetFlatRepliesResponse:
    """Get a topic's replies in pre-order with display levels capped at max_depth.

    Replies deeper than max_depth are shown at max_depth, never dropped.

    Raises:
        HTTPException: 404 if the topic does not exist, 422 if max_depth < 0
    """
    try:
        return await get_flat_replies_use_case.execute(
            GetFlatRepliesRequest(
                topic_id=str(topic_id),
                sort=sort,
                max_depth=max_depth,
                viewer=jwt_service.get_actor_from_token(auth_token),
            )
        )
    except DomainError as e:
        raise http_error(e, "Flat reply listing")


@router.post(
    "/topics/{topic_id}/replies",
    response_model=ReplyItem,
    status_code=status.HTTP_201_CREATED,
)
async def create_reply(
    topic_id: UUID,
    request: CreateReplyAPIRequest,
    create_reply_use_case: FromDishka[CreateReplyUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ReplyItem:
    """Reply to a topic, or to another reply in it.

    Requires authentication.

    Raises:
        HTTPException: 401 unauthenticated, 404 topic/parent/quote missing,
            409 topic locked, 422 content length
    """
    actor = require_actor(jwt_service, auth_token)

    try:
        return await create_reply_use_case.execute(
            CreateReplyRequest(
                topic_id=str(topic_id),
                content=request.content,
                actor=actor,
                parent_reply_id=(
                    str(request.parent_reply_id) if request.parent_reply_id else None
                ),
                quoted_reply_id=(
                    str(request.quoted_reply_id) if request.quoted_reply_id else None
                ),
            )
        )
    except DomainError as e:
        raise http_error(e, "Reply creation")


@router.patch("/replies/{reply_id}", response_model=ReplyItem)
async def update_reply(
    reply_id: UUID,
    request: UpdateReplyAPIRequest,
    update_reply_use_case: FromDishka[UpdateReplyUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ReplyItem:
    """Edit a reply.

    Authors may edit within the edit window; moderators at any time.

    Raises:
        HTTPException: 401 unauthenticated, 403 not author or window expired,
            404 reply missing, 409 reply deleted, 422 content length
    """
    actor = require_actor(jwt_service, auth_token)

    try:
        return await update_reply_use_case.execute(
            UpdateReplyRequest(
                reply_id=str(reply_id),
                content=request.content,
                actor=actor,
                reason=request.reason,
            )
        )
    except DomainError as e:
        raise http_error(e, "Reply update")


@router.delete("/replies/{reply_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reply(
    reply_id: UUID,
    delete_reply_use_case: FromDishka[DeleteReplyUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> None:
    """Soft-delete a reply, leaving a tombstone in the thread.

    Raises:
        HTTPException: 401 unauthenticated, 403 not author, 404 reply missing,
            409 already deleted
    """
    actor = require_actor(jwt_service, auth_token)

    try:
        await delete_reply_use_case.execute(
            DeleteReplyRequest(reply_id=str(reply_id), actor=actor)
        )
    except DomainError as e:
        raise http_error(e, "Reply deletion")


async def _moderate(
    use_case: ModerateReplyUseCase,
    jwt_service: JWTService,
    auth_token: str | None,
    reply_id: UUID,
    action: ReplyModerationAction,
    new_parent_reply_id: UUID | None = None,
) -> ReplyItem:
    actor = require_actor(jwt_service, auth_token)

    try:
        return await use_case.execute(
            ModerateReplyRequest(
                reply_id=str(reply_id),
                action=action,
                actor=actor,
                new_parent_reply_id=(
                    str(new_parent_reply_id) if new_parent_reply_id else None
                ),
            )
        )
    except DomainError as e:
        raise http_error(e, f"Reply {action.value}")


@router.post("/replies/{reply_id}/hide", response_model=ReplyItem)
async def hide_reply(
    reply_id: UUID,
    moderate_reply_use_case: FromDishka[ModerateReplyUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ReplyItem:
    """Hide a reply from non-moderators (moderators only)."""
    return await _moderate(
        moderate_reply_use_case,
        jwt_service,
        auth_token,
        reply_id,
        ReplyModerationAction.HIDE,
    )


@router.post("/replies/{reply_id}/unhide", response_model=ReplyItem)
async def unhide_reply(
    reply_id: UUID,
    moderate_reply_use_case: FromDishka[ModerateReplyUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ReplyItem:
    """Make a hidden reply visible again (moderators only)."""
    return await _moderate(
        moderate_reply_use_case,
        jwt_service,
        auth_token,
        reply_id,
        ReplyModerationAction.UNHIDE,
    )


@router.post("/replies/{reply_id}/move", response_model=ReplyItem)
async def move_reply(
    reply_id: UUID,
    request: MoveReplyAPIRequest,
    moderate_reply_use_case: FromDishka[ModerateReplyUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ReplyItem:
    """Reparent a reply within its topic (moderators only)."""
    return await _moderate(
        moderate_reply_use_case,
        jwt_service,
        auth_token,
        reply_id,
        ReplyModerationAction.MOVE,
        new_parent_reply_id=request.parent_reply_id,
    )


@router.get("/replies/{reply_id}/edits", response_model=GetEditHistoryResponse)
async def get_edit_history(
    reply_id: UUID,
    get_edit_history_use_case: FromDishka[GetEditHistoryUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> GetEditHistoryResponse:
    """Get the edit history of a reply (moderators only)."""
    actor = require_actor(jwt_service, auth_token)

    try:
        return await get_edit_history_use_case.execute(
            GetEditHistoryRequest(reply_id=str(reply_id), actor=actor)
        )
    except DomainError as e:
        raise http_error(e, "Edit history lookup")
