"""Reply use cases."""

from .create_reply import CreateReplyRequest, CreateReplyUseCase
from .delete_reply import DeleteReplyRequest, DeleteReplyUseCase
from .get_edit_history import (
    GetEditHistoryRequest,
    GetEditHistoryResponse,
    GetEditHistoryUseCase,
    ReplyEditItem,
)
from .get_replies import (
    GetFlatRepliesRequest,
    GetFlatRepliesResponse,
    GetFlatRepliesUseCase,
    GetRepliesRequest,
    GetRepliesResponse,
    GetRepliesUseCase,
)
from .moderate_reply import (
    ModerateReplyRequest,
    ModerateReplyUseCase,
    ReplyModerationAction,
)
from .update_reply import UpdateReplyRequest, UpdateReplyUseCase
from .view import FlatReplyItem, ReplyItem, ReplyNodeItem

__all__ = [
    "CreateReplyRequest",
    "CreateReplyUseCase",
    "DeleteReplyRequest",
    "DeleteReplyUseCase",
    "FlatReplyItem",
    "GetEditHistoryRequest",
    "GetEditHistoryResponse",
    "GetEditHistoryUseCase",
    "GetFlatRepliesRequest",
    "GetFlatRepliesResponse",
    "GetFlatRepliesUseCase",
    "GetRepliesRequest",
    "GetRepliesResponse",
    "GetRepliesUseCase",
    "ModerateReplyRequest",
    "ModerateReplyUseCase",
    "ReplyEditItem",
    "ReplyItem",
    "ReplyModerationAction",
    "ReplyNodeItem",
    "UpdateReplyRequest",
    "UpdateReplyUseCase",
]
