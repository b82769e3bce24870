"""Domain services."""

from .acceptance_service import AcceptanceService
from .base import Service
from .jwt_service import JWTService
from .reply_service import ReplyService, is_within_edit_window
from .thread import assemble_thread, count_nodes, flatten_thread
from .topic_service import TopicService
from .vote_service import VoteOutcome, VoteService

__all__ = [
    "AcceptanceService",
    "JWTService",
    "ReplyService",
    "Service",
    "TopicService",
    "VoteOutcome",
    "VoteService",
    "assemble_thread",
    "count_nodes",
    "flatten_thread",
    "is_within_edit_window",
]
