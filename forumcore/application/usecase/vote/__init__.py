"""Vote use cases."""

from .cast_vote import CastVoteRequest, CastVoteResponse, CastVoteUseCase
from .get_vote_state import (
    GetVoteStateRequest,
    GetVoteStateResponse,
    GetVoteStateUseCase,
)

__all__ = [
    "CastVoteRequest",
    "CastVoteResponse",
    "CastVoteUseCase",
    "GetVoteStateRequest",
    "GetVoteStateResponse",
    "GetVoteStateUseCase",
]
