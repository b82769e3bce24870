"""Optimistic client-side state for votes and reply edits."""

from .reconciler import (
    OptimisticReconciler,
    Reconciled,
    ReplyEditReconciler,
    VoteReconciler,
    project_vote,
)
from .transport import LedgerVoteTransport, ReplyEditTransport, VoteState, VoteTransport

__all__ = [
    "LedgerVoteTransport",
    "OptimisticReconciler",
    "Reconciled",
    "ReplyEditReconciler",
    "ReplyEditTransport",
    "VoteReconciler",
    "VoteState",
    "VoteTransport",
    "project_vote",
]
