"""Vote repository interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from forumcore.domain.model.vote import Vote
from forumcore.domain.value import Subject, SubjectType, UserId


class VoteRepository(ABC):
    """Repository for Vote entity.

    Defines the contract for vote persistence operations.
    Implementations live in the infrastructure layer.

    There is no score column anywhere: scores are sums over vote rows,
    computed at read time.
    """

    @abstractmethod
    def serialize(
        self, subject: Subject, user_id: UserId
    ) -> AbstractAsyncContextManager[None]:
        """Exclusive section for one (subject, user) pair.

        Every read-modify-write of a user's vote runs inside this context.
        Writers for other users or other subjects are not blocked.

        Args:
            subject: The voted subject
            user_id: The voting user

        Returns:
            Async context manager holding the lock while open
        """
        pass

    @abstractmethod
    async def find_by_user_and_subject(
        self, subject: Subject, user_id: UserId
    ) -> Optional[Vote]:
        """Find a user's vote on a subject.

        Args:
            subject: The voted subject
            user_id: The user's ID

        Returns:
            The vote if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_subject(self, subject: Subject) -> List[Vote]:
        """Find all votes on a subject.

        Args:
            subject: The voted subject

        Returns:
            List of votes on the subject
        """
        pass

    @abstractmethod
    async def save(self, vote: Vote) -> Vote:
        """Insert or replace the vote for its (subject, user) pair.

        Args:
            vote: The vote to save

        Returns:
            The saved vote
        """
        pass

    @abstractmethod
    async def delete_by_user_and_subject(
        self, subject: Subject, user_id: UserId
    ) -> bool:
        """Delete a user's vote on a subject.

        Args:
            subject: The voted subject
            user_id: The user's ID

        Returns:
            True if a vote was deleted, False if no vote existed
        """
        pass

    @abstractmethod
    async def sum_by_subject(self, subject: Subject) -> int:
        """Sum of vote values on a subject (0 when there are none)."""
        pass

    @abstractmethod
    async def count_created_since(self, user_id: UserId, since: datetime) -> int:
        """Number of the user's vote rows created at or after `since`.

        Changed votes keep their original creation time and retracted ones
        have no row, so neither counts.

        Args:
            user_id: The voting user
            since: Inclusive lower bound on created_at

        Returns:
            Row count across topics and replies
        """
        pass

    @abstractmethod
    async def sum_by_subjects(
        self, subject_type: SubjectType, subject_ids: Sequence[UUID]
    ) -> Dict[UUID, int]:
        """Sum of vote values for many subjects of one type (batch query).

        Args:
            subject_type: Type of the subjects
            subject_ids: IDs to score

        Returns:
            Mapping of subject ID to score; subjects without votes may be absent
        """
        pass

    @abstractmethod
    async def find_by_user_and_subjects(
        self,
        user_id: UserId,
        subject_type: SubjectType,
        subject_ids: Sequence[UUID],
    ) -> List[Vote]:
        """Find a user's votes on multiple subjects (batch query).

        Args:
            user_id: The user's ID
            subject_type: Type of the subjects
            subject_ids: IDs to check

        Returns:
            List of votes by the user on the specified subjects
        """
        pass
