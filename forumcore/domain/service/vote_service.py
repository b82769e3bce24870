"""Vote domain service (the vote ledger)."""

from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID, uuid4

import logfire

from forumcore.config import ForumSettings
from forumcore.domain.error import (
    ContentDeletedError,
    DailyVoteLimitError,
    InsufficientStandingError,
    NotFoundError,
    SelfVoteError,
    TopicLockedError,
)
from forumcore.domain.model.vote import Vote
from forumcore.domain.repository import ReplyRepository, TopicRepository, VoteRepository
from forumcore.domain.value import (
    ReplyId,
    Subject,
    SubjectType,
    TopicId,
    UserId,
    VoteId,
    VoteValue,
)
from forumcore.util.clock import Clock, utc_now

from .base import Service


@dataclass(frozen=True)
class VoteOutcome:
    """Authoritative result of a cast.

    hidden is informational: the subject scored at or below the auto-hide
    threshold. Nothing is mutated because of it.
    """

    score: int
    user_vote: VoteValue
    hidden: bool = False


class VoteService(Service):
    """Domain service for vote operations.

    Owns every write to vote rows. Scores are never stored: each read sums
    the rows that exist at that moment.
    """

    def __init__(
        self,
        vote_repository: VoteRepository,
        topic_repository: TopicRepository,
        reply_repository: ReplyRepository,
        forum_settings: ForumSettings,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize vote service.

        Args:
            vote_repository: Vote repository
            topic_repository: Topic repository (subject existence checks)
            reply_repository: Reply repository (subject existence checks)
            forum_settings: Auto-hide threshold and daily vote limit
            clock: Source of the current time
        """
        self.vote_repository = vote_repository
        self.topic_repository = topic_repository
        self.reply_repository = reply_repository
        self.auto_hide_threshold = forum_settings.auto_hide_threshold
        self.daily_vote_limit = forum_settings.daily_vote_limit
        self.clock = clock

    async def cast_vote(
        self,
        subject: Subject,
        user_id: UserId,
        requested: VoteValue,
        can_downvote: bool = False,
    ) -> VoteOutcome:
        """Cast, change or retract a user's vote.

        Casting the value the user already holds retracts it. NONE always
        retracts. The compare and the write happen inside one serialized
        section per (subject, user), so racing requests cannot lose updates.

        Args:
            subject: Topic or reply being voted on
            user_id: Voting user
            requested: Requested vote value
            can_downvote: Externally decided downvote permission

        Returns:
            New score and the user's effective vote

        Raises:
            NotFoundError: Subject does not exist
            ContentDeletedError: Subject is a soft-deleted reply
            SelfVoteError: Subject was written by the voter
            TopicLockedError: Subject is, or belongs to, a locked topic
            InsufficientStandingError: Downvote without permission
            DailyVoteLimitError: New vote beyond forum.daily_vote_limit today
        """
        with logfire.span(
            "vote_service.cast_vote",
            subject=str(subject),
            user_id=str(user_id),
            requested=requested.value,
        ):
            await self._ensure_subject_votable(subject, user_id)

            if requested is VoteValue.DOWN and not can_downvote:
                logfire.warn(
                    "Downvote without standing",
                    subject=str(subject),
                    user_id=str(user_id),
                )
                raise InsufficientStandingError(str(user_id))

            async with self.vote_repository.serialize(subject, user_id):
                existing = await self.vote_repository.find_by_user_and_subject(
                    subject, user_id
                )
                current = existing.value if existing else VoteValue.NONE
                effective = current.toggled_by(requested)

                if effective is VoteValue.NONE:
                    if existing:
                        await self.vote_repository.delete_by_user_and_subject(
                            subject, user_id
                        )
                elif effective is not current:
                    now = self.clock()
                    if existing is None:
                        await self._ensure_daily_allowance(user_id, now)
                    await self.vote_repository.save(
                        Vote(
                            id=existing.id if existing else VoteId(uuid4()),
                            user_id=user_id,
                            subject_type=subject.subject_type,
                            subject_id=subject.subject_id,
                            value=effective,
                            created_at=existing.created_at if existing else now,
                            updated_at=now,
                        )
                    )

            score = await self.vote_repository.sum_by_subject(subject)
            logfire.info(
                "Vote recorded",
                subject=str(subject),
                user_id=str(user_id),
                previous=current.value,
                effective=effective.value,
                score=score,
            )
            return VoteOutcome(
                score=score,
                user_vote=effective,
                hidden=score <= self.auto_hide_threshold,
            )

    async def get_user_vote(self, subject: Subject, user_id: UserId) -> VoteValue:
        """Get a user's current vote on a subject (NONE if absent)."""
        vote = await self.vote_repository.find_by_user_and_subject(subject, user_id)
        return vote.value if vote else VoteValue.NONE

    async def get_score(self, subject: Subject) -> int:
        """Get the live score of a subject.

        Raises:
            NotFoundError: Subject does not exist
        """
        with logfire.span("vote_service.get_score", subject=str(subject)):
            await self._ensure_subject_exists(subject)
            return await self.vote_repository.sum_by_subject(subject)

    async def get_scores(
        self, subject_type: SubjectType, subject_ids: list[UUID]
    ) -> dict[UUID, int]:
        """Get live scores for many subjects.

        Args:
            subject_type: Type of the subjects
            subject_ids: Subject IDs

        Returns:
            Mapping with an entry (possibly 0) for every requested ID
        """
        if not subject_ids:
            return {}

        # Batch query to avoid N+1 when annotating a whole thread
        sums = await self.vote_repository.sum_by_subjects(subject_type, subject_ids)
        return {sid: sums.get(sid, 0) for sid in subject_ids}

    async def get_user_votes(
        self, subject_type: SubjectType, subject_ids: list[UUID], user_id: UserId
    ) -> dict[UUID, VoteValue]:
        """Get a user's votes on many subjects.

        Args:
            subject_type: Type of the subjects
            subject_ids: Subject IDs
            user_id: The user

        Returns:
            Mapping with an entry (possibly NONE) for every requested ID
        """
        if not subject_ids:
            return {}

        votes = await self.vote_repository.find_by_user_and_subjects(
            user_id=user_id,
            subject_type=subject_type,
            subject_ids=subject_ids,
        )
        by_subject = {vote.subject_id: vote.value for vote in votes}
        return {sid: by_subject.get(sid, VoteValue.NONE) for sid in subject_ids}

    async def _ensure_subject_exists(self, subject: Subject) -> None:
        await self._find_subject(subject)

    async def _ensure_subject_votable(self, subject: Subject, user_id: UserId) -> None:
        found = await self._find_subject(subject)
        if subject.subject_type == SubjectType.REPLY:
            if found.is_deleted:
                logfire.warn("Vote on deleted reply", subject=str(subject))
                raise ContentDeletedError("Reply", str(subject.subject_id))
            topic = await self.topic_repository.find_by_id(found.topic_id)
        else:
            topic = found

        if found.author_id == user_id:
            logfire.warn("Self vote", subject=str(subject), user_id=str(user_id))
            raise SelfVoteError(subject.subject_type.value, str(subject.subject_id))

        if topic is not None and topic.is_locked:
            logfire.warn("Vote in locked topic", subject=str(subject))
            raise TopicLockedError(str(topic.id))

    async def _ensure_daily_allowance(self, user_id: UserId, now: datetime) -> None:
        """Refuse a new vote row once the user's UTC-day allowance is used."""
        if self.daily_vote_limit is None:
            return

        start_of_day = now.astimezone(timezone.utc).replace(
            hour=0, minute=0, second=0, microsecond=0
        )
        cast_today = await self.vote_repository.count_created_since(
            user_id, start_of_day
        )
        if cast_today >= self.daily_vote_limit:
            logfire.warn(
                "Daily vote limit reached",
                user_id=str(user_id),
                limit=self.daily_vote_limit,
            )
            raise DailyVoteLimitError(self.daily_vote_limit)

    async def _find_subject(self, subject: Subject):
        if subject.subject_type == SubjectType.TOPIC:
            found = await self.topic_repository.find_by_id(TopicId(subject.subject_id))
            resource = "Topic"
        else:
            found = await self.reply_repository.find_by_id(ReplyId(subject.subject_id))
            resource = "Reply"

        if found is None:
            logfire.warn("Vote on non-existent subject", subject=str(subject))
            raise NotFoundError(resource, str(subject.subject_id))
        return found
