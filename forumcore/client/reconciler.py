"""Optimistic state reconciliation for votes and reply edits.

The caller sees its own action immediately as a projected state. The
authoritative answer from the transport then replaces the projection, or the
last state the server confirmed is restored if the mutation fails. A newer
submission for the same key supersedes older ones: their late results and
failures are dropped so they can never clobber a fresher projection.

    reconciler = VoteReconciler(HttpForumClient(settings.client, token))
    reconciler.seed(subject, VoteState(score=4, user_vote=VoteValue.NONE))
    result = await reconciler.cast(subject, VoteValue.UP)
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, TypeVar

import logfire

from forumcore.domain.value import ReplyId, Subject, VoteValue

from .transport import ReplyEditTransport, VoteState, VoteTransport

K = TypeVar("K")
S = TypeVar("S")

Listener = Callable[[K, S | None], None]


@dataclass(frozen=True)
class Reconciled(Generic[S]):
    """Outcome of a submission.

    state is what the cache holds once the submission settled. When
    superseded is True a newer submission owns the key and state is that
    submission's projection (or result), not this one's.
    """

    state: S | None
    superseded: bool = False


class OptimisticReconciler(Generic[K, S]):
    """Call-scoped cache of projected states with rollback and supersession."""

    def __init__(self, listener: Listener | None = None) -> None:
        """Initialize an empty reconciler.

        Args:
            listener: Called with (key, state) each time the cached state of
                a key changes; state is None when the key is evicted
        """
        self._cache: dict[K, S] = {}
        self._generations: dict[K, int] = {}
        self._pending: set[K] = set()
        # Last state the server vouched for, with the generation it answered
        self._confirmed: dict[K, tuple[int, S]] = {}
        self._listener = listener

    def get(self, key: K) -> S | None:
        """Currently displayed state for a key, if any."""
        return self._cache.get(key)

    def seed(self, key: K, state: S) -> None:
        """Record server truth for a key, e.g. from a thread listing."""
        self._confirm(key, self._generations.get(key, 0), state)
        self._set(key, state)

    def is_pending(self, key: K) -> bool:
        """Whether the newest submission for a key is still unresolved."""
        return key in self._pending

    async def submit(
        self,
        key: K,
        project: Callable[[S | None], S],
        mutation: Callable[[], Awaitable[S]],
    ) -> Reconciled[S]:
        """Apply a projection now and reconcile it with the mutation result.

        Args:
            key: What the mutation acts on
            project: Maps the current state to the expected result
            mutation: Performs the authoritative change

        Returns:
            Settled state and whether this submission was superseded

        Raises:
            Exception: Whatever the mutation raised, when this submission is
                still the newest for its key (the last confirmed state is
                restored first, or the key evicted if there is none)
        """
        generation = self._generations.get(key, 0) + 1
        self._generations[key] = generation
        self._pending.add(key)

        self._set(key, project(self._cache.get(key)))

        try:
            result = await mutation()
        except asyncio.CancelledError:
            if self._is_newest(key, generation):
                self._restore(key)
            raise
        except Exception as e:
            if not self._is_newest(key, generation):
                logfire.info(
                    "Superseded mutation failed, discarding", key=str(key), error=str(e)
                )
                return Reconciled(self._cache.get(key), superseded=True)
            logfire.warn("Mutation failed, rolling back", key=str(key), error=str(e))
            self._restore(key)
            raise

        # Applied on the server even when a newer submission owns the display
        self._confirm(key, generation, result)
        if not self._is_newest(key, generation):
            logfire.info("Superseded mutation result discarded", key=str(key))
            return Reconciled(self._cache.get(key), superseded=True)

        self._pending.discard(key)
        self._set(key, result)
        return Reconciled(result)

    def _is_newest(self, key: K, generation: int) -> bool:
        return self._generations.get(key) == generation

    def _set(self, key: K, state: S) -> None:
        self._cache[key] = state
        self._notify(key, state)

    def _confirm(self, key: K, generation: int, state: S) -> None:
        known = self._confirmed.get(key)
        if known is None or known[0] <= generation:
            self._confirmed[key] = (generation, state)

    def _restore(self, key: K) -> None:
        self._pending.discard(key)
        confirmed = self._confirmed.get(key)
        if confirmed is not None:
            self._set(key, confirmed[1])
        else:
            self._cache.pop(key, None)
            self._notify(key, None)

    def _notify(self, key: K, state: S | None) -> None:
        if self._listener is not None:
            self._listener(key, state)


def project_vote(state: VoteState, requested: VoteValue) -> VoteState:
    """Expected ledger result of casting `requested` over `state`.

    Uses the same toggle rule as the ledger, so an unchanged world makes
    the projection equal to the authoritative answer.
    """
    effective = state.user_vote.toggled_by(requested)
    return VoteState(
        score=state.score - int(state.user_vote) + int(effective),
        user_vote=effective,
    )


class VoteReconciler(OptimisticReconciler[Subject, VoteState]):
    """Optimistic votes for one user."""

    def __init__(self, transport: VoteTransport, listener: Listener | None = None):
        super().__init__(listener)
        self.transport = transport

    async def cast(self, subject: Subject, requested: VoteValue) -> Reconciled[VoteState]:
        """Cast a vote optimistically.

        A subject that was never seeded is fetched first, since a projection
        needs a base score.
        """
        with logfire.span(
            "vote_reconciler.cast", subject=str(subject), requested=requested.value
        ):
            if self.get(subject) is None:
                fetched = await self.transport.fetch(subject)
                # A concurrent cast may have projected while the fetch was out
                if self.get(subject) is None:
                    self.seed(subject, fetched)

            def project(current: VoteState | None) -> VoteState:
                return project_vote(current or VoteState(score=0), requested)

            return await self.submit(
                subject, project, lambda: self.transport.cast(subject, requested)
            )


class ReplyEditReconciler(OptimisticReconciler[ReplyId, str]):
    """Optimistic reply edits for one user; state is the reply content."""

    def __init__(self, transport: ReplyEditTransport, listener: Listener | None = None):
        super().__init__(listener)
        self.transport = transport

    async def edit(
        self, reply_id: ReplyId, content: str, reason: str | None = None
    ) -> Reconciled[str]:
        with logfire.span("reply_edit_reconciler.edit", reply_id=str(reply_id)):
            return await self.submit(
                reply_id,
                lambda _current: content,
                lambda: self.transport.edit(reply_id, content, reason),
            )
