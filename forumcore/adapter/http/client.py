"""HTTP client for the forum API.

Implements the reconciler transports over the JSON API. Error bodies carry
{"detail": {"code", "message"}}; the code is mapped back onto the domain
error class that produced it, so callers handle remote and in-process
failures the same way.
"""

from typing import Any

import httpx
import logfire

from forumcore.adapter.error import TransportError
from forumcore.client.transport import ReplyEditTransport, VoteState, VoteTransport
from forumcore.config import ClientSettings
from forumcore.domain.error import (
    AuthorizationError,
    ContentDeletedError,
    ContentTooLongError,
    ContentTooShortError,
    DailyVoteLimitError,
    DomainError,
    EditWindowExpiredError,
    InsufficientStandingError,
    InvalidVoteValueError,
    NotAuthorError,
    NotAuthorizedError,
    NotFoundError,
    NotQuestionTypeError,
    ParentNotFoundError,
    QuotedReplyNotFoundError,
    ReplyNotInTopicError,
    ReplyTooDeepError,
    SelfVoteError,
    StructuralInvariantError,
    TopicLockedError,
    ValidationError,
)
from forumcore.domain.value import ReplyId, Subject, VoteValue

ERRORS_BY_CODE: dict[str, type[DomainError]] = {
    error.code: error
    for error in (
        InvalidVoteValueError,
        ContentTooShortError,
        ContentTooLongError,
        ReplyTooDeepError,
        NotAuthorizedError,
        NotAuthorError,
        EditWindowExpiredError,
        InsufficientStandingError,
        SelfVoteError,
        DailyVoteLimitError,
        NotFoundError,
        ParentNotFoundError,
        QuotedReplyNotFoundError,
        TopicLockedError,
        ContentDeletedError,
        NotQuestionTypeError,
        ReplyNotInTopicError,
        StructuralInvariantError,
    )
}
ERRORS_BY_CODE["not_authenticated"] = AuthorizationError


class HttpForumClient(VoteTransport, ReplyEditTransport):
    """Vote and reply-edit transport for one authenticated user."""

    def __init__(
        self,
        settings: ClientSettings,
        auth_token: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Base URL and timeout
            auth_token: JWT sent as the auth_token cookie
            client: Preconfigured httpx client; one is created when omitted
        """
        self.settings = settings
        cookies = {"auth_token": auth_token} if auth_token else None
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=settings.base_url,
            timeout=settings.timeout_seconds,
            cookies=cookies,
        )
        if client is not None and cookies:
            self._client.cookies.update(cookies)

    async def __aenter__(self) -> "HttpForumClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def cast(self, subject: Subject, value: VoteValue) -> VoteState:
        data = await self._request(
            "POST", self._vote_path(subject), json={"value": int(value)}
        )
        return VoteState(score=data["score"], user_vote=VoteValue.parse(data["user_vote"]))

    async def fetch(self, subject: Subject) -> VoteState:
        data = await self._request("GET", self._vote_path(subject))
        return VoteState(score=data["score"], user_vote=VoteValue.parse(data["user_vote"]))

    async def edit(
        self, reply_id: ReplyId, content: str, reason: str | None = None
    ) -> str:
        data = await self._request(
            "PATCH",
            f"/replies/{reply_id}",
            json={"content": content, "reason": reason},
        )
        return data["content"]

    @staticmethod
    def _vote_path(subject: Subject) -> str:
        return f"/votes/{subject.subject_type.value}/{subject.subject_id}"

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Send a request and decode the JSON body.

        Raises:
            DomainError: The API answered with a known error code
            TransportError: Network failure or an unrecognised error response
        """
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logfire.error("Forum API request failed", method=method, path=path, error=str(e))
            raise TransportError(f"HTTP error calling {method} {path}: {e}") from e

        if response.is_success:
            return response.json()

        raise self._error_from_response(response, method, path)

    @staticmethod
    def _error_from_response(
        response: httpx.Response, method: str, path: str
    ) -> Exception:
        try:
            body = response.json()
        except ValueError:
            body = None
        # Proxies may answer with a JSON list or string instead of an object
        detail = body.get("detail") if isinstance(body, dict) else None

        # FastAPI request validation answers 422 with a list of field errors
        if response.status_code == 422 and isinstance(detail, list):
            return ValidationError.from_message("Request failed validation")

        if isinstance(detail, dict) and detail.get("code") in ERRORS_BY_CODE:
            error_cls = ERRORS_BY_CODE[detail["code"]]
            logfire.warn(
                "Forum API rejected request",
                method=method,
                path=path,
                code=detail["code"],
                status_code=response.status_code,
            )
            return error_cls.from_message(detail.get("message", ""))

        logfire.error(
            "Forum API returned an unexpected error",
            method=method,
            path=path,
            status_code=response.status_code,
            body=response.text,
        )
        return TransportError(
            f"Unexpected response {response.status_code} from {method} {path}",
            status_code=response.status_code,
        )
