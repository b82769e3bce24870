"""Domain layer errors.

Every error carries a stable machine-readable code that the HTTP layer and
the client adapter use to round-trip failures.
"""


class DomainError(Exception):
    """Base domain error."""

    code = "domain_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    @classmethod
    def from_message(cls, message: str) -> "DomainError":
        """Rebuild an error of this type from a code and message sent over HTTP."""
        error = cls.__new__(cls)
        DomainError.__init__(error, message)
        return error


# ============================================================================
# VALIDATION (rejected before any state change, safe to retry)
# ============================================================================


class ValidationError(DomainError):
    """Domain validation error."""

    code = "invalid_value"


class InvalidVoteValueError(ValidationError):
    """Raised when a vote value is outside {-1, 0, 1}."""

    code = "invalid_value"

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Vote value must be -1, 0 or 1, got {value!r}")


class ContentTooShortError(ValidationError):
    """Raised when content is below the minimum length."""

    code = "content_too_short"

    def __init__(self, field: str, min_length: int):
        super().__init__(f"{field} must be at least {min_length} characters")


class ContentTooLongError(ValidationError):
    """Raised when content exceeds the maximum length."""

    code = "content_too_long"

    def __init__(self, field: str, max_length: int):
        super().__init__(f"{field} must be at most {max_length} characters")


class ReplyTooDeepError(ValidationError):
    """Raised when a reply would nest deeper than the configured maximum."""

    code = "max_depth_exceeded"

    def __init__(self, max_depth: int):
        super().__init__(f"Maximum reply depth of {max_depth} exceeded")


# ============================================================================
# AUTHORIZATION (terminal for the request, never auto-retried)
# ============================================================================


class AuthorizationError(DomainError):
    """Base authorization error."""

    code = "not_authorized"


class NotAuthorizedError(AuthorizationError):
    """Raised when a user attempts an action reserved to another role."""

    code = "not_authorized"

    def __init__(self, action: str, resource: str, resource_id: str, user_id: str):
        super().__init__(
            f"User {user_id} is not authorized to {action} {resource} {resource_id}"
        )


class NotAuthorError(AuthorizationError):
    """Raised when a user attempts to change content they don't own."""

    code = "not_author"

    def __init__(self, resource: str, resource_id: str, user_id: str):
        super().__init__(f"User {user_id} is not the author of {resource} {resource_id}")


class EditWindowExpiredError(AuthorizationError):
    """Raised when the author edits after the edit window closed."""

    code = "edit_window_expired"

    def __init__(self, resource_id: str, window_minutes: int):
        super().__init__(
            f"Edit window of {window_minutes} minutes has expired for {resource_id}"
        )


class InsufficientStandingError(AuthorizationError):
    """Raised when a user without downvote permission downvotes."""

    code = "insufficient_standing"

    def __init__(self, user_id: str):
        super().__init__(f"User {user_id} does not have permission to downvote")


class SelfVoteError(AuthorizationError):
    """Raised when a user votes on their own topic or reply."""

    code = "self_vote"

    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"You cannot vote on your own {resource} {resource_id}")


class DailyVoteLimitError(AuthorizationError):
    """Raised when a user has used up today's new votes."""

    code = "vote_limit_reached"

    def __init__(self, limit: int):
        super().__init__(
            f"Daily vote limit of {limit} votes reached, try again tomorrow"
        )


# ============================================================================
# CONFLICT (surfaced to the caller for resolution)
# ============================================================================


class ConflictError(DomainError):
    """Base conflict error."""

    code = "conflict"


class NotFoundError(ConflictError):
    """Raised when a requested resource is not found."""

    code = "not_found"

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class ParentNotFoundError(NotFoundError):
    """Raised when a reply's parent is missing or in another topic."""

    code = "parent_not_found"

    def __init__(self, identifier: str):
        super().__init__("Parent reply", identifier)


class QuotedReplyNotFoundError(NotFoundError):
    """Raised when a quoted reply is missing or in another topic."""

    code = "quoted_reply_not_found"

    def __init__(self, identifier: str):
        super().__init__("Quoted reply", identifier)


class TopicLockedError(ConflictError):
    """Raised when replying to or voting in a locked topic."""

    code = "topic_locked"

    def __init__(self, topic_id: str):
        super().__init__(f"Topic {topic_id} is locked")


class ContentDeletedError(ConflictError):
    """Raised when attempting to act on deleted content."""

    code = "already_deleted"

    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"{resource} {resource_id} has been deleted")


class NotQuestionTypeError(ConflictError):
    """Raised when accepting an answer on a non-question topic."""

    code = "not_question_type"

    def __init__(self, topic_id: str):
        super().__init__(f"Topic {topic_id} is not a question")


class ReplyNotInTopicError(ConflictError):
    """Raised when the accepted reply belongs to another topic."""

    code = "reply_not_in_topic"

    def __init__(self, reply_id: str, topic_id: str):
        super().__init__(f"Reply {reply_id} does not belong to topic {topic_id}")


# ============================================================================
# STRUCTURAL INVARIANTS (bugs upstream, never recovered)
# ============================================================================


class StructuralInvariantError(DomainError):
    """Raised when an operation would break the reply tree or acceptance shape."""

    code = "invariant_violation"
