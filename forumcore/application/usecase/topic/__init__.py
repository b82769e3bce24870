"""Topic use cases."""

from .accept_answer import AcceptAnswerRequest, AcceptAnswerUseCase
from .create_topic import CreateTopicRequest, CreateTopicUseCase
from .get_topic import GetTopicRequest, GetTopicUseCase
from .moderate_topic import (
    ModerateTopicRequest,
    ModerateTopicUseCase,
    TopicModerationAction,
)
from .view import TopicItem

__all__ = [
    "AcceptAnswerRequest",
    "AcceptAnswerUseCase",
    "CreateTopicRequest",
    "CreateTopicUseCase",
    "GetTopicRequest",
    "GetTopicUseCase",
    "ModerateTopicRequest",
    "ModerateTopicUseCase",
    "TopicItem",
    "TopicModerationAction",
]
