"""Settings and clock providers."""

from dishka import Scope, provide

from forumcore.config import AuthSettings, ForumSettings, Settings
from forumcore.util.clock import Clock, utc_now
from forumcore.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    scope = Scope.APP

    @provide
    def settings(self) -> Settings:
        return Settings()

    @provide
    def auth(self, settings: Settings) -> AuthSettings:
        return settings.auth

    @provide
    def forum(self, settings: Settings) -> ForumSettings:
        return settings.forum

    @provide
    def clock(self) -> Clock:
        return utc_now
