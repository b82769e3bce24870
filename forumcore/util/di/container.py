"""Production container and its FastAPI hookup."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from forumcore.util.di import build_providers


def create_container() -> AsyncContainer:
    # FastapiProvider makes the current Request available to route handlers
    return make_async_container(*build_providers(), FastapiProvider())


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    setup_dishka(container, app)
