"""FastAPI application factory.

Run through uvicorn in factory mode (see ``scripts/start_app.py``), which
configures logfire before this module builds anything.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from forumcore.config import Settings
from forumcore.interface.api.routes import health, replies, topics, votes
from forumcore.util.di.container import create_container, setup_di
from forumcore.util.observability import instrument_fastapi


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    # Disposes the engine pool along with the APP-scoped providers
    await app.state.dishka_container.close()


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Build the API.

    Args:
        container: Container to serve from. Tests pass one from
            ``build_test_container``; production builds its own.
    """
    settings = Settings()
    app = FastAPI(
        title="Forum Core API",
        description="Threaded replies, vote ledger and accepted answers for forum topics",
        version="0.1.0",
        lifespan=_lifespan,
    )
    instrument_fastapi(app)

    # The session token travels as a cookie, hence credentials
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Origin"],
        max_age=600,
    )

    setup_di(app, container or create_container())
    for module in (health, topics, replies, votes):
        app.include_router(module.router)

    return app
