"""Logfire setup and instrumentation.

Every domain operation opens a span named ``<service>.<operation>`` and
emits structured events inside it::

    with logfire.span("vote_service.cast_vote", subject=str(subject)):
        ...
        logfire.info("Vote recorded", subject=str(subject), score=score)

Rejected requests log at warn and structural invariant violations at error.
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from forumcore.config import Settings

SERVICE_NAME = "forumcore"


def configure_logfire(settings: Settings) -> None:
    """Configure logfire once per process, before the app is built."""
    observability = settings.observability
    logfire.configure(
        service_name=SERVICE_NAME,
        service_version=settings.git_sha,
        environment=settings.environment,
        send_to_logfire=observability.exports,
        token=observability.logfire_token,
        console=logfire.ConsoleOptions(
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )
    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=observability.exports,
    )


def instrument_fastapi(app: FastAPI) -> None:
    # Cookies carry the session token, so headers stay out of spans
    logfire.instrument_fastapi(app, capture_headers=False)


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace SQL, including the advisory and FOR UPDATE lock queries."""
    logfire.instrument_sqlalchemy(engine=engine.sync_engine, enable_commenter=True)
