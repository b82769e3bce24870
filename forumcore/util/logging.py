"""Stdlib logging setup.

Forum events are emitted through logfire directly. Libraries that log
through the stdlib (uvicorn, SQLAlchemy, asyncpg, httpx) are routed into
logfire as well, so one console and one export carry everything.
"""

import logging

import logfire

from forumcore.config import Settings

# Library loggers and their level outside debug mode
QUIET_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "asyncpg": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
}


def setup_logging(settings: Settings) -> None:
    """Send stdlib records to logfire. Call after ``configure_logfire``."""
    level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(level=level, handlers=[logfire.LogfireLoggingHandler()], force=True)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(logging.DEBUG if settings.debug else quiet_level)

    logfire.debug(
        "Stdlib logging routed to logfire",
        level=logging.getLevelName(level),
        environment=settings.environment,
    )
