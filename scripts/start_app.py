#!/usr/bin/env python3
"""Serve the forum API with uvicorn.

Logfire and stdlib logging are configured before the app factory runs, so
startup failures (bad settings, unreachable database) are reported too.
"""

import sys

import logfire
import uvicorn

from forumcore.config import Settings
from forumcore.util.logging import setup_logging
from forumcore.util.observability import configure_logfire

APP_FACTORY = "forumcore.interface.api.app:create_app"


def main() -> int:
    settings = Settings()
    configure_logfire(settings)
    setup_logging(settings)

    with logfire.span(
        "app.serve",
        environment=settings.environment,
        port=settings.port,
        git_sha=settings.git_sha,
    ):
        try:
            uvicorn.run(
                APP_FACTORY,
                factory=True,
                host="0.0.0.0",
                port=settings.port,
                log_level="debug" if settings.debug else "info",
                proxy_headers=settings.behind_proxy,
            )
        except Exception as e:
            logfire.error(
                "Forum API failed to start",
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
