#!/usr/bin/env python3
"""Apply or roll back the forum schema.

    python scripts/run_migrations.py              # upgrade to head
    python scripts/run_migrations.py --to 3f1c9d2a7b40
    python scripts/run_migrations.py --down base  # drop everything
"""

import argparse
import sys

import logfire
from alembic import command
from alembic.config import Config
from sqlalchemy.engine import make_url

from forumcore.config import Settings
from forumcore.util.logging import setup_logging
from forumcore.util.observability import configure_logfire


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    target = parser.add_mutually_exclusive_group()
    target.add_argument("--to", default="head", help="Revision to upgrade to")
    target.add_argument("--down", help="Revision to downgrade to")
    parser.add_argument("--config", default="alembic.ini", help="Alembic config path")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the requested migration, reporting failures to Logfire."""
    args = parse_args(sys.argv[1:] if argv is None else argv)
    settings = Settings()
    configure_logfire(settings)
    setup_logging(settings)

    alembic_cfg = Config(args.config)
    database = make_url(settings.database_url)
    direction = "downgrade" if args.down else "upgrade"
    revision = args.down or args.to

    with logfire.span(
        "migrations.run",
        direction=direction,
        revision=revision,
        database_host=database.host,
        database_name=database.database,
    ):
        try:
            if args.down:
                command.downgrade(alembic_cfg, args.down)
            else:
                command.upgrade(alembic_cfg, args.to)
        except Exception as e:
            logfire.error(
                "Database migration failed",
                direction=direction,
                revision=revision,
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            # Non-zero exit keeps a deploy from starting on a broken schema
            raise

        logfire.info("Database migration finished", direction=direction, revision=revision)
    return 0


if __name__ == "__main__":
    sys.exit(main())
