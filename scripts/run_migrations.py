#!/usr/bin/env python3
"""Apply database migrations with Logfire error tracking."""

import sys
import logfire
from alembic import command
from alembic.config import Config

from roster.config import Settings
from roster.util.observability import configure_logfire


def main() -> int:
    """Upgrade the schema to head and log any failure to Logfire."""
    settings = Settings()
    configure_logfire(settings)

    alembic_cfg = Config("alembic.ini")

    with logfire.span("run_migrations", environment=settings.environment):
        try:
            command.upgrade(alembic_cfg, "head")
        except Exception as e:
            logfire.error(
                "Database migration failed",
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            # The app must not start against a broken schema
            raise

    logfire.info("Database migrations completed successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
