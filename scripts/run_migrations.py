#!/usr/bin/env python3
"""Apply account store migrations with Logfire error tracking."""

import sys

import logfire
from alembic import command
from alembic.config import Config

from idbridge.config import Settings
from idbridge.util.logging import setup_logging
from idbridge.util.observability import configure_logfire


def main() -> int:
    """Upgrade the account store to the latest revision."""
    settings = Settings()
    setup_logging(settings)
    configure_logfire(settings)

    try:
        with logfire.span("migrations.upgrade", database=settings.database.url.split("@")[-1]):
            command.upgrade(Config("alembic.ini"), "head")
        logfire.info("Account store is at head revision")
        return 0

    except Exception as e:
        logfire.error(
            "Account store migration failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # Re-raise so a deploy step fails instead of running on an old schema
        raise


if __name__ == "__main__":
    sys.exit(main())
