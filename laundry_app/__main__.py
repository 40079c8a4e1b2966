"""Entry point: ``python -m laundry_app``."""
from __future__ import annotations

import asyncio

from laundry_app.api.api_server import run_api_server
from laundry_app.core.config import load_settings
from laundry_app.core.logging_config import setup_logging
from laundry_app.core.sentry_integration import init_sentry


def main() -> None:
    settings = load_settings()
    logger = setup_logging(settings.log_level)
    init_sentry(settings.sentry_dsn, environment=settings.environment)
    logger.info(f"Environment: {settings.environment}")
    asyncio.run(run_api_server(settings))


if __name__ == "__main__":
    main()
