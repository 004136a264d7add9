"""Process entrypoint: ``python -m token_service``."""
from __future__ import annotations

import logging
import sys

import uvicorn

from .core.config import load_settings
from .core.errors import StartupConfigError
from .main import create_app

logger = logging.getLogger("token_service")


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings()
    except StartupConfigError as exc:
        logger.critical("%s", exc)
        return 1

    logging.getLogger().setLevel(settings.log_level)
    logger.info("Issuing tokens for %s", settings.livekit_url)

    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
