from __future__ import annotations

import logging

import uvicorn

from ...config import Settings
from ...logging_utils import setup_logging

logger = logging.getLogger(__name__)

APP_IMPORT_PATH = "receiptpoints.services.points_service.app:app"


def run() -> None:
    settings = Settings.detect()
    setup_logging(settings.log_level, settings.logging_config)

    # uvicorn imports the module-level app itself, after logging is configured.
    logger.info("Serving receipt points on %s:%d", settings.host, settings.port)
    uvicorn.run(APP_IMPORT_PATH, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
