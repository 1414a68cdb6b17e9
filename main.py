#!/usr/bin/env python
"""Application entry point."""
import logging

import uvicorn

from chamber.app_factory import create_app
from chamber.settings import settings

logging.basicConfig(level=settings.LOG_LEVEL.upper())

app = create_app()

if __name__ == "__main__":
    logging.info("Greetings from %s:%s%s", settings.APP_HOST, settings.APP_PORT, settings.WS_PATH)
    try:
        uvicorn.run(app, host=settings.APP_HOST, port=settings.APP_PORT)
    except OSError as exc:
        logging.error("Server failed to start: %s", exc)
        raise
