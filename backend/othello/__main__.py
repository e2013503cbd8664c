#!/usr/bin/env python3
"""
Othello AI Engine - Main Entry Point
"""

import logging

import uvicorn

from .api import Engine
from .config import Settings
from .server import create_app

logger = logging.getLogger("othello")


def main():
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting Othello AI Engine on http://%s:%d (docs at /docs)", settings.host, settings.port)

    uvicorn.run(
        create_app(Engine(settings)),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
