#!/usr/bin/env python3
"""
Donation Hub - Production Startup Script
Run this script to start the API (and the bundled frontend, if configured).
"""

import logging
import sys
from pathlib import Path

import uvicorn

from config import settings
from logging_config import setup_logging

logger = logging.getLogger("start")


def main():
    """Start the Donation Hub application."""
    setup_logging(settings.LOG_LEVEL)

    logger.info(f"Starting {settings.APP_NAME}...")
    logger.info(f"Host: {settings.HOST}")
    logger.info(f"Port: {settings.PORT}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    if not Path(".env").exists():
        logger.warning(".env file not found. Using environment variables and defaults.")

    try:
        uvicorn.run(
            "main:app",
            host=settings.HOST,
            port=settings.PORT,
            reload=settings.is_development,
            access_log=True,
            log_level=settings.LOG_LEVEL.lower(),
            server_header=False,
            timeout_keep_alive=30,
            log_config=None,  # Keep the logging configured above
        )
    except KeyboardInterrupt:
        logger.info("Shutting down gracefully...")
    except Exception as e:
        logger.error(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
