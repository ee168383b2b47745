import os
import sys
from dotenv import load_dotenv
from loguru import logger
import uvicorn

from . import database

LOG_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"


def configure_logging():
    """Send logs to stdout and a daily rotated file."""
    level = os.getenv("LOG_LEVEL", "INFO")
    logger.remove()
    logger.add(sys.stdout, format=LOG_FORMAT, level=level)
    logger.add(
        os.getenv("LOG_FILE", "logs/finance_tracker.log"),
        rotation="1 day",
        retention="7 days",
        level=level
    )


def main():
    """Main entry point for the finance tracker API server."""
    load_dotenv(override=True)
    configure_logging()

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", 3333))

    database.init_db()
    logger.info(f"Finance Tracker API starting on {host}:{port}")

    try:
        uvicorn.run("finance_tracker.api:app", host=host, port=port, log_config=None)
    except KeyboardInterrupt:
        logger.info("Shutting down Finance Tracker API")


if __name__ == "__main__":
    main()
