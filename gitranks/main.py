import logging
import sys

import uvicorn

from gitranks.api.app import create_app
from gitranks.config import Config
from gitranks.utils.logger import setup_logger

logger = setup_logger("gitranks")

def main():
    """Main entry point"""
    try:
        Config.validate()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    if not Config.has_token():
        logger.warning("GITHUB_TOKEN not set: GraphQL batching disabled and REST quota is 60 requests/hour")

    app = create_app()
    logger.info(f"Serving GitRanks on {Config.HOST}:{Config.PORT}")
    uvicorn.run(
        app,
        host=Config.HOST,
        port=Config.PORT,
        log_level=logging.getLevelName(logging.DEBUG if Config.DEBUG else logging.INFO).lower(),
    )

if __name__ == "__main__":
    main()
