"""
Gallery API — Server Entry Point
==================================

Usage:
    python -m app            # listens on $HOST:$PORT (default 0.0.0.0:3000)

Configuration such as MONGODB_URI and the Cloudinary credentials is read
from the environment or a `.env` file in the working directory.
"""

import logging
import sys

import uvicorn

from app.config import settings

logger = logging.getLogger("gallery")


def main() -> None:
    """Validate configuration, then run uvicorn. Exits non-zero if MONGODB_URI is missing."""
    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
        logger.critical("%s", e)
        sys.exit(1)

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()
