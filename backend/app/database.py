"""
Gallery API — MongoDB Client Management
=========================================

What:  Builds the async MongoDB client and resolves the `projects` collection.
Why:   Centralizes all database connection logic in one place.
How:   motor's AsyncIOMotorClient is created once in the FastAPI lifespan,
       handed to ProjectStore as a collection, and closed on shutdown.
Who:   Called by main.py lifespan only. Nothing else opens connections.

Connection Strategy:
    The driver manages its own pool and timeouts; we rely on its defaults.
    Connecting is lazy: creating the client does not touch the network, so an
    unreachable server shows up as a DatabaseError on the first request rather
    than at startup.

    tz_aware=True makes the driver return timezone-aware UTC datetimes, so
    createdAt round-trips with its offset intact.
"""

import logging

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)

from app.config import Settings

logger = logging.getLogger(__name__)

# What: Collection holding project documents
PROJECTS_COLLECTION = "projects"

# What: Database used when neither MONGODB_DATABASE nor the URI names one
DEFAULT_DATABASE = "test"


def create_client(app_settings: Settings) -> AsyncIOMotorClient:
    """
    Create the process-wide MongoDB client.

    Raises:
        pymongo.errors.ConfigurationError / InvalidURI for a malformed URI.
    """
    client = AsyncIOMotorClient(app_settings.mongodb_uri, tz_aware=True)
    logger.info("MongoDB client created")
    return client


def get_database(client: AsyncIOMotorClient, app_settings: Settings) -> AsyncIOMotorDatabase:
    """Resolve the configured database, then the URI's database, then DEFAULT_DATABASE."""
    if app_settings.mongodb_database:
        return client[app_settings.mongodb_database]
    return client.get_default_database(default=DEFAULT_DATABASE)


def get_projects_collection(database: AsyncIOMotorDatabase) -> AsyncIOMotorCollection:
    return database[PROJECTS_COLLECTION]


def close_client(client: AsyncIOMotorClient) -> None:
    """
    What:  Closes all pooled connections.
    When:  Called during application shutdown (lifespan handler).
    """
    client.close()
    logger.info("MongoDB client closed")
