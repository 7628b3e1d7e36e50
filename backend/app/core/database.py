import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from beanie import init_beanie

from .config import Settings
from ..models.user import UserModel

logger = logging.getLogger(__name__)


class Database:
    client: Optional[AsyncIOMotorClient] = None
    database: Optional[AsyncIOMotorDatabase] = None


database = Database()


def _client_options(settings: Settings) -> dict:
    options = {}
    if settings.MONGODB_TIMEOUT_MS is not None:
        options["serverSelectionTimeoutMS"] = settings.MONGODB_TIMEOUT_MS
    return options


async def connect_to_mongo(settings: Settings) -> AsyncIOMotorDatabase:
    """Create database connection and register document models"""
    database.client = AsyncIOMotorClient(settings.MONGODB_URL, **_client_options(settings))
    # Prefer the database named in the URL, as mongoose does
    database.database = database.client.get_default_database(default=settings.MONGODB_DB_NAME)

    await init_beanie(database=database.database, document_models=[UserModel])

    logger.info("Connected to MongoDB: %s", database.database.name)
    return database.database


async def close_mongo_connection():
    """Close database connection"""
    if database.client:
        database.client.close()
        database.client = None
        database.database = None
        logger.info("Disconnected from MongoDB")


@asynccontextmanager
async def mongo_session(settings: Settings) -> AsyncIterator[AsyncIOMotorDatabase]:
    """Connection scoped to a block; closed on every exit path"""
    try:
        yield await connect_to_mongo(settings)
    finally:
        await close_mongo_connection()
