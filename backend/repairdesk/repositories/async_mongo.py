"""Async MongoDB Client using Motor for async operations"""
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from ..config.settings import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Global async client instance
_async_client: Optional[AsyncIOMotorClient] = None
_async_database: Optional[AsyncIOMotorDatabase] = None


def get_async_client() -> AsyncIOMotorClient:
    """Get or create async MongoDB client using Motor"""
    global _async_client
    if _async_client is None:
        logger.info(f"Creating async MongoDB client for: {settings.mongo_uri}")
        _async_client = AsyncIOMotorClient(
            settings.mongo_uri,
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=5000,
            socketTimeoutMS=30000,
        )
    return _async_client


def get_async_database() -> AsyncIOMotorDatabase:
    """Get the async application database"""
    global _async_database
    if _async_database is None:
        client = get_async_client()
        _async_database = client[settings.mongo_db]
        logger.info(f"Using async database: {settings.mongo_db}")
    return _async_database


def get_async_collection(name: str) -> AsyncIOMotorCollection:
    """Get a collection from the async database"""
    return get_async_database()[name]


async def create_indexes() -> None:
    """Create all required indexes"""
    db = get_async_database()
    logger.info("Creating MongoDB indexes...")

    users = db["users"]
    await users.create_index("user_id", unique=True)
    await users.create_index("role")

    preferences = db["notification_preferences"]
    await preferences.create_index(
        [("user_id", ASCENDING), ("entity_type", ASCENDING), ("action", ASCENDING)],
        unique=True,
        name="user_event_preference"
    )
    await preferences.create_index([("entity_type", ASCENDING), ("action", ASCENDING)])

    tickets = db["tickets"]
    await tickets.create_index("ticket_id", unique=True)
    await tickets.create_index("assigned_to_id")

    notifications = db["notifications"]
    await notifications.create_index("idempotency_key", unique=True)
    await notifications.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])

    await db["settings"].create_index("key", unique=True)

    logger.info("MongoDB indexes created successfully")


async def close_async_connection() -> None:
    """Close async MongoDB connection"""
    global _async_client, _async_database
    if _async_client is not None:
        _async_client.close()
        _async_client = None
        _async_database = None
        logger.info("Async MongoDB connection closed")
