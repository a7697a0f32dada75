import logging
from datetime import timezone
from typing import Optional

from bson.codec_options import CodecOptions
from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from core.config import Settings, get_settings

logger = logging.getLogger("Database")

USERS_COLLECTION = "users"
QA_RECORDS_COLLECTION = "qa_records"

# Datetimes come back as UTC-aware values so they serialize with an offset.
CODEC_OPTIONS = CodecOptions(tz_aware=True, tzinfo=timezone.utc)

_client: Optional[AsyncIOMotorClient] = None


def get_client(settings: Optional[Settings] = None) -> AsyncIOMotorClient:
    """Return the process-wide Motor client, creating it on first use."""
    global _client
    if _client is None:
        settings = settings or get_settings()
        logger.info("Creating new database connection...")
        _client = AsyncIOMotorClient(
            settings.mongo_uri,
            serverSelectionTimeoutMS=5000,
            socketTimeoutMS=45000,
            tz_aware=CODEC_OPTIONS.tz_aware,
            tzinfo=CODEC_OPTIONS.tzinfo,
        )
    return _client


def close_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None
        logger.info("Database connection closed")


def get_db(settings: Settings = Depends(get_settings)) -> AsyncIOMotorDatabase:
    return get_client(settings)[settings.mongo_db_name]


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create the unique identity index on users and the history index on QA records."""
    await db[USERS_COLLECTION].create_index([("firebaseUid", ASCENDING)], unique=True)
    await db[QA_RECORDS_COLLECTION].create_index([("userId", ASCENDING), ("createdAt", DESCENDING)])
    logger.info("Database indexes ensured")
