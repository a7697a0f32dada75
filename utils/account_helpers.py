"""
Account Helpers
Quota bookkeeping for the ``users`` collection.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from core.exceptions import StorageError
from db.connection import USERS_COLLECTION

logger = logging.getLogger("AccountHelpers")

DEFAULT_ATTEMPTS = 3


def get_user_collection(db: AsyncIOMotorDatabase):
    return db[USERS_COLLECTION]


async def get_or_create_account(
    db: AsyncIOMotorDatabase,
    user_id: str,
    email: Optional[str] = None,
    default_attempts: int = DEFAULT_ATTEMPTS,
) -> Dict:
    """
    Find the account for ``user_id``, creating it on first contact.

    The lookup and creation happen in one upsert so two concurrent first
    requests end up sharing a single document.

    Args:
        db: Database handle
        user_id: Federated identity subject id
        email: Stored only when the account is created
        default_attempts: Starting quota for a new account

    Returns:
        The account document
    """
    now = datetime.now(timezone.utc)
    new_account = {
        "email": email or "",
        "attemptsLeft": default_attempts,
        "lastLogin": now,
        "createdAt": now,
    }
    try:
        existing = await get_user_collection(db).find_one_and_update(
            {"firebaseUid": user_id},
            {"$setOnInsert": new_account},
            upsert=True,
            return_document=ReturnDocument.BEFORE,
        )
    except PyMongoError as e:
        logger.error(f"Error resolving account {user_id}: {e}")
        raise StorageError(str(e)) from e

    if existing is not None:
        return existing

    logger.info(f"Created new account for {user_id}")
    return {"firebaseUid": user_id, **new_account}


async def reserve_attempt(db: AsyncIOMotorDatabase, user_id: str) -> Optional[int]:
    """
    Atomically take one attempt from the account before the model is called.

    The decrement only applies while ``attemptsLeft > 0``, so of several
    racing requests at most ``attemptsLeft`` of them get through and the
    counter never goes negative.

    Returns:
        The remaining attempts after the decrement, or None if none were left
    """
    try:
        account = await get_user_collection(db).find_one_and_update(
            {"firebaseUid": user_id, "attemptsLeft": {"$gt": 0}},
            {"$inc": {"attemptsLeft": -1}},
            return_document=ReturnDocument.AFTER,
        )
    except PyMongoError as e:
        logger.error(f"Error reserving attempt for {user_id}: {e}")
        raise StorageError(str(e)) from e

    if account is None:
        return None
    return account["attemptsLeft"]


async def refund_attempt(db: AsyncIOMotorDatabase, user_id: str) -> None:
    """Give back an attempt reserved by a request that did not produce an answer."""
    try:
        await get_user_collection(db).update_one(
            {"firebaseUid": user_id},
            {"$inc": {"attemptsLeft": 1}},
        )
    except PyMongoError as e:
        logger.error(f"Error refunding attempt for {user_id}: {e}")
        raise StorageError(str(e)) from e


async def touch_last_login(db: AsyncIOMotorDatabase, user_id: str) -> None:
    try:
        await get_user_collection(db).update_one(
            {"firebaseUid": user_id},
            {"$set": {"lastLogin": datetime.now(timezone.utc)}},
        )
    except PyMongoError as e:
        logger.error(f"Error updating lastLogin for {user_id}: {e}")
        raise StorageError(str(e)) from e
