"""
QA Helpers
Persistence and history queries for the ``qa_records`` collection.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from core.exceptions import StorageError
from db.connection import QA_RECORDS_COLLECTION

logger = logging.getLogger("QAHelpers")

HISTORY_PAGE_SIZE = 10


def get_qa_collection(db: AsyncIOMotorDatabase):
    return db[QA_RECORDS_COLLECTION]


def classify_file_type(mime_type: str) -> str:
    return "image" if (mime_type or "").startswith("image/") else "document"


async def save_qa_record(
    db: AsyncIOMotorDatabase,
    user_id: str,
    question: str,
    answer: str,
    language: str,
    file_url: Optional[str] = None,
    file_type: Optional[str] = None,
) -> str:
    """
    Insert one question/answer exchange.

    ``fileUrl`` and ``fileType`` are written only when the attachment was
    uploaded.

    Returns:
        The new record id as a string
    """
    record = {
        "userId": user_id,
        "question": question,
        "answer": answer,
        "language": language,
        "createdAt": datetime.now(timezone.utc),
    }
    if file_url:
        record["fileUrl"] = file_url
        record["fileType"] = file_type

    try:
        result = await get_qa_collection(db).insert_one(record)
    except PyMongoError as e:
        logger.error(f"Error saving QA record for {user_id}: {e}")
        raise StorageError(str(e)) from e
    return str(result.inserted_id)


def format_history_item(doc: Dict) -> Dict:
    item = {
        "id": str(doc["_id"]),
        "question": doc.get("question", ""),
        "answer": doc.get("answer", ""),
        "language": doc.get("language", "english"),
        "created_at": doc.get("createdAt"),
    }
    if doc.get("fileUrl"):
        item["fileUrl"] = doc["fileUrl"]
    if doc.get("fileType"):
        item["fileType"] = doc["fileType"]
    return item


async def get_user_history(
    db: AsyncIOMotorDatabase,
    user_id: str,
    limit: int = HISTORY_PAGE_SIZE
) -> List[Dict]:
    """Most recent QA records for ``user_id``, newest first, at most ``limit``."""
    try:
        cursor = get_qa_collection(db).find(
            {"userId": user_id}
        ).sort([("createdAt", DESCENDING), ("_id", DESCENDING)]).limit(limit)

        records = await cursor.to_list(length=limit)
    except PyMongoError as e:
        logger.error(f"Error retrieving history for {user_id}: {e}")
        raise StorageError(str(e)) from e

    return [format_history_item(doc) for doc in records]
