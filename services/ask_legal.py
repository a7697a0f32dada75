"""Quota-gated question answering workflow.

Validates the request, resolves the caller's account, reserves one attempt,
asks Gemini and stores the exchange. The reserved attempt is given back if no
answer is stored. The attachment upload is best-effort; every other step
either succeeds or aborts the request.
"""
import base64
import binascii
import logging
from typing import Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase

from clients.storage_client import CloudinaryRelay
from core.config import Settings
from core.exceptions import (
    AttachmentUploadError,
    ConfigError,
    InvalidRequest,
    QuotaExceeded,
    StorageError,
    Unauthorized,
)
from llm.legal_prompt import FILE_ANALYSIS_PLACEHOLDER, build_prompt_parts, normalize_language
from llm.llm_client import GeminiClient
from models.qa_schema import AskLegalRequest, AskLegalResponse, FileAttachment
from utils.account_helpers import (
    get_or_create_account,
    refund_attempt,
    reserve_attempt,
    touch_last_login,
)
from utils.qa_helpers import classify_file_type, save_qa_record

logger = logging.getLogger("AskLegalService")


def decode_attachment(file: FileAttachment) -> bytes:
    try:
        return base64.b64decode(file.base64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidRequest("File payload is not valid base64") from e


def validate_request(request: AskLegalRequest, llm: GeminiClient) -> Tuple[Optional[str], Optional[bytes]]:
    """Run every check that must pass before any remote call; returns the question (None if blank) and file bytes."""
    has_question = bool((request.question or "").strip())
    if not has_question and request.file is None:
        raise InvalidRequest()

    file_bytes = decode_attachment(request.file) if request.file is not None else None

    if not (request.userId or "").strip():
        raise Unauthorized()

    if not llm.is_configured:
        raise ConfigError()

    return (request.question if has_question else None), file_bytes


async def relay_attachment(relay: CloudinaryRelay, file: FileAttachment) -> Tuple[Optional[str], Optional[str]]:
    try:
        file_url = await relay.upload(file.base64, file.mimeType)
    except AttachmentUploadError as e:
        logger.warning(f"Attachment upload failed, continuing without file URL: {e.message}")
        return None, None
    return file_url, classify_file_type(file.mimeType)


async def release_reservation(db: AsyncIOMotorDatabase, user_id: str) -> None:
    try:
        await refund_attempt(db, user_id)
    except StorageError as e:
        logger.error(f"Could not refund attempt for {user_id}: {e.message}")


async def ask_legal(
    request: AskLegalRequest,
    db: AsyncIOMotorDatabase,
    llm: GeminiClient,
    relay: CloudinaryRelay,
    settings: Settings,
) -> AskLegalResponse:
    question, file_bytes = validate_request(request, llm)
    user_id = request.userId.strip()
    language = normalize_language(request.language)

    account = await get_or_create_account(db, user_id, request.email, settings.default_attempts)
    attempts_left = account.get("attemptsLeft", 0)

    if settings.quota_enforced:
        reserved = await reserve_attempt(db, user_id) if attempts_left > 0 else None
        if reserved is None:
            logger.info(f"Rejecting request from {user_id}: quota exhausted")
            raise QuotaExceeded()
        attempts_left = reserved

    parts = build_prompt_parts(
        question,
        language,
        file_bytes=file_bytes,
        mime_type=request.file.mimeType if request.file else None,
    )

    stored_question = question or FILE_ANALYSIS_PLACEHOLDER
    try:
        file_url, file_type = None, None
        if request.file is not None:
            file_url, file_type = await relay_attachment(relay, request.file)

        logger.info(f"Generating answer for {user_id} (language={language}, file={request.file is not None})")
        answer = await llm.generate(parts)

        record_id = await save_qa_record(
            db,
            user_id=user_id,
            question=stored_question,
            answer=answer,
            language=language,
            file_url=file_url,
            file_type=file_type,
        )
    except Exception:
        if settings.quota_enforced:
            await release_reservation(db, user_id)
        raise

    await touch_last_login(db, user_id)

    return AskLegalResponse(
        answer=answer,
        question=stored_question,
        language=language,
        id=record_id,
        fileUrl=file_url,
        attemptsLeft=attempts_left,
    )
