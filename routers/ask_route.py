import logging

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from clients.storage_client import CloudinaryRelay, get_attachment_relay
from core.config import Settings, get_settings
from core.exceptions import LegalAssistantError
from db.connection import get_db
from llm.llm_client import GeminiClient, get_llm_client
from models.qa_schema import AskLegalRequest, AskLegalResponse
from services.ask_legal import ask_legal

router = APIRouter()
logger = logging.getLogger("AskLegalRouter")


@router.post("/ask-legal", response_model=AskLegalResponse, response_model_exclude_none=True)
async def ask_legal_endpoint(
    request: AskLegalRequest,
    db: AsyncIOMotorDatabase = Depends(get_db),
    llm: GeminiClient = Depends(get_llm_client),
    relay: CloudinaryRelay = Depends(get_attachment_relay),
    settings: Settings = Depends(get_settings),
):
    """Answer a legal question, optionally about an attached image or document."""
    try:
        return await ask_legal(request, db, llm, relay, settings)
    except LegalAssistantError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in /ask-legal: {e}", exc_info=True)
        raise LegalAssistantError(str(e) or None) from e
