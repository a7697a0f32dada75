import logging
from typing import Optional

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from core.config import Settings, get_settings
from core.exceptions import LegalAssistantError, Unauthorized
from db.connection import get_db
from models.qa_schema import HistoryResponse
from utils.qa_helpers import get_user_history

router = APIRouter()
logger = logging.getLogger("HistoryRouter")


@router.get("/history", response_model=HistoryResponse, response_model_exclude_none=True)
async def history_endpoint(
    userId: Optional[str] = None,
    db: AsyncIOMotorDatabase = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """List the caller's most recent questions and answers, newest first."""
    if not (userId or "").strip():
        raise Unauthorized()

    try:
        history = await get_user_history(db, userId.strip(), limit=settings.history_page_size)
        return {"history": history}
    except LegalAssistantError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in /history: {e}", exc_info=True)
        raise LegalAssistantError(str(e) or None) from e
