import logging
from typing import Optional

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from core.config import Settings, get_settings
from core.exceptions import LegalAssistantError, Unauthorized
from db.connection import get_db
from models.account_schema import UserResponse
from utils.account_helpers import get_or_create_account

router = APIRouter()
logger = logging.getLogger("UserRouter")


@router.get("/user", response_model=UserResponse)
async def user_endpoint(
    userId: Optional[str] = None,
    email: Optional[str] = None,
    db: AsyncIOMotorDatabase = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Return the caller's remaining attempts, creating the account on first call."""
    if not (userId or "").strip():
        raise Unauthorized("UserId is required")

    try:
        account = await get_or_create_account(db, userId.strip(), email, settings.default_attempts)
        return UserResponse(
            attemptsLeft=account.get("attemptsLeft", 0),
            email=account.get("email") or "",
            lastLogin=account.get("lastLogin"),
        )
    except LegalAssistantError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in /user: {e}", exc_info=True)
        raise LegalAssistantError(str(e) or None) from e
