from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class FileAttachment(BaseModel):
    """Base64-encoded image or document sent along with a question."""
    base64: str
    mimeType: str


class AskLegalRequest(BaseModel):
    question: Optional[str] = None
    language: Optional[str] = "english"
    file: Optional[FileAttachment] = None
    userId: Optional[str] = None
    email: Optional[str] = None


class AskLegalResponse(BaseModel):
    answer: str
    question: str
    language: str
    id: str
    fileUrl: Optional[str] = None
    attemptsLeft: int


class HistoryItem(BaseModel):
    id: str
    question: str
    answer: str
    language: str
    fileUrl: Optional[str] = None
    fileType: Optional[str] = None
    created_at: datetime


class HistoryResponse(BaseModel):
    history: List[HistoryItem] = Field(default_factory=list)
