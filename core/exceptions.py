"""Error taxonomy for the legal assistant API.

Every error carries the HTTP status it maps to; ``main.py`` renders them as
``{"error": message}`` JSON bodies.
"""
from fastapi import status


class LegalAssistantError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An error occurred"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRequest(LegalAssistantError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Question or file is required"


class Unauthorized(LegalAssistantError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized: User ID required"


class QuotaExceeded(LegalAssistantError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Free quota exceeded. You have 0 attempts left."


class ConfigError(LegalAssistantError):
    default_message = "Gemini API key not configured"


class InferenceError(LegalAssistantError):
    default_message = "Failed to generate an answer"


class StorageError(LegalAssistantError):
    default_message = "Database operation failed"


class AttachmentUploadError(LegalAssistantError):
    """Raised by the attachment relay; the orchestrator logs and swallows it."""

    default_message = "Attachment upload failed"
