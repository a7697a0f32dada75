import logging
from typing import List, Optional

from fastapi import Depends
from google import genai
from google.genai import types

from core.config import Settings, get_settings
from core.exceptions import ConfigError, InferenceError
from llm.legal_prompt import PromptPart

logger = logging.getLogger("GeminiClient")


class GeminiClient:
    """Thin async wrapper around the google-genai SDK."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-2.0-flash",
        temperature: float = 0.5,
        max_output_tokens: int = 2048,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self._client: Optional[genai.Client] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> genai.Client:
        if not self.is_configured:
            raise ConfigError()
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    @staticmethod
    def _to_sdk_part(part: PromptPart) -> types.Part:
        if part.is_inline:
            return types.Part.from_bytes(data=part.data, mime_type=part.mime_type)
        return types.Part.from_text(text=part.text or "")

    async def generate(self, parts: List[PromptPart]) -> str:
        client = self._get_client()
        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=[
                    types.Content(
                        role="user",
                        parts=[self._to_sdk_part(part) for part in parts],
                    ),
                ],
                config=types.GenerateContentConfig(
                    max_output_tokens=self.max_output_tokens,
                    temperature=self.temperature,
                ),
            )
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            raise InferenceError(str(e)) from e

        answer = response.text
        if not answer:
            raise InferenceError("Model returned an empty answer")
        return answer


client_singleton: GeminiClient | None = None


def get_llm_client(settings: Settings = Depends(get_settings)) -> GeminiClient:
    global client_singleton
    if client_singleton is None:
        client_singleton = GeminiClient(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            temperature=settings.gemini_temperature,
            max_output_tokens=settings.gemini_max_output_tokens,
        )
    return client_singleton
