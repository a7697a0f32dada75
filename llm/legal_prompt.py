from typing import List, Optional

from pydantic import BaseModel

SUPPORTED_LANGUAGES = {"english": "English", "hindi": "Hindi"}
DEFAULT_LANGUAGE = "english"

FILE_ANALYSIS_PLACEHOLDER = "File Analysis"


class PromptPart(BaseModel):
    """A single prompt part: either plain text or an inline binary blob."""
    text: Optional[str] = None
    data: Optional[bytes] = None
    mime_type: Optional[str] = None

    @classmethod
    def from_text(cls, text: str) -> "PromptPart":
        return cls(text=text)

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> "PromptPart":
        return cls(data=data, mime_type=mime_type)

    @property
    def is_inline(self) -> bool:
        return self.data is not None


def normalize_language(language: Optional[str]) -> str:
    """Map any requested language onto the supported set; unknown values fall back to English."""
    key = (language or "").strip().lower()
    return key if key in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


def language_name(language: Optional[str]) -> str:
    return SUPPORTED_LANGUAGES[normalize_language(language)]


def system_instruction(language: Optional[str]) -> str:
    return (
        "You are a helpful Indian legal assistant. Provide simple, step-by-step legal guidance "
        f"based on Indian law. Respond in {language_name(language)}. "
        "Always suggest consulting a lawyer if the issue is serious."
    )


def build_legal_prompt(question: Optional[str], language: Optional[str], has_file: bool) -> str:
    prompt = system_instruction(language)

    if question:
        prompt += f"\n\nQuestion: {question}"

    if has_file:
        prompt += "\n\nAnalyze the attached document/image and answer the question based on it."

    return prompt


def build_prompt_parts(
    question: Optional[str],
    language: Optional[str],
    file_bytes: Optional[bytes] = None,
    mime_type: Optional[str] = None,
) -> List[PromptPart]:
    """
    Assemble the ordered prompt parts sent to the model.

    The text part always comes first; the attachment, when present, follows
    as inline data with its declared media type.
    """
    has_file = file_bytes is not None
    parts = [PromptPart.from_text(build_legal_prompt(question, language, has_file))]
    if has_file:
        parts.append(PromptPart.from_bytes(file_bytes, mime_type or "application/octet-stream"))
    return parts
