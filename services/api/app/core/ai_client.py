import logging
from typing import Optional, Type, TypeVar
from datetime import datetime, timezone
from pydantic import BaseModel, ValidationError
from google import genai
from google.genai import types

from ..errors import ConfigurationError, UpstreamError
from ..settings import settings

logger = logging.getLogger("cooklog.ai")

T = TypeVar("T", bound=BaseModel)


class AIClient:
    _instance = None

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model = model or settings.gemini_text_model
        self._client: Optional[genai.Client] = None
        self.last_error: Optional[str] = None
        self.last_error_at: Optional[datetime] = None

        if self.api_key:
            self._client = genai.Client(api_key=self.api_key)

    @classmethod
    def get_instance(cls):
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def is_available(self) -> bool:
        return self._client is not None

    def _record_error(self, message: str) -> None:
        self.last_error = message
        self.last_error_at = datetime.now(timezone.utc)

    async def generate_structured(
        self,
        prompt: str,
        response_model: Type[T],
        system_instruction: Optional[str] = None,
        temperature: float = 0.1,
        model: Optional[str] = None,
    ) -> T:
        """
        Generate structured JSON output using Gemini (Async).
        Single shot: provider errors, empty output and schema mismatches raise UpstreamError.
        """
        if not self.is_available():
            raise ConfigurationError("GEMINI_API_KEY is not configured on the server.")

        model_id = model or self.model
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=response_model,
            system_instruction=system_instruction,
            temperature=temperature,
        )

        try:
            response = await self._client.aio.models.generate_content(
                model=model_id,
                contents=prompt,
                config=config,
            )
        except Exception as e:
            self._record_error(f"{e.__class__.__name__}: {e}")
            logger.error(f"Gemini generation failed: {e}")
            raise UpstreamError(f"Language model request failed: {e}") from e

        if not response.text:
            self._record_error("empty response")
            logger.warning("Gemini returned empty response")
            raise UpstreamError("Language model did not return any content.")

        try:
            return response_model.model_validate_json(response.text)
        except ValidationError as e:
            self._record_error(f"invalid JSON: {e.error_count()} errors")
            logger.error("Gemini output did not match %s: %s", response_model.__name__, e)
            raise UpstreamError("Language model returned malformed recipe JSON.") from e


# Singleton instance access
ai_client = AIClient.get_instance()
