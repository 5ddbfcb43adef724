"""Adapter for Google Gemini content generation."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from mentor_proxy.config import Settings
from mentor_proxy.exceptions import ProviderResponseError, ProviderTransportError
from mentor_proxy.models import (
    DecodedText,
    DecodeResult,
    DecodeFailure,
    GeminiContent,
    GeminiPart,
    GenerateContentRequest,
    GenerateContentResponse,
    GenerationConfig,
    SafetySetting,
)

logger = logging.getLogger(__name__)

SAFETY_SETTINGS = (
    SafetySetting(category="HARM_CATEGORY_HARASSMENT", threshold="BLOCK_MEDIUM_AND_ABOVE"),
    SafetySetting(category="HARM_CATEGORY_HATE_SPEECH", threshold="BLOCK_MEDIUM_AND_ABOVE"),
)


def decode_generate_content(data: Any) -> DecodeResult:
    """Extract the first candidate's text from a generateContent payload."""

    try:
        response = GenerateContentResponse.model_validate(data)
    except ValidationError as exc:
        return DecodeFailure(reason=f"Unexpected response structure ({exc.error_count()} errors)")

    if not response.candidates:
        return DecodeFailure(reason="Response contains no candidates")

    content = response.candidates[0].content
    if content is None or not content.parts:
        return DecodeFailure(reason="First candidate has no content parts")

    text = content.parts[0].text
    if not text:
        return DecodeFailure(reason="First candidate part has no text")

    return DecodedText(text=text)


class GeminiService:
    """Wrapper around Gemini's generateContent endpoint."""

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._api_key = settings.require_api_key()
        self._client = client
        self._settings = settings
        self._endpoint = (
            f"{settings.gemini_api_base.rstrip('/')}/models/"
            f"{settings.gemini_model}:generateContent"
        )

    def build_payload(self, prompt: str) -> dict[str, Any]:
        """Embed the prompt alongside the fixed generation and safety parameters."""

        request = GenerateContentRequest(
            contents=[GeminiContent(parts=[GeminiPart(text=prompt)])],
            generation_config=GenerationConfig(
                temperature=self._settings.gemini_temperature,
                top_p=self._settings.gemini_top_p,
                top_k=self._settings.gemini_top_k,
                max_output_tokens=self._settings.gemini_max_output_tokens,
            ),
            safety_settings=list(SAFETY_SETTINGS),
        )
        return request.model_dump(by_alias=True, exclude_none=True)

    async def generate(self, prompt: str) -> str:
        """Generate text for the prompt with a single provider call."""

        try:
            response = await self._client.post(
                self._endpoint,
                params={"key": self._api_key},
                headers={"Content-Type": "application/json"},
                json=self.build_payload(prompt),
                timeout=self._settings.provider_timeout,
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.warning("Gemini request timed out", exc_info=exc)
            raise ProviderTransportError("Gemini API request timed out") from exc
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Gemini API error",
                extra={
                    "status_code": exc.response.status_code,
                    "response_text": exc.response.text,
                },
            )
            raise ProviderTransportError(
                f"Gemini API error: {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            logger.exception("Unexpected Gemini HTTP error")
            raise ProviderTransportError("Gemini API request failed") from exc

        try:
            data = response.json()
        except ValueError as exc:
            logger.error("Non-JSON Gemini response", extra={"response_text": response.text})
            raise ProviderResponseError("Invalid response from Gemini API") from exc

        result = decode_generate_content(data)
        if isinstance(result, DecodeFailure):
            logger.error(
                "Malformed Gemini response",
                extra={"reason": result.reason, "raw_response": data},
            )
            raise ProviderResponseError("Invalid response from Gemini API")

        return result.text
