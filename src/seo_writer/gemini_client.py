# -*- coding: utf-8 -*-
"""
Gemini API client for article streaming and image synthesis.

Uses the REST API directly through httpx.
No dependency on the google-genai SDK.
"""
import json
import logging
from collections.abc import AsyncGenerator

import httpx
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from .config import settings

logger = logging.getLogger(__name__)

# Gemini API base URL
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

# Status codes worth another attempt
TRANSIENT_STATUS_CODES = {429, 500, 502, 503, 504}


def _is_transient(error: BaseException) -> bool:
    """Check if an HTTP error is worth retrying."""
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code in TRANSIENT_STATUS_CODES
    return isinstance(error, httpx.TransportError)


class GeminiClient:
    """
    Async client for Google Gemini REST API.

    Streams article text and synthesizes images from visual prompts.
    """

    def __init__(
            self,
            api_key: str | None = None,
            model: str | None = None,
            image_model: str | None = None,
            temperature: float | None = None,
            max_tokens: int | None = None,
            transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize Gemini client.

        Args:
            api_key: Gemini API key. Defaults to settings.GEMINI_API_KEY.
            model: Text model name. Defaults to settings.GEMINI_MODEL.
            image_model: Image model name. Defaults to settings.GEMINI_IMAGE_MODEL.
            temperature: Generation temperature. Defaults to settings.GEMINI_TEMPERATURE.
            max_tokens: Max output tokens. Defaults to settings.GEMINI_MAX_TOKENS.
            transport: Custom httpx transport (tests).
        """
        self.api_key = api_key or settings.GEMINI_API_KEY
        self.model_name = model or settings.GEMINI_MODEL
        self.image_model_name = image_model or settings.GEMINI_IMAGE_MODEL
        self.temperature = temperature if temperature is not None else settings.GEMINI_TEMPERATURE
        self.max_tokens = max_tokens or settings.GEMINI_MAX_TOKENS
        self._transport = transport

    @property
    def stream_url(self) -> str:
        """Get the streaming endpoint URL."""
        return f"{GEMINI_BASE_URL}/{self.model_name}:streamGenerateContent"

    @property
    def image_url(self) -> str:
        """Get the image prediction endpoint URL."""
        return f"{GEMINI_BASE_URL}/{self.image_model_name}:predict"

    def _check_api_key(self):
        if not self.api_key:
            raise ValueError(
                "GEMINI_API_KEY is required. Set it in environment or .env file."
            )

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, transport=self._transport)

    async def stream_generate(
            self,
            prompt: str,
            system_instruction: str | None = None,
            temperature: float | None = None,
    ) -> AsyncGenerator[str, None]:
        """
        Stream generated text fragments for a prompt.

        Fragments are yielded as they arrive and may split words or tags.
        Errors are raised to the consumer: a broken stream is never retried.

        Args:
            prompt: The user prompt
            system_instruction: Optional system instruction
            temperature: Overrides the client temperature

        Yields:
            Text fragments in arrival order
        """
        self._check_api_key()

        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature if temperature is None else temperature,
                "maxOutputTokens": self.max_tokens,
            },
        }
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}

        fragments = 0
        async with self._client(settings.GEMINI_TIMEOUT) as client:
            async with client.stream(
                    "POST",
                    f"{self.stream_url}?alt=sse&key={self.api_key}",
                    headers={"Content-Type": "application/json"},
                    json=payload,
            ) as response:
                response.raise_for_status()

                async for line in response.aiter_lines():
                    if not line.startswith("data:"):
                        continue
                    data = json.loads(line[len("data:"):].strip())
                    text = self._extract_text(data)
                    if text:
                        fragments += 1
                        yield text

        logger.debug(
            "Gemini stream complete",
            extra={"prompt_length": len(prompt), "fragments": fragments},
        )

    @staticmethod
    def _extract_text(data: dict) -> str:
        """Concatenate the text parts of the first candidate."""
        candidates = data.get("candidates", [])
        if not candidates:
            return ""
        parts = candidates[0].get("content", {}).get("parts", [])
        return "".join(part.get("text", "") for part in parts)

    async def generate_image(self, prompt: str) -> str | None:
        """
        Synthesize an image for a visual prompt.

        Failures are logged and reported as None: the caller treats a missing
        image as "not available yet" and may ask again.

        Args:
            prompt: Visual idea description

        Returns:
            data: URL of the image, or None
        """
        try:
            self._check_api_key()
            return await self._predict_image(prompt)
        except Exception as e:
            logger.warning(
                f"Image generation failed: {e}",
                extra={"prompt": prompt[:80]},
            )
            return None

    @retry(
        retry=retry_if_exception(_is_transient),
        stop=stop_after_attempt(settings.RETRY_MAX_ATTEMPTS),
        wait=wait_exponential(min=settings.RETRY_MIN_WAIT, max=settings.RETRY_MAX_WAIT),
        reraise=True,
    )
    async def _predict_image(self, prompt: str) -> str | None:
        payload = {
            "instances": [{"prompt": prompt}],
            "parameters": {
                "sampleCount": 1,
                "aspectRatio": settings.IMAGE_ASPECT_RATIO,
            },
        }

        async with self._client(settings.IMAGE_TIMEOUT) as client:
            response = await client.post(
                self.image_url,
                headers={
                    "Content-Type": "application/json",
                    "x-goog-api-key": self.api_key,
                },
                json=payload,
            )
            response.raise_for_status()

        predictions = response.json().get("predictions", [])
        if not predictions or not predictions[0].get("bytesBase64Encoded"):
            logger.warning("Gemini returned no image", extra={"prompt": prompt[:80]})
            return None

        image = predictions[0]
        mime_type = image.get("mimeType", "image/png")
        return f"data:{mime_type};base64,{image['bytesBase64Encoded']}"


# Default client instance (lazy initialization)
_default_client: GeminiClient | None = None


def get_gemini_client() -> GeminiClient:
    """Get or create the default Gemini client."""
    global _default_client
    if _default_client is None:
        _default_client = GeminiClient()
    return _default_client
