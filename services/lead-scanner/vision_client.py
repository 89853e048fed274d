"""Client for the OpenAI vision model used to read business cards.

The SDK's own retries are disabled: a failed call is reported to the
caller, never retried here.
"""

import logging

from openai import OpenAI

from config import settings

logger = logging.getLogger(__name__)


class VisionNotConfigured(Exception):
    """No API key is available for the vision model."""


class VisionClient:
    """Thin wrapper around chat completions with an inlined image."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        client: OpenAI | None = None,
    ):
        self._api_key = api_key if api_key is not None else settings.OPENAI_API_KEY
        self._model = model or settings.OPENAI_MODEL
        self._max_tokens = max_tokens if max_tokens is not None else settings.VISION_MAX_TOKENS
        self._temperature = temperature if temperature is not None else settings.VISION_TEMPERATURE
        self._timeout = timeout if timeout is not None else settings.VISION_TIMEOUT_SECONDS
        if client is None and self._api_key:
            client = OpenAI(api_key=self._api_key, timeout=self._timeout, max_retries=0)
        self._client = client

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    def _get_client(self) -> OpenAI:
        if self._client is None:
            raise VisionNotConfigured("OPENAI_API_KEY is not set")
        return self._client

    def close(self):
        if self._client is not None:
            self._client.close()

    def complete(self, prompt: str, image_data_url: str) -> str:
        """Send the prompt and image, return the model's text reply ("" if none)."""
        client = self._get_client()
        response = client.chat.completions.create(
            model=self._model,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {"type": "image_url", "image_url": {"url": image_data_url}},
                    ],
                }
            ],
            max_tokens=self._max_tokens,
            temperature=self._temperature,
        )

        if not response.choices:
            return ""
        raw_text = response.choices[0].message.content or ""
        logger.info("Vision model response received (%d chars)", len(raw_text))
        return raw_text
