"""Minimal OpenRouter chat-completions client shared by chat and vision."""

import logging

import requests

from voice_assistant.config import OpenRouterConfig
from voice_assistant.errors import ProviderError

logger = logging.getLogger(__name__)


class OpenRouterClient:
    """Single-attempt POST to the OpenRouter chat completions endpoint."""

    def __init__(self, config: OpenRouterConfig, api_key: str | None, referer: str) -> None:
        self.config = config
        self.api_key = api_key
        self.referer = referer

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def complete(
        self,
        model: str,
        messages: list[dict],
        max_tokens: int,
        temperature: float | None = None,
    ) -> str:
        """Return the first choice's message content.

        Raises:
            ProviderError: missing key, transport failure, non-2xx status or
                a response body without the expected shape.
        """
        if not self.api_key:
            raise ProviderError("OpenRouter API key not configured")

        payload: dict = {"model": model, "messages": messages, "max_tokens": max_tokens}
        if temperature is not None:
            payload["temperature"] = temperature

        try:
            response = requests.post(
                self.config.url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                    "HTTP-Referer": self.referer,
                    "X-Title": self.config.app_title,
                },
                json=payload,
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise ProviderError(f"OpenRouter request failed: {e}") from e

        if not response.ok:
            logger.error("OpenRouter API error: %s - %s", response.status_code, response.text[:500])
            raise ProviderError(f"OpenRouter API error: {response.status_code}")

        try:
            choices = response.json().get("choices") or []
            if not choices:
                return ""
            message = choices[0].get("message") or {}
            return message.get("content") or ""
        except (ValueError, AttributeError) as e:
            raise ProviderError(f"Malformed OpenRouter response: {e}") from e
