"""OpenAI-compatible chat completion and image generation provider."""

from __future__ import annotations

import os
from typing import Any

import httpx
from loguru import logger

from chatwarden.core.errors import ConfigurationError, ProviderError

DEFAULT_API_BASE = "https://api.openai.com/v1"


class OpenAICompatibleProvider:
    """Completion provider speaking the OpenAI HTTP API.

    Every request is bounded by ``timeout_seconds``; timeouts and non-2xx
    responses surface as ``ProviderError``.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        api_base: str | None = None,
        extra_headers: dict[str, str] | None = None,
        model: str = "gpt-3.5-turbo",
        image_size: str = "512x512",
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = (api_key or "").strip()
        base = api_base or os.environ.get("OPENAI_API_BASE") or DEFAULT_API_BASE
        self.api_base = base.rstrip("/")
        self.extra_headers = extra_headers
        self.model = model
        self.image_size = image_size
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def complete(self, prompt: str, *, temperature: float, max_tokens: int) -> str:
        data = await self._post(
            "/chat/completions",
            {
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": temperature,
                "max_tokens": max_tokens,
            },
        )
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"malformed completion response: {e}") from e
        if not isinstance(content, str):
            raise ProviderError("completion response has no text content")
        return content.strip()

    async def generate_image(self, prompt: str) -> str:
        data = await self._post(
            "/images/generations",
            {"prompt": prompt, "n": 1, "size": self.image_size},
        )
        try:
            url = data["data"][0]["url"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"malformed image response: {e}") from e
        if not isinstance(url, str) or not url:
            raise ProviderError("image response has no url")
        return url

    async def _post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        if not self.configured:
            raise ConfigurationError("OPENAI_API_KEY is not set")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            **(self.extra_headers or {}),
        }
        url = self.api_base + path
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout_seconds) as client:
                response = await client.post(url, headers=headers, json=body)
        except httpx.TimeoutException as e:
            logger.warning("provider_timeout url={} timeout={}s", url, self.timeout_seconds)
            raise ProviderError(f"request timed out after {self.timeout_seconds}s") from e
        except httpx.HTTPError as e:
            logger.warning("provider_http_error url={} error={}", url, e)
            raise ProviderError(str(e)) from e

        if response.status_code >= 400:
            logger.warning(
                "provider_error url={} status={} body={}",
                url,
                response.status_code,
                response.text[:300],
            )
            raise ProviderError(f"HTTP {response.status_code}")
        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError("response is not JSON") from e
        if not isinstance(data, dict):
            raise ProviderError("response is not a JSON object")
        return data
