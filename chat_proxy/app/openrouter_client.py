"""HTTP client for the OpenRouter chat completion API."""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from .config import Settings, get_settings
from .errors import UpstreamError
from .schemas import CompletionRequest

logger = logging.getLogger(__name__)


class OpenRouterClient:
    """Single-attempt wrapper around ``POST /chat/completions``."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        settings = settings or get_settings()
        self._base_url = settings.openrouter_base_url.rstrip("/")
        self._timeout = settings.openrouter_timeout
        self._headers = {
            "Authorization": f"Bearer {settings.openrouter_api_key}",
            "Referer": settings.app_url,
            "X-Title": settings.app_title,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        self._transport = transport

    async def complete(self, request: CompletionRequest) -> str:
        response_data = await self._post("/chat/completions", request.to_payload())
        return _extract_content(response_data)

    async def _post(self, path: str, json_payload: dict[str, Any]) -> Any:
        url = f"{self._base_url}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(url, json=json_payload, headers=self._headers)
        except httpx.RequestError as exc:
            logger.error("OpenRouter request failed: %s", exc)
            raise UpstreamError(f"Failed to reach completion provider: {exc}") from exc

        if not response.is_success:
            payload = _error_payload(response)
            logger.error(
                "OpenRouter API error: status=%s headers=%s error=%s",
                response.status_code,
                dict(response.headers),
                payload,
            )
            raise UpstreamError(
                f"API Error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                payload=payload,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(
                "Completion provider returned a non-JSON body",
                status_code=response.status_code,
                payload=response.text,
                malformed=True,
            ) from exc


def _error_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _extract_content(data: Any) -> str:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise UpstreamError(
            "Completion response is missing choices[0].message.content",
            payload=data,
            malformed=True,
        ) from exc
    if not isinstance(content, str):
        raise UpstreamError(
            "Completion content is not a string", payload=data, malformed=True
        )
    return content
