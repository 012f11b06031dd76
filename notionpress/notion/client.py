"""Thin async client for the Notion REST API."""

import asyncio
from typing import Any

import httpx
from loguru import logger

from notionpress.config import Settings
from notionpress.exceptions import NotionAPIError
from notionpress.retry import (
    DEFAULT_BASE_DELAY_SECONDS,
    DEFAULT_MAX_ATTEMPTS,
    is_retryable_http_error,
    with_retry,
)

NOTION_API_BASE = "https://api.notion.com/v1"
DEFAULT_API_VERSION = "2022-06-28"


class NotionClient:
    """Sends JSON requests to Notion with auth, pacing and retries.

    Use as an async context manager, or call `aclose()` when done.
    """

    def __init__(
        self,
        api_key: str,
        *,
        api_version: str = DEFAULT_API_VERSION,
        request_delay: float = 0.35,
        timeout: float = 30.0,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY_SECONDS,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.request_delay = request_delay
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Notion-Version": api_version,
            "Content-Type": "application/json",
        }
        self._client = http_client or httpx.AsyncClient(base_url=NOTION_API_BASE, timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "NotionClient":
        return cls(
            settings.notion_api_key,
            api_version=settings.notion_api_version,
            request_delay=settings.notion_api_delay_seconds,
            timeout=settings.http_timeout_seconds,
            max_attempts=settings.retry_max_attempts,
            base_delay=settings.retry_base_delay_seconds,
        )

    async def __aenter__(self) -> "NotionClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def pace(self) -> None:
        """Sleep between requests to stay under Notion's rate limit (~3 req/s)."""
        if self.request_delay > 0:
            await asyncio.sleep(self.request_delay)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the decoded JSON body.

        Raises:
            NotionAPIError: Non-2xx response after retries.
            httpx.RequestError: Transport failure after retries.
        """

        async def send() -> dict[str, Any]:
            response = await self._client.request(method, path, json=json, params=params, headers=self._headers)
            if response.is_error:
                raise NotionAPIError(response.status_code, response.text)
            return response.json()

        logger.debug(f"Notion {method} {path}")
        return await with_retry(
            send,
            max_attempts=self.max_attempts,
            base_delay=self.base_delay,
            label=f"Notion {method} {path}",
            retryable=is_retryable_http_error,
        )
