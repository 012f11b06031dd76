"""Async client for the WordPress REST API (wp/v2), using application passwords."""

from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger

from notionpress.config import Settings
from notionpress.exceptions import WordPressAPIError
from notionpress.retry import (
    DEFAULT_BASE_DELAY_SECONDS,
    DEFAULT_MAX_ATTEMPTS,
    is_retryable_http_error,
    with_retry,
)

API_PREFIX = "/wp-json/wp/v2"


class WordPressClient:
    def __init__(
        self,
        url: str,
        username: str,
        app_password: str,
        *,
        timeout: float = 30.0,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY_SECONDS,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.base_url = f"{url.rstrip('/')}{API_PREFIX}"
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self._auth = httpx.BasicAuth(username, app_password)
        self._client = http_client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    @classmethod
    def from_settings(cls, settings: Settings) -> "WordPressClient":
        return cls(
            settings.wp_url,
            settings.wp_username,
            settings.wp_app_password,
            timeout=settings.http_timeout_seconds,
            max_attempts=settings.retry_max_attempts,
            base_delay=settings.retry_base_delay_seconds,
        )

    async def __aenter__(self) -> "WordPressClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(self, label: str, method: str, endpoint: str, **kwargs: Any) -> Any:
        async def send() -> Any:
            response = await self._client.request(method, f"{self.base_url}{endpoint}", auth=self._auth, **kwargs)
            if response.is_error:
                raise WordPressAPIError(response.status_code, response.text)
            return response.json()

        return await with_retry(
            send,
            max_attempts=self.max_attempts,
            base_delay=self.base_delay,
            label=label,
            retryable=is_retryable_http_error,
        )

    async def request_json(
        self,
        method: str,
        endpoint: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Send a JSON request to `endpoint` (e.g. "/posts") and return the decoded body.

        Raises:
            WordPressAPIError: Non-2xx response after retries.
        """
        logger.debug(f"WP {method} {endpoint}")
        return await self._send(f"WP {method} {endpoint}", method, endpoint, json=json, params=params)

    async def upload(self, endpoint: str, data: bytes, filename: str, content_type: str) -> dict[str, Any]:
        """Upload raw file bytes (used for /media)."""
        headers = {
            "Content-Disposition": f'attachment; filename="{quote(filename)}"',
            "Content-Type": content_type,
        }
        return await self._send(f"WP upload {filename}", "POST", endpoint, content=data, headers=headers)

    async def download(self, url: str) -> bytes:
        """GET an arbitrary URL (no WP auth), e.g. a Notion-hosted image."""

        async def fetch() -> bytes:
            response = await self._client.get(url)
            response.raise_for_status()
            return response.content

        return await with_retry(fetch, max_attempts=self.max_attempts, base_delay=self.base_delay, label="download image")
