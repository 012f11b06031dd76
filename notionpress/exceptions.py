from typing import Any


class PublishError(Exception):
    """Base exception for all publishing errors."""

    def __init__(self, message: str):
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        return {"detail": str(self)}


class ConfigurationError(PublishError):
    """Raised when a required setting is missing or unusable."""


class _HTTPAPIError(PublishError):
    service: str = "API"

    def __init__(self, status_code: int, body: str, *, message: str | None = None):
        super().__init__(message or f"{self.service} error {status_code}: {body}")
        self.status_code = status_code
        self.body = body

    def to_dict(self) -> dict[str, Any]:
        return {"detail": str(self), "status_code": self.status_code}


class NotionAPIError(_HTTPAPIError):
    """Raised when the Notion API answers with a non-2xx status."""

    service = "Notion API"


class WordPressAPIError(_HTTPAPIError):
    """Raised when the WordPress REST API answers with a non-2xx status."""

    service = "WP API"


class PageNotFoundError(PublishError):
    """Raised when a Notion page id cannot be resolved."""

    def __init__(self, page_id: str, *, message: str | None = None):
        super().__init__(message or f"Notion page {page_id!r} not found")
        self.page_id = page_id

    def to_dict(self) -> dict[str, Any]:
        return {"detail": str(self), "page_id": self.page_id}
