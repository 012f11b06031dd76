"""Blog database queries and page property access."""

from datetime import date
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from notionpress.converter.models import FileObject
from notionpress.exceptions import NotionAPIError, PageNotFoundError
from notionpress.notion.client import NotionClient

STATUS_PROPERTY = "Status"
PUBLISHED_STATUS = "Published"
WP_POST_ID_PROPERTY = "WP Post ID"
DATE_PROPERTY = "Date"


class NotionPage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    properties: dict[str, Any] = Field(default_factory=dict)
    cover: FileObject | None = None


def _file_url(item: dict[str, Any]) -> str:
    holder = item.get("file") if item.get("type") == "file" else item.get("external")
    return (holder or {}).get("url") or ""


def _join_plain_text(items: list[dict[str, Any]] | None) -> str:
    return "".join(item.get("plain_text", "") for item in items or [])


def get_property_value(page: NotionPage, key: str) -> str:
    """Read a database property as a string. Missing or unsupported properties give ""."""
    prop = page.properties.get(key)
    if not isinstance(prop, dict):
        return ""

    kind = prop.get("type")
    value = prop.get(kind) if isinstance(kind, str) else None

    if kind in ("title", "rich_text"):
        return _join_plain_text(value)
    if kind in ("select", "status"):
        return (value or {}).get("name", "")
    if kind == "date":
        return (value or {}).get("start", "")
    if kind == "number":
        return "" if value is None else str(value)
    if kind == "checkbox":
        return "true" if value else "false"
    if kind == "url":
        return value or ""
    if kind == "files":
        return _file_url(value[0]) if value else ""
    return ""


def get_multi_select_values(page: NotionPage, key: str) -> list[str]:
    prop = page.properties.get(key)
    if not isinstance(prop, dict) or prop.get("type") != "multi_select":
        return []
    return [option["name"] for option in prop.get("multi_select") or [] if option.get("name")]


def get_cover_image(page: NotionPage) -> str:
    return page.cover.url if page.cover else ""


def _publishable_filter() -> list[dict[str, Any]]:
    return [
        {"property": STATUS_PROPERTY, "status": {"equals": PUBLISHED_STATUS}},
        {"property": WP_POST_ID_PROPERTY, "number": {"is_empty": True}},
    ]


async def _query(client: NotionClient, database_id: str, body: dict[str, Any]) -> list[NotionPage]:
    await client.pace()
    response = await client.request("POST", f"/databases/{database_id}/query", json=body)
    return [NotionPage.model_validate(result) for result in response.get("results", [])]


async def query_publishable_pages(client: NotionClient, database_id: str) -> list[NotionPage]:
    """Published pages that have not been posted yet, oldest first."""
    logger.info(f"Querying Notion DB {database_id} for publishable pages")
    pages = await _query(
        client,
        database_id,
        {
            "filter": {"and": _publishable_filter()},
            "sorts": [{"property": DATE_PROPERTY, "direction": "ascending"}],
        },
    )
    logger.info(f"Found {len(pages)} pages to publish")
    return pages


async def query_scheduled_pages(client: NotionClient, database_id: str, today: date | None = None) -> list[NotionPage]:
    """The single oldest unposted page whose Date is today or earlier."""
    day = (today or date.today()).isoformat()
    logger.info(f"Querying Notion DB {database_id} for scheduled pages (today={day})")
    pages = await _query(
        client,
        database_id,
        {
            "filter": {"and": [*_publishable_filter(), {"property": DATE_PROPERTY, "date": {"on_or_before": day}}]},
            "sorts": [{"property": DATE_PROPERTY, "direction": "ascending"}],
            "page_size": 1,
        },
    )
    logger.info(f"Found {len(pages)} scheduled pages")
    return pages


async def fetch_page(client: NotionClient, page_id: str) -> NotionPage:
    logger.info(f"Fetching Notion page {page_id}")
    await client.pace()
    try:
        data = await client.request("GET", f"/pages/{page_id}")
    except NotionAPIError as e:
        if e.status_code == 404:
            raise PageNotFoundError(page_id) from e
        raise
    return NotionPage.model_validate(data)


async def update_wp_post_id(client: NotionClient, page_id: str, wp_post_id: int) -> None:
    """Record the WordPress post id on the page so it is not published twice."""
    logger.info(f"Updating Notion page {page_id} with WP Post ID {wp_post_id}")
    await client.pace()
    await client.request(
        "PATCH",
        f"/pages/{page_id}",
        json={"properties": {WP_POST_ID_PROPERTY: {"number": wp_post_id}}},
    )
