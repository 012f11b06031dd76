"""Notion API access: page queries, property reads and block tree fetching."""

from notionpress.notion.blocks import fetch_all_blocks, fetch_block_children
from notionpress.notion.client import NotionClient
from notionpress.notion.pages import (
    NotionPage,
    fetch_page,
    get_cover_image,
    get_multi_select_values,
    get_property_value,
    query_publishable_pages,
    query_scheduled_pages,
    update_wp_post_id,
)

__all__ = [
    "NotionClient",
    "NotionPage",
    "fetch_all_blocks",
    "fetch_block_children",
    "fetch_page",
    "get_cover_image",
    "get_multi_select_values",
    "get_property_value",
    "query_publishable_pages",
    "query_scheduled_pages",
    "update_wp_post_id",
]
