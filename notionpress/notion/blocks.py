"""Fetch a page's full block tree."""

from typing import Any

from loguru import logger

from notionpress.converter.models import Block, parse_blocks
from notionpress.notion.client import NotionClient

PAGE_SIZE = 100


async def fetch_block_children(client: NotionClient, block_id: str) -> list[dict[str, Any]]:
    """List the direct children of a block (or page), following pagination cursors."""
    results: list[dict[str, Any]] = []
    cursor: str | None = None

    while True:
        params: dict[str, Any] = {"page_size": PAGE_SIZE}
        if cursor:
            params["start_cursor"] = cursor
        await client.pace()
        response = await client.request("GET", f"/blocks/{block_id}/children", params=params)
        results.extend(response.get("results", []))

        cursor = response.get("next_cursor") if response.get("has_more") else None
        if not cursor:
            return results


async def _fetch_nested_children(client: NotionClient, blocks: list[dict[str, Any]]) -> None:
    for block in blocks:
        if block.get("has_children"):
            logger.debug(f"Fetching nested children of {block.get('type')} block {block.get('id')}")
            block["children"] = await fetch_block_children(client, block["id"])
            await _fetch_nested_children(client, block["children"])


async def fetch_all_blocks(client: NotionClient, page_id: str) -> list[Block]:
    """Fetch every block of a page, children populated recursively."""
    raw = await fetch_block_children(client, page_id)
    await _fetch_nested_children(client, raw)
    return parse_blocks(raw)
