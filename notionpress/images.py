"""Re-host Notion images on WordPress before conversion.

Notion file URLs are signed and expire, so every image in the tree is copied
into the WordPress media library and the converter is handed an
original -> WordPress URL map.
"""

from loguru import logger

from notionpress.converter.models import Block, ImageBlock
from notionpress.wordpress.client import WordPressClient
from notionpress.wordpress.media import upload_image


def collect_image_urls(blocks: list[Block]) -> list[str]:
    """Image URLs in document order, children included."""
    urls: list[str] = []
    for block in blocks:
        if isinstance(block, ImageBlock) and block.image and block.image.url:
            urls.append(block.image.url)
        if block.children:
            urls.extend(collect_image_urls(block.children))
    return urls


async def process_images(client: WordPressClient, blocks: list[Block], slug: str) -> dict[str, str]:
    """Upload every image and return the URL substitution map.

    A failed upload is logged and left out of the map, so the converter falls
    back to the original URL for that image.
    """
    image_urls = collect_image_urls(blocks)
    url_map: dict[str, str] = {}
    if not image_urls:
        return url_map

    logger.info(f"Processing {len(image_urls)} images for {slug}")
    total = len(image_urls)
    for idx, original_url in enumerate(image_urls, start=1):
        if original_url in url_map:
            continue
        try:
            media = await upload_image(client, original_url, f"{slug}-{idx}")
        except Exception as e:
            logger.error(f"Failed to upload image {idx}/{total} ({original_url[:100]}): {e}")
            continue
        url_map[original_url] = media.source_url
        logger.info(f"Image {idx}/{total} uploaded: {media.source_url}")

    return url_map


async def upload_cover_image(client: WordPressClient, cover_url: str, slug: str) -> int | None:
    """Upload the cover and return its media id; None if there is no cover or the upload fails."""
    if not cover_url:
        return None
    try:
        logger.info(f"Uploading cover image for {slug}")
        media = await upload_image(client, cover_url, f"{slug}-cover")
    except Exception as e:
        logger.error(f"Failed to upload cover image: {e}")
        return None
    return media.id
