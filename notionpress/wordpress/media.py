import re
import time

from loguru import logger
from pydantic import BaseModel

from notionpress.wordpress.client import WordPressClient

_EXTENSION_PATTERN = re.compile(r"\.(\w+)$")

_CONTENT_TYPE_EXTENSIONS = {
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/svg+xml": "svg",
    "image/jpeg": "jpg",
}


class WpMedia(BaseModel):
    id: int
    source_url: str


def guess_content_type(url: str) -> str:
    lower = url.lower()
    if ".png" in lower:
        return "image/png"
    if ".gif" in lower:
        return "image/gif"
    if ".webp" in lower:
        return "image/webp"
    if ".svg" in lower:
        return "image/svg+xml"
    return "image/jpeg"


def guess_extension(url: str, content_type: str) -> str:
    """Extension from the URL path (query string ignored), else from the content type."""
    match = _EXTENSION_PATTERN.search(url.split("?")[0])
    if match:
        return match.group(1)
    return _CONTENT_TYPE_EXTENSIONS.get(content_type, "jpg")


async def upload_image(client: WordPressClient, image_url: str, filename_hint: str | None = None) -> WpMedia:
    """Download an image and re-upload it to the WordPress media library."""
    logger.info(f"Downloading image for WP upload: {image_url[:100]}")
    data = await client.download(image_url)

    content_type = guess_content_type(image_url)
    ext = guess_extension(image_url, content_type)
    filename = f"{filename_hint}.{ext}" if filename_hint else f"notion-image-{int(time.time() * 1000)}.{ext}"

    logger.info(f"Uploading image to WP: {filename} ({len(data)} bytes)")
    result = await client.upload("/media", data, filename, content_type)
    return WpMedia.model_validate(result)
