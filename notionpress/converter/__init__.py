"""Notion block tree to HTML conversion, plus summary and FAQ extraction."""

from notionpress.converter.blocks import BlockRenderer, extract_youtube_id, render_blocks
from notionpress.converter.faq import FaqItem, build_faq_schema, extract_faq_items, render_faq_schema
from notionpress.converter.models import (
    Block,
    ImageBlock,
    RichText,
    UnknownBlock,
    parse_blocks,
)
from notionpress.converter.rich_text import escape_html, render_rich_text
from notionpress.converter.styles import COLOR_STYLES, STYLES
from notionpress.converter.text import extract_plain_text

__all__ = [
    # Rendering
    "BlockRenderer",
    "render_blocks",
    "render_rich_text",
    "escape_html",
    "extract_youtube_id",
    "STYLES",
    "COLOR_STYLES",
    # Extraction
    "extract_plain_text",
    "extract_faq_items",
    "build_faq_schema",
    "render_faq_schema",
    "FaqItem",
    # Models
    "Block",
    "ImageBlock",
    "RichText",
    "UnknownBlock",
    "parse_blocks",
]
