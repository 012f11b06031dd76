"""Render a Notion block tree to WordPress-ready HTML.

Walks the top-level block list once, left to right. Consecutive list items of
the same kind are collected into a single <ul>/<ol> container; every other
block is rendered on its own. Each rendered unit becomes one output line and
empty units are dropped.
"""

import re
from collections.abc import Callable, Mapping

from notionpress.converter.models import (
    Block,
    BookmarkBlock,
    BulletedListItemBlock,
    CalloutBlock,
    CodeBlock,
    ColumnListBlock,
    EmbedBlock,
    Heading1Block,
    Heading2Block,
    Heading3Block,
    ImageBlock,
    NumberedListItemBlock,
    ParagraphBlock,
    QuoteBlock,
    TableBlock,
    TableRowBlock,
    ToDoBlock,
    ToggleBlock,
    UnknownBlock,
    VideoBlock,
    to_plain_text,
)
from notionpress.converter.rich_text import escape_html, render_rich_text
from notionpress.converter.styles import STYLES

# watch?v=ID, embed/ID and youtu.be/ID; group 1 is the video id
YOUTUBE_PATTERN = re.compile(r"(?:youtube\.com/(?:watch\?v=|embed/)|youtu\.be/)([a-zA-Z0-9_-]+)")

LIST_KINDS = frozenset({"bulleted_list_item", "numbered_list_item", "to_do"})

# Heading level 1 is the post title, so body headings start at h2
_HEADING_TAGS = {1: "h2", 2: "h3", 3: "h4"}


def extract_youtube_id(url: str) -> str | None:
    match = YOUTUBE_PATTERN.search(url)
    return match.group(1) if match else None


def _list_kind(block: Block) -> str | None:
    """The list kind a block groups under, or None for blocks rendered alone."""
    if isinstance(block, UnknownBlock) or block.type not in LIST_KINDS:
        return None
    return block.type


class BlockRenderer:
    """Renders block lists to HTML, rewriting image URLs through `image_url_map`.

    The map is only read. URLs missing from it are emitted unchanged.
    """

    def __init__(self, image_url_map: Mapping[str, str] | None = None):
        self.image_url_map: Mapping[str, str] = image_url_map or {}
        self._handlers: dict[str, Callable[[Block], str]] = {
            "paragraph": self._render_paragraph,
            "heading_1": self._render_heading,
            "heading_2": self._render_heading,
            "heading_3": self._render_heading,
            "image": self._render_image,
            "code": self._render_code,
            "quote": self._render_quote,
            "callout": self._render_callout,
            "table": self._render_table,
            "toggle": self._render_toggle,
            "divider": self._render_divider,
            "bookmark": self._render_bookmark,
            "embed": self._render_embed,
            "video": self._render_video,
            "column_list": self._render_column_list,
            # Columns only render through their column_list
            "column": self._render_nothing,
            "table_of_contents": self._render_nothing,
            "breadcrumb": self._render_nothing,
            "child_page": self._render_nothing,
            "child_database": self._render_nothing,
            "unsupported": self._render_nothing,
            # A table_row only makes sense inside its table
            "table_row": self._render_nothing,
        }
        self._list_renderers: dict[str, Callable[[list[Block]], str]] = {
            "bulleted_list_item": self._render_bulleted_list,
            "numbered_list_item": self._render_numbered_list,
            "to_do": self._render_todo_list,
        }

    def render(self, blocks: list[Block]) -> str:
        """Render a sibling list, grouping runs of same-kind list items."""
        parts: list[str] = []
        group: list[Block] = []  # pending run of list items, all the same kind

        for block in blocks:
            kind = _list_kind(block)
            if group and kind != group[0].type:
                parts.append(self._render_list_group(group))
                group = []
            if kind:
                group.append(block)
                continue
            parts.append(self._render_block(block))

        if group:
            parts.append(self._render_list_group(group))

        return "\n".join(part for part in parts if part)

    def _render_block(self, block: Block) -> str:
        # A known kind that failed validation keeps its type tag but not its payload model
        if isinstance(block, UnknownBlock):
            return self._render_fallback(block)
        handler = self._handlers.get(block.type)
        if handler:
            return handler(block)
        return self._render_fallback(block)

    def _render_children(self, block: Block) -> str:
        if not block.children:
            return ""
        return self.render(block.children)

    def _render_nothing(self, block: Block) -> str:
        return ""

    def _render_fallback(self, block: Block) -> str:
        """Unknown kinds: keep their text as a paragraph if they carry any."""
        runs = block.rich_text
        if not runs:
            return ""
        return f"<p>{render_rich_text(runs)}</p>"

    # === TEXT BLOCKS ===

    def _render_paragraph(self, block: ParagraphBlock) -> str:
        html = render_rich_text(block.rich_text)
        children = self._render_children(block)
        if not html and not children:
            return ""
        return f"<p>{html}</p>{children}"

    def _render_heading(self, block: Heading1Block | Heading2Block | Heading3Block) -> str:
        tag = _HEADING_TAGS[block.level]
        return f"<{tag}>{render_rich_text(block.rich_text)}</{tag}>"

    def _render_quote(self, block: QuoteBlock) -> str:
        html = render_rich_text(block.rich_text)
        children = self._render_children(block)
        return f"<blockquote {STYLES['quote']['wrapper']}>{html}{children}</blockquote>"

    def _render_callout(self, block: CalloutBlock) -> str:
        style = STYLES["callout"]
        html = render_rich_text(block.rich_text)
        children = self._render_children(block)
        return (
            f"<div {style['wrapper']}>"
            f"<span {style['icon']}>{block.emoji}</span>"
            f"<span {style['content']}>{html}</span>"
            f"{children}</div>"
        )

    def _render_toggle(self, block: ToggleBlock) -> str:
        style = STYLES["toggle"]
        html = render_rich_text(block.rich_text)
        children = self._render_children(block)
        return (
            f"<details {style['details']}>"
            f"<summary {style['summary']}>{html}</summary>"
            f"<div {style['content']}>{children}</div>"
            "</details>"
        )

    def _render_code(self, block: CodeBlock) -> str:
        if block.code is None:
            return ""
        # Code is shown verbatim: escape markup but leave quotes intact
        text = to_plain_text(block.code.rich_text)
        escaped = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        language = block.code.language or ""
        return f'<pre {STYLES["code"]["pre"]}><code class="language-{language}">{escaped}</code></pre>'

    def _render_divider(self, block: Block) -> str:
        return f"<hr {STYLES['divider']['hr']} />"

    # === LISTS ===

    def _render_list_group(self, group: list[Block]) -> str:
        return self._list_renderers[group[0].type](group)

    def _render_list_item(self, block: Block, prefix: str = "") -> str:
        html = render_rich_text(block.rich_text)
        children = self._render_children(block)
        return f"<li>{prefix}{html}{children}</li>"

    def _render_bulleted_list(self, blocks: list[BulletedListItemBlock]) -> str:
        return f"<ul>{''.join(self._render_list_item(b) for b in blocks)}</ul>"

    def _render_numbered_list(self, blocks: list[NumberedListItemBlock]) -> str:
        return f"<ol>{''.join(self._render_list_item(b) for b in blocks)}</ol>"

    def _render_todo_list(self, blocks: list[ToDoBlock]) -> str:
        items = []
        for block in blocks:
            checked = " checked" if block.checked else ""
            items.append(self._render_list_item(block, prefix=f'<input type="checkbox"{checked} disabled /> '))
        return f"<ul {STYLES['todo']['list']}>{''.join(items)}</ul>"

    # === MEDIA ===

    def _render_image(self, block: ImageBlock) -> str:
        if block.image is None:
            return ""

        original_url = block.image.url
        url = self.image_url_map.get(original_url) or original_url
        style = STYLES["image"]

        caption_html = render_rich_text(block.image.caption)
        alt = escape_html(to_plain_text(block.image.caption))
        figcaption = f"<figcaption {style['caption']}>{caption_html}</figcaption>" if caption_html else ""

        return f'<figure {style["wrapper"]}><img src="{escape_html(url)}" alt="{alt}" {style["img"]} />{figcaption}</figure>'

    def _render_video(self, block: VideoBlock) -> str:
        if block.video is None:
            return ""
        # Videos are not re-hosted, so the substitution map is not consulted
        url = block.video.url
        video_id = extract_youtube_id(url)
        if video_id:
            return self._render_youtube(video_id)
        return f'<video controls {STYLES["video"]["native"]}><source src="{escape_html(url)}" /></video>'

    def _render_embed(self, block: EmbedBlock) -> str:
        url = block.embed.url if block.embed else None
        if not url:
            return ""
        video_id = extract_youtube_id(url)
        if video_id:
            return self._render_youtube(video_id)
        return self._render_link_card(url, escape_html(url))

    def _render_bookmark(self, block: BookmarkBlock) -> str:
        url = block.bookmark.url if block.bookmark else None
        if not url:
            return ""
        caption = render_rich_text(block.bookmark.caption)
        return self._render_link_card(url, caption or escape_html(url))

    def _render_youtube(self, video_id: str) -> str:
        style = STYLES["video"]
        return (
            f"<div {style['wrapper']}>"
            f'<iframe src="https://www.youtube.com/embed/{video_id}" {style["iframe"]}></iframe>'
            "</div>"
        )

    def _render_link_card(self, url: str, label: str) -> str:
        style = STYLES["bookmark"]
        return (
            f"<div {style['wrapper']}>"
            f'<a href="{escape_html(url)}" {style["link"]} target="_blank" rel="noopener noreferrer">{label}</a>'
            "</div>"
        )

    # === LAYOUT ===

    def _render_table(self, block: TableBlock) -> str:
        style = STYLES["table"]
        has_column_header = block.table.has_column_header if block.table else False
        rows = [row for row in block.children if isinstance(row, TableRowBlock)]

        rows_html = []
        for idx, row in enumerate(rows):
            is_header = has_column_header and idx == 0
            row_attr = f" {style['header_row']}" if is_header else ""
            cell_tag = "th" if is_header else "td"
            cell_style = style["header_cell"] if is_header else style["cell"]
            cells = "".join(f"<{cell_tag} {cell_style}>{render_rich_text(cell)}</{cell_tag}>" for cell in row.cells)
            rows_html.append(f"<tr{row_attr}>{cells}</tr>")

        return f"<table {style['table']}><tbody>{''.join(rows_html)}</tbody></table>"

    def _render_column_list(self, block: ColumnListBlock) -> str:
        columns = block.children
        if not columns:
            return ""
        style = STYLES["columns"]
        width = 100 // len(columns)
        cols_html = "".join(
            f'<div {style["column"]} data-width="{width}">{self._render_children(column)}</div>' for column in columns
        )
        return f"<div {style['wrapper']}>{cols_html}</div>"


def render_blocks(blocks: list[Block], image_url_map: Mapping[str, str] | None = None) -> str:
    """Render a Notion block list to HTML."""
    return BlockRenderer(image_url_map).render(blocks)
