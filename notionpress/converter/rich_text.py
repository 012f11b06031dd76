"""Render Notion rich-text runs to inline HTML."""

import html

from notionpress.converter.models import RichText
from notionpress.converter.styles import COLOR_STYLES, STYLES


def escape_html(text: str) -> str:
    """Escape &, <, > and double quotes. Single quotes are left alone."""
    return html.escape(text, quote=False).replace('"', "&quot;")


def color_to_style(color: str | None) -> str:
    """Map a Notion color token to a CSS declaration, or "" for no styling."""
    if not color or color == "default":
        return ""
    return COLOR_STYLES.get(color, "")


def render_run(run: RichText) -> str:
    """Render a single run.

    Marks wrap innermost-first: code, strong, em, s, u, then the color span,
    then the link anchor outermost.
    """
    out = escape_html(run.plain_text)

    marks = run.annotations
    if marks:
        if marks.code:
            out = f"<code {STYLES['code']['inline']}>{out}</code>"
        if marks.bold:
            out = f"<strong>{out}</strong>"
        if marks.italic:
            out = f"<em>{out}</em>"
        if marks.strikethrough:
            out = f"<s>{out}</s>"
        if marks.underline:
            out = f"<u>{out}</u>"
        color_style = color_to_style(marks.color)
        if color_style:
            out = f'<span style="{color_style}">{out}</span>'

    href = run.link_url
    if href:
        out = f'<a href="{escape_html(href)}" target="_blank" rel="noopener noreferrer">{out}</a>'

    return out


def render_rich_text(runs: list[RichText] | None) -> str:
    if not runs:
        return ""
    return "".join(render_run(run) for run in runs)
