"""Plain-text summaries of a block list, used for post excerpts."""

import re

from notionpress.converter.models import Block

ELLIPSIS = "..."
DEFAULT_MAX_LENGTH = 160

_WHITESPACE = re.compile(r"\s+")


def extract_plain_text(blocks: list[Block], max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Flatten top-level block text into a single summary string.

    Only the top-level blocks are read, children are not visited. Every
    block's text is collected, empty text included, until the space-joined
    length reaches `max_length`; an empty block still adds its separator to
    that count. The result is whitespace-collapsed and hard-truncated with an
    ellipsis if still too long.
    """
    parts: list[str] = []
    for block in blocks:
        parts.append(block.plain_text)
        if len(" ".join(parts)) >= max_length:
            break

    summary = _WHITESPACE.sub(" ", " ".join(parts)).strip()
    if len(summary) > max_length:
        return summary[:max_length] + ELLIPSIS
    return summary
