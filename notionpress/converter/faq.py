"""Extract FAQ question/answer pairs and build FAQPage structured data.

A page opts in by having a heading such as "자주 묻는 질문", "FAQ" or "Q&A".
Headings one level below it are questions; the text that follows each
question, up to the next question, is its answer.
"""

import json
import re
from typing import Any

from pydantic import BaseModel

from notionpress.converter.models import Block, Heading1Block, Heading2Block, Heading3Block

FAQ_MARKER_PATTERN = re.compile(r"자주\s*묻는\s*질문|FAQ|Q\s*&\s*A", re.IGNORECASE)
QUESTION_PREFIX_PATTERN = re.compile(r"^Q\d+[\s.:)\-]+", re.IGNORECASE)

MAX_HEADING_LEVEL = 3


class FaqItem(BaseModel):
    question: str
    answer: str


def _heading_level(block: Block) -> int | None:
    if isinstance(block, Heading1Block | Heading2Block | Heading3Block):
        return block.level
    return None


def strip_question_prefix(text: str) -> str:
    """'Q1: Why?' -> 'Why?'"""
    return QUESTION_PREFIX_PATTERN.sub("", text.strip(), count=1).strip()


def extract_faq_items(blocks: list[Block]) -> list[FaqItem]:
    """Scan the top-level blocks for an FAQ section.

    Questions without any answer text are dropped. The section ends at the
    next heading at or above the marker's level.
    """
    # before-marker: find the section heading
    marker_idx: int | None = None
    marker_level = 0
    for idx, block in enumerate(blocks):
        level = _heading_level(block)
        if level is not None and FAQ_MARKER_PATTERN.search(block.plain_text):
            marker_idx, marker_level = idx, level
            break
    if marker_idx is None:
        return []

    question_level = min(marker_level + 1, MAX_HEADING_LEVEL)
    items: list[FaqItem] = []
    question: str | None = None
    answer_parts: list[str] = []

    def flush() -> None:
        if question is not None and answer_parts:
            items.append(FaqItem(question=strip_question_prefix(question), answer=" ".join(answer_parts).strip()))

    # in-section
    for block in blocks[marker_idx + 1 :]:
        level = _heading_level(block)
        if level is not None and level <= marker_level:
            break
        if level == question_level:
            flush()
            question = block.plain_text
            answer_parts = []
            continue
        text = block.plain_text.strip()
        if text and question is not None:
            answer_parts.append(text)

    flush()
    return items


def build_faq_schema(items: list[FaqItem]) -> dict[str, Any] | None:
    """schema.org FAQPage JSON-LD for the extracted items, or None if there are none."""
    if not items:
        return None
    return {
        "@context": "https://schema.org",
        "@type": "FAQPage",
        "mainEntity": [
            {
                "@type": "Question",
                "name": item.question,
                "acceptedAnswer": {"@type": "Answer", "text": item.answer},
            }
            for item in items
        ],
    }


def render_faq_schema(items: list[FaqItem]) -> str:
    schema = build_faq_schema(items)
    if schema is None:
        return ""
    payload = json.dumps(schema, ensure_ascii=False).replace("</", "<\\/")
    return f'<script type="application/ld+json">{payload}</script>'
