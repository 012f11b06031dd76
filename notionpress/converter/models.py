"""Data models for the Notion block tree.

Blocks arrive from the Notion API as dicts keyed by a `type` tag, with the
kind-specific payload stored under a key equal to that tag. Each known kind
gets its own model; anything else, including a known kind whose payload is
malformed, becomes an UnknownBlock so the converter can still walk it.
"""

from typing import Annotated, Any, Literal

from loguru import logger
from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, TypeAdapter, ValidationError, field_validator

# === RICH TEXT ===


class RichTextAnnotations(BaseModel):
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: str = "default"

    # Notion occasionally sends null marks
    @field_validator("bold", "italic", "strikethrough", "underline", "code", mode="before")
    @classmethod
    def _null_mark_is_off(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("color", mode="before")
    @classmethod
    def _null_color_is_default(cls, value: Any) -> Any:
        return "default" if value is None else value


class Link(BaseModel):
    url: str


class TextPayload(BaseModel):
    content: str = ""
    link: Link | None = None


class RichText(BaseModel):
    """One styled inline span."""

    model_config = ConfigDict(extra="ignore")

    type: str = "text"
    plain_text: str = ""
    annotations: RichTextAnnotations | None = None
    href: str | None = None
    text: TextPayload | None = None

    @property
    def link_url(self) -> str | None:
        """Directly attached href wins over a link nested in the text payload."""
        if self.href:
            return self.href
        if self.text and self.text.link:
            return self.text.link.url
        return None


_rich_text_list = TypeAdapter(list[RichText])


def to_plain_text(runs: list[RichText]) -> str:
    return "".join(run.plain_text for run in runs)


# === PAYLOADS ===


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class RichTextPayload(_Payload):
    rich_text: list[RichText] = Field(default_factory=list)
    color: str = "default"


class HeadingPayload(RichTextPayload):
    is_toggleable: bool = False


class ToDoPayload(RichTextPayload):
    checked: bool = False


class CodePayload(_Payload):
    rich_text: list[RichText] = Field(default_factory=list)
    caption: list[RichText] = Field(default_factory=list)
    language: str | None = None


class Icon(_Payload):
    type: str = ""
    emoji: str | None = None


class CalloutPayload(RichTextPayload):
    icon: Icon | None = None


class UrlHolder(_Payload):
    url: str = ""


class FileObject(_Payload):
    """Media payload: either a Notion-hosted file or an external URL."""

    type: str = "external"
    file: UrlHolder | None = None
    external: UrlHolder | None = None
    caption: list[RichText] = Field(default_factory=list)

    @property
    def url(self) -> str:
        holder = self.file if self.type == "file" else self.external
        return holder.url if holder else ""


class TablePayload(_Payload):
    table_width: int = 0
    has_column_header: bool = False
    has_row_header: bool = False


class TableRowPayload(_Payload):
    cells: list[list[RichText]] = Field(default_factory=list)


class BookmarkPayload(_Payload):
    url: str | None = None
    caption: list[RichText] = Field(default_factory=list)


class EmbedPayload(_Payload):
    url: str | None = None
    caption: list[RichText] = Field(default_factory=list)


# === BLOCKS ===


class BaseBlock(BaseModel):
    """Fields every block shares. `children` is filled in by the fetch layer."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    has_children: bool = False
    children: list["Block"] = Field(default_factory=list)

    @property
    def rich_text(self) -> list[RichText]:
        return []

    @property
    def plain_text(self) -> str:
        return to_plain_text(self.rich_text)


class ParagraphBlock(BaseBlock):
    type: Literal["paragraph"] = "paragraph"
    paragraph: RichTextPayload | None = None

    @property
    def rich_text(self) -> list[RichText]:
        return self.paragraph.rich_text if self.paragraph else []


class Heading1Block(BaseBlock):
    type: Literal["heading_1"] = "heading_1"
    heading_1: HeadingPayload | None = None
    level: Literal[1] = 1

    @property
    def rich_text(self) -> list[RichText]:
        return self.heading_1.rich_text if self.heading_1 else []


class Heading2Block(BaseBlock):
    type: Literal["heading_2"] = "heading_2"
    heading_2: HeadingPayload | None = None
    level: Literal[2] = 2

    @property
    def rich_text(self) -> list[RichText]:
        return self.heading_2.rich_text if self.heading_2 else []


class Heading3Block(BaseBlock):
    type: Literal["heading_3"] = "heading_3"
    heading_3: HeadingPayload | None = None
    level: Literal[3] = 3

    @property
    def rich_text(self) -> list[RichText]:
        return self.heading_3.rich_text if self.heading_3 else []


class BulletedListItemBlock(BaseBlock):
    type: Literal["bulleted_list_item"] = "bulleted_list_item"
    bulleted_list_item: RichTextPayload | None = None

    @property
    def rich_text(self) -> list[RichText]:
        return self.bulleted_list_item.rich_text if self.bulleted_list_item else []


class NumberedListItemBlock(BaseBlock):
    type: Literal["numbered_list_item"] = "numbered_list_item"
    numbered_list_item: RichTextPayload | None = None

    @property
    def rich_text(self) -> list[RichText]:
        return self.numbered_list_item.rich_text if self.numbered_list_item else []


class ToDoBlock(BaseBlock):
    type: Literal["to_do"] = "to_do"
    to_do: ToDoPayload | None = None

    @property
    def rich_text(self) -> list[RichText]:
        return self.to_do.rich_text if self.to_do else []

    @property
    def checked(self) -> bool:
        return bool(self.to_do and self.to_do.checked)


class ImageBlock(BaseBlock):
    type: Literal["image"] = "image"
    image: FileObject | None = None


class VideoBlock(BaseBlock):
    type: Literal["video"] = "video"
    video: FileObject | None = None


class CodeBlock(BaseBlock):
    type: Literal["code"] = "code"
    code: CodePayload | None = None

    @property
    def rich_text(self) -> list[RichText]:
        return self.code.rich_text if self.code else []


class QuoteBlock(BaseBlock):
    type: Literal["quote"] = "quote"
    quote: RichTextPayload | None = None

    @property
    def rich_text(self) -> list[RichText]:
        return self.quote.rich_text if self.quote else []


class CalloutBlock(BaseBlock):
    type: Literal["callout"] = "callout"
    callout: CalloutPayload | None = None

    @property
    def rich_text(self) -> list[RichText]:
        return self.callout.rich_text if self.callout else []

    @property
    def emoji(self) -> str:
        icon = self.callout.icon if self.callout else None
        if icon and icon.type == "emoji":
            return icon.emoji or ""
        return ""


class TableBlock(BaseBlock):
    type: Literal["table"] = "table"
    table: TablePayload | None = None


class TableRowBlock(BaseBlock):
    type: Literal["table_row"] = "table_row"
    table_row: TableRowPayload | None = None

    @property
    def cells(self) -> list[list[RichText]]:
        return self.table_row.cells if self.table_row else []


class ToggleBlock(BaseBlock):
    type: Literal["toggle"] = "toggle"
    toggle: RichTextPayload | None = None

    @property
    def rich_text(self) -> list[RichText]:
        return self.toggle.rich_text if self.toggle else []


class DividerBlock(BaseBlock):
    type: Literal["divider"] = "divider"


class BookmarkBlock(BaseBlock):
    type: Literal["bookmark"] = "bookmark"
    bookmark: BookmarkPayload | None = None


class EmbedBlock(BaseBlock):
    type: Literal["embed"] = "embed"
    embed: EmbedPayload | None = None


class ColumnListBlock(BaseBlock):
    type: Literal["column_list"] = "column_list"


class ColumnBlock(BaseBlock):
    type: Literal["column"] = "column"


SKIPPED_TYPES = frozenset({"table_of_contents", "breadcrumb", "child_page", "child_database", "unsupported"})


class SkippedBlock(BaseBlock):
    """Structural blocks that never produce output."""

    type: Literal["table_of_contents", "breadcrumb", "child_page", "child_database", "unsupported"]


class UnknownBlock(BaseBlock):
    """Any block kind the converter has no dedicated model for.

    The raw payload stays available in `model_extra` under the block's type.
    """

    model_config = ConfigDict(extra="allow")

    type: str

    @property
    def payload(self) -> Any:
        return (self.model_extra or {}).get(self.type)

    @property
    def rich_text(self) -> list[RichText]:
        payload = self.payload
        if not isinstance(payload, dict) or not payload.get("rich_text"):
            return []
        try:
            return _rich_text_list.validate_python(payload["rich_text"])
        except ValidationError:
            return []


_BLOCK_TAGS = {
    "paragraph": "paragraph",
    "heading_1": "heading_1",
    "heading_2": "heading_2",
    "heading_3": "heading_3",
    "bulleted_list_item": "bulleted_list_item",
    "numbered_list_item": "numbered_list_item",
    "to_do": "to_do",
    "image": "image",
    "video": "video",
    "code": "code",
    "quote": "quote",
    "callout": "callout",
    "table": "table",
    "table_row": "table_row",
    "toggle": "toggle",
    "divider": "divider",
    "bookmark": "bookmark",
    "embed": "embed",
    "column_list": "column_list",
    "column": "column",
    **{kind: "skipped" for kind in SKIPPED_TYPES},
}


def _block_tag(value: Any) -> str:
    kind = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    return _BLOCK_TAGS.get(kind, "unknown") if isinstance(kind, str) else "unknown"


Block = Annotated[
    Annotated[ParagraphBlock, Tag("paragraph")]
    | Annotated[Heading1Block, Tag("heading_1")]
    | Annotated[Heading2Block, Tag("heading_2")]
    | Annotated[Heading3Block, Tag("heading_3")]
    | Annotated[BulletedListItemBlock, Tag("bulleted_list_item")]
    | Annotated[NumberedListItemBlock, Tag("numbered_list_item")]
    | Annotated[ToDoBlock, Tag("to_do")]
    | Annotated[ImageBlock, Tag("image")]
    | Annotated[VideoBlock, Tag("video")]
    | Annotated[CodeBlock, Tag("code")]
    | Annotated[QuoteBlock, Tag("quote")]
    | Annotated[CalloutBlock, Tag("callout")]
    | Annotated[TableBlock, Tag("table")]
    | Annotated[TableRowBlock, Tag("table_row")]
    | Annotated[ToggleBlock, Tag("toggle")]
    | Annotated[DividerBlock, Tag("divider")]
    | Annotated[BookmarkBlock, Tag("bookmark")]
    | Annotated[EmbedBlock, Tag("embed")]
    | Annotated[ColumnListBlock, Tag("column_list")]
    | Annotated[ColumnBlock, Tag("column")]
    | Annotated[SkippedBlock, Tag("skipped")]
    | Annotated[UnknownBlock, Tag("unknown")],
    Discriminator(_block_tag),
]

HeadingBlock = Heading1Block | Heading2Block | Heading3Block

# Update forward references
for _model in (
    BaseBlock,
    ParagraphBlock,
    Heading1Block,
    Heading2Block,
    Heading3Block,
    BulletedListItemBlock,
    NumberedListItemBlock,
    ToDoBlock,
    ImageBlock,
    VideoBlock,
    CodeBlock,
    QuoteBlock,
    CalloutBlock,
    TableBlock,
    TableRowBlock,
    ToggleBlock,
    DividerBlock,
    BookmarkBlock,
    EmbedBlock,
    ColumnListBlock,
    ColumnBlock,
    SkippedBlock,
    UnknownBlock,
):
    _model.model_rebuild()

_block_adapter = TypeAdapter(Block)

# Keys UnknownBlock reads itself; never taken from the raw payload
_UNKNOWN_RESERVED = frozenset({"id", "type", "has_children", "children"})


def _fallback_block(raw: dict[str, Any]) -> UnknownBlock:
    kind = raw.get("type") if isinstance(raw.get("type"), str) else ""
    block_id = raw.get("id")
    fields: dict[str, Any] = {
        "type": kind,
        "id": block_id if isinstance(block_id, str) else "",
        "has_children": raw.get("has_children") is True,
    }
    if kind and kind not in _UNKNOWN_RESERVED:
        fields[kind] = raw.get(kind)
    return UnknownBlock.model_validate(fields)


def _parse_block(data: Any) -> Block:
    raw = dict(data) if isinstance(data, dict) else {}
    children = raw.pop("children", None)
    try:
        block = _block_adapter.validate_python(raw)
    except ValidationError as e:
        logger.warning(
            f"Block {raw.get('id')!r} ({raw.get('type')!r}) has an unexpected shape, "
            f"rendering it as unknown: {e.error_count()} error(s)"
        )
        block = _fallback_block(raw)
    block.children = [_parse_block(child) for child in children] if isinstance(children, list) else []
    return block


def parse_blocks(data: list[dict[str, Any]]) -> list[Block]:
    """Validate raw Notion API block dicts (children included) into models.

    Blocks are validated one at a time. A block whose payload does not match
    its kind becomes an UnknownBlock carrying the raw payload. Its children
    are parsed independently.
    """
    if not isinstance(data, list):
        return []
    return [_parse_block(item) for item in data]
