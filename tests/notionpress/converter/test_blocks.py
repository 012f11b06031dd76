"""Tests for block tree → HTML rendering.

Blocks are written as raw Notion API dicts and parsed, so these tests also
cover the model layer's handling of each kind.
"""

import itertools

import pytest

from notionpress.converter import parse_blocks, render_blocks
from notionpress.converter.blocks import BlockRenderer, extract_youtube_id
from notionpress.converter.styles import STYLES

_ids = itertools.count()


def rt(text: str, **annotations) -> dict:
    return {
        "type": "text",
        "plain_text": text,
        "text": {"content": text, "link": None},
        "annotations": {
            "bold": False,
            "italic": False,
            "strikethrough": False,
            "underline": False,
            "code": False,
            "color": "default",
        }
        | annotations,
        "href": None,
    }


def block(kind: str, payload: dict | None = None, children: list[dict] | None = None) -> dict:
    data = {"object": "block", "id": f"block-{next(_ids)}", "type": kind, "has_children": bool(children)}
    if payload is not None:
        data[kind] = payload
    if children:
        data["children"] = children
    return data


def text_block(kind: str, text: str = "", children: list[dict] | None = None, **payload) -> dict:
    return block(kind, {"rich_text": [rt(text)] if text else [], **payload}, children)


def para(text: str = "", children: list[dict] | None = None) -> dict:
    return text_block("paragraph", text, children)


def media(kind: str, url: str, source: str = "external", caption: str = "") -> dict:
    return block(kind, {"type": source, source: {"url": url}, "caption": [rt(caption)] if caption else []})


def render(*blocks: dict, image_url_map: dict[str, str] | None = None) -> str:
    return render_blocks(parse_blocks(list(blocks)), image_url_map)


class TestJoining:
    def test_empty_input(self):
        assert render_blocks([], {}) == ""

    def test_units_joined_by_newline(self):
        html = render(para("a"), block("divider", {}))
        assert html == f"<p>a</p>\n<hr {STYLES['divider']['hr']} />"

    def test_empty_units_dropped(self):
        assert render(para("a"), para(), para("b")) == "<p>a</p>\n<p>b</p>"


class TestParagraph:
    def test_text(self):
        assert render(para("Hello")) == "<p>Hello</p>"

    def test_empty_paragraph_renders_nothing(self):
        assert render(para()) == ""

    def test_missing_payload_renders_nothing(self):
        assert render(block("paragraph")) == ""

    def test_children_follow_paragraph(self):
        assert render(para("parent", children=[para("child")])) == "<p>parent</p><p>child</p>"

    def test_empty_text_with_children(self):
        assert render(para(children=[para("child")])) == "<p></p><p>child</p>"

    def test_rich_text_marks(self):
        html = render(block("paragraph", {"rich_text": [rt("a", bold=True), rt("b")]}))
        assert html == "<p><strong>a</strong>b</p>"


class TestHeadings:
    def test_levels_shift_down_by_one(self):
        assert render(text_block("heading_1", "One")) == "<h2>One</h2>"
        assert render(text_block("heading_2", "Two")) == "<h3>Two</h3>"
        assert render(text_block("heading_3", "Three")) == "<h4>Three</h4>"


class TestListGrouping:
    def test_consecutive_bullets_share_one_list(self):
        html = render(text_block("bulleted_list_item", "a"), text_block("bulleted_list_item", "b"))
        assert html == "<ul><li>a</li><li>b</li></ul>"

    def test_numbered(self):
        html = render(text_block("numbered_list_item", "1"), text_block("numbered_list_item", "2"))
        assert html == "<ol><li>1</li><li>2</li></ol>"

    def test_kind_change_closes_group(self):
        html = render(
            text_block("bulleted_list_item", "a"),
            text_block("numbered_list_item", "1"),
            text_block("bulleted_list_item", "b"),
        )
        assert html == "<ul><li>a</li></ul>\n<ol><li>1</li></ol>\n<ul><li>b</li></ul>"

    def test_other_block_splits_group(self):
        html = render(text_block("bulleted_list_item", "a"), para("p"), text_block("bulleted_list_item", "b"))
        assert html == "<ul><li>a</li></ul>\n<p>p</p>\n<ul><li>b</li></ul>"

    def test_nested_items_render_inside_parent(self):
        html = render(
            text_block(
                "bulleted_list_item",
                "parent",
                children=[text_block("numbered_list_item", "x"), text_block("numbered_list_item", "y")],
            )
        )
        assert html == "<ul><li>parent<ol><li>x</li><li>y</li></ol></li></ul>"

    def test_todo_checkboxes(self):
        html = render(
            text_block("to_do", "done", checked=True),
            text_block("to_do", "open", checked=False),
        )
        assert html == (
            f"<ul {STYLES['todo']['list']}>"
            '<li><input type="checkbox" checked disabled /> done</li>'
            '<li><input type="checkbox" disabled /> open</li>'
            "</ul>"
        )

    def test_todo_without_payload(self):
        html = render(block("to_do"))
        assert '<input type="checkbox" disabled /> </li>' in html

    def test_grouping_is_stable(self):
        blocks = parse_blocks(
            [
                text_block("bulleted_list_item", "a"),
                text_block("bulleted_list_item", "b"),
                para("middle"),
                text_block("to_do", "t"),
                text_block("numbered_list_item", "n"),
                text_block("numbered_list_item", "m"),
            ]
        )
        renderer = BlockRenderer()
        assert renderer.render(blocks) == renderer.render(blocks)
        assert render_blocks(blocks) == renderer.render(blocks)


class TestImage:
    def test_substitution_map_hit(self):
        html = render(
            media("image", "https://notion.so/a.png", source="file"),
            image_url_map={"https://notion.so/a.png": "https://blog.example/a.png"},
        )
        assert 'src="https://blog.example/a.png"' in html
        assert "notion.so" not in html

    def test_substitution_map_miss_keeps_original(self):
        html = render(media("image", "https://cdn.example/b.png"), image_url_map={"other": "x"})
        assert 'src="https://cdn.example/b.png"' in html

    def test_figure_without_caption(self):
        html = render(media("image", "https://cdn.example/b.png"))
        assert html.startswith(f"<figure {STYLES['image']['wrapper']}><img ")
        assert "<figcaption" not in html
        assert 'alt=""' in html

    def test_caption(self):
        html = render(media("image", "https://cdn.example/b.png", caption='A "diagram"'))
        assert '<figcaption style="text-align:center;color:#666;font-size:0.9em;margin-top:0.5rem;">' in html
        assert "A &quot;diagram&quot;</figcaption>" in html
        assert 'alt="A &quot;diagram&quot;"' in html

    def test_missing_payload(self):
        assert render(block("image")) == ""

    def test_map_is_not_mutated(self):
        url_map = {"https://notion.so/a.png": "https://blog.example/a.png"}
        render(media("image", "https://notion.so/a.png", source="file"), image_url_map=url_map)
        assert url_map == {"https://notion.so/a.png": "https://blog.example/a.png"}


class TestCode:
    def test_escapes_markup_but_not_quotes(self):
        html = render(block("code", {"language": "python", "rich_text": [rt('print("<a> & b")')]}))
        assert html == (
            f"<pre {STYLES['code']['pre']}>"
            '<code class="language-python">print("&lt;a&gt; &amp; b")</code></pre>'
        )

    def test_runs_are_concatenated_as_plain_text(self):
        html = render(block("code", {"language": "js", "rich_text": [rt("a", bold=True), rt("b")]}))
        assert '<code class="language-js">ab</code>' in html

    def test_missing_language(self):
        html = render(block("code", {"rich_text": [rt("x")]}))
        assert '<code class="language-">x</code>' in html

    def test_missing_payload(self):
        assert render(block("code")) == ""


class TestContainers:
    def test_quote(self):
        html = render(text_block("quote", "wise words", children=[para("more")]))
        assert html == f"<blockquote {STYLES['quote']['wrapper']}>wise words<p>more</p></blockquote>"

    def test_callout_with_emoji(self):
        html = render(text_block("callout", "Note", icon={"type": "emoji", "emoji": "💡"}))
        style = STYLES["callout"]
        assert html == (
            f"<div {style['wrapper']}><span {style['icon']}>💡</span><span {style['content']}>Note</span></div>"
        )

    def test_callout_with_non_emoji_icon(self):
        html = render(text_block("callout", "Note", icon={"type": "external", "external": {"url": "x"}}))
        assert f"<span {STYLES['callout']['icon']}></span>" in html

    def test_callout_children(self):
        html = render(text_block("callout", "Note", children=[para("inside")]))
        assert html.endswith("<p>inside</p></div>")

    def test_toggle_collapsed_by_default(self):
        html = render(text_block("toggle", "More", children=[para("hidden")]))
        style = STYLES["toggle"]
        assert html == (
            f"<details {style['details']}><summary {style['summary']}>More</summary>"
            f"<div {style['content']}><p>hidden</p></div></details>"
        )
        assert " open" not in html


class TestTable:
    def _table(self, has_column_header: bool) -> dict:
        rows = [
            block("table_row", {"cells": [[rt("Name")], [rt("Score")]]}),
            block("table_row", {"cells": [[rt("Kim", bold=True)], [rt("90")]]}),
        ]
        return block("table", {"table_width": 2, "has_column_header": has_column_header}, children=rows)

    def test_header_row(self):
        html = render(self._table(True))
        style = STYLES["table"]
        assert html.startswith(f"<table {style['table']}><tbody>")
        assert f"<tr {style['header_row']}><th {style['header_cell']}>Name</th>" in html
        assert f"<td {style['cell']}><strong>Kim</strong></td>" in html
        assert html.count("<th ") == 2
        assert html.count("<td ") == 2

    def test_without_header_flag(self):
        html = render(self._table(False))
        assert "<th" not in html
        assert html.count("<td ") == 4
        assert "<tr>" in html

    def test_missing_payload_means_no_header(self):
        html = render(block("table", children=[block("table_row", {"cells": [[rt("a")]]})]))
        assert "<th" not in html

    def test_no_rows(self):
        assert render(block("table", {"has_column_header": True})) == (
            f"<table {STYLES['table']['table']}><tbody></tbody></table>"
        )


class TestDivider:
    def test_divider(self):
        assert render(block("divider", {})) == f"<hr {STYLES['divider']['hr']} />"


class TestLinksAndEmbeds:
    def test_bookmark_caption_defaults_to_url(self):
        html = render(block("bookmark", {"url": "https://example.com", "caption": []}))
        style = STYLES["bookmark"]
        assert html == (
            f'<div {style["wrapper"]}><a href="https://example.com" {style["link"]} '
            'target="_blank" rel="noopener noreferrer">https://example.com</a></div>'
        )

    def test_bookmark_caption(self):
        html = render(block("bookmark", {"url": "https://example.com", "caption": [rt("Example")]}))
        assert ">Example</a>" in html

    def test_bookmark_without_url(self):
        assert render(block("bookmark", {"caption": []})) == ""
        assert render(block("bookmark")) == ""

    def test_embed_youtube(self):
        html = render(block("embed", {"url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ"}))
        assert html == (
            f"<div {STYLES['video']['wrapper']}>"
            f'<iframe src="https://www.youtube.com/embed/dQw4w9WgXcQ" {STYLES["video"]["iframe"]}></iframe></div>'
        )

    def test_embed_other_url_is_link_card(self):
        html = render(block("embed", {"url": "https://maps.example.com/place"}))
        assert "<iframe" not in html
        assert ">https://maps.example.com/place</a>" in html

    def test_embed_without_url(self):
        assert render(block("embed", {})) == ""

    def test_video_youtube(self):
        html = render(media("video", "https://youtu.be/abc_DEF-12"))
        assert 'src="https://www.youtube.com/embed/abc_DEF-12"' in html

    def test_video_file(self):
        html = render(media("video", "https://files.example/clip.mp4", source="file"))
        assert html == f'<video controls {STYLES["video"]["native"]}><source src="https://files.example/clip.mp4" /></video>'

    def test_video_ignores_substitution_map(self):
        html = render(
            media("video", "https://files.example/clip.mp4", source="file"),
            image_url_map={"https://files.example/clip.mp4": "https://blog.example/clip.mp4"},
        )
        assert "blog.example" not in html

    def test_video_missing_payload(self):
        assert render(block("video")) == ""

    def test_youtube_id_forms(self):
        assert extract_youtube_id("https://www.youtube.com/watch?v=abc123") == "abc123"
        assert extract_youtube_id("https://www.youtube.com/embed/abc123") == "abc123"
        assert extract_youtube_id("https://youtu.be/abc123") == "abc123"
        assert extract_youtube_id("https://vimeo.com/123") is None


class TestColumns:
    def test_three_columns_equal_width(self):
        columns = [block("column", {}, children=[para(f"col {i}")]) for i in range(3)]
        html = render(block("column_list", {}, children=columns))
        assert html.startswith(f"<div {STYLES['columns']['wrapper']}>")
        assert html.count(f'data-width="{100 // 3}"') == 3
        assert "<p>col 0</p>" in html and "<p>col 2</p>" in html

    def test_column_children_render_recursively(self):
        column = block("column", {}, children=[text_block("bulleted_list_item", "a"), text_block("bulleted_list_item", "b")])
        html = render(block("column_list", {}, children=[column]))
        assert 'data-width="100"><ul><li>a</li><li>b</li></ul></div>' in html

    def test_empty_column_list(self):
        assert render(block("column_list", {})) == ""

    def test_bare_column_renders_nothing(self):
        assert render(block("column", {}, children=[para("orphan")])) == ""


class TestSkippedAndUnknown:
    def test_structural_blocks_render_nothing(self):
        for kind in ("table_of_contents", "breadcrumb", "child_page", "child_database", "unsupported"):
            assert render(block(kind, {"title": "x"})) == ""

    def test_unknown_kind_with_rich_text_becomes_paragraph(self):
        assert render(text_block("synced_text", "kept")) == "<p>kept</p>"

    def test_unknown_kind_without_payload(self):
        assert render(block("audio")) == ""

    def test_unknown_kind_with_malformed_payload(self):
        assert render(block("equation", {"rich_text": "not a list"})) == ""
        assert render(block("equation", {"expression": "E=mc^2"})) == ""

    def test_unknown_kind_between_lists(self):
        html = render(
            text_block("bulleted_list_item", "a"),
            block("link_preview", {"url": "x"}),
            text_block("bulleted_list_item", "b"),
        )
        assert html == "<ul><li>a</li></ul>\n<ul><li>b</li></ul>"


class TestMalformedPayloads:
    @pytest.mark.parametrize(
        "data,expected",
        [
            (block("paragraph", {"rich_text": "oops"}), ""),
            (block("paragraph", {"rich_text": [rt("x", bold=None)]}), "<p>x</p>"),
            (block("callout", {"rich_text": [rt("tip")], "icon": "💡"}), "<p>tip</p>"),
            (block("image", []), ""),
            (block("code", {"rich_text": [rt("x = 1")], "language": ["python"]}), "<p>x = 1</p>"),
        ],
    )
    def test_renders_without_raising(self, data, expected):
        assert render(data) == expected

    def test_bad_table_row_is_left_out(self):
        table = block(
            "table",
            {"has_column_header": False},
            children=[block("table_row", {"cells": [None]}), block("table_row", {"cells": [[rt("ok")]]})],
        )
        assert render(table) == (
            f"<table {STYLES['table']['table']}><tbody><tr><td {STYLES['table']['cell']}>ok</td></tr></tbody></table>"
        )

    def test_bad_list_item_splits_group(self):
        html = render(
            text_block("bulleted_list_item", "a"),
            block("bulleted_list_item", {"rich_text": [rt("b")], "color": ["red"]}),
            text_block("bulleted_list_item", "c"),
        )
        assert html == "<ul><li>a</li></ul>\n<p>b</p>\n<ul><li>c</li></ul>"

    def test_bad_todo_does_not_join_checklist(self):
        html = render(block("to_do", {"rich_text": [rt("pay")], "checked": "sometimes"}))
        assert html == "<p>pay</p>"

    def test_bad_child_inside_valid_parent(self):
        html = render(para("outer", children=[block("image", []), para("inner")]))
        assert html == "<p>outer</p><p>inner</p>"
