"""Inline presentation attributes per element kind.

Values are complete attribute strings (``style="..."`` plus any extra
attributes) so the renderer can drop them straight into a tag. They match the
look of the existing WordPress posts.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final


def _frozen(table: dict[str, dict[str, str]]) -> Mapping[str, Mapping[str, str]]:
    return MappingProxyType({kind: MappingProxyType(attrs) for kind, attrs in table.items()})


STYLES: Final[Mapping[str, Mapping[str, str]]] = _frozen(
    {
        "image": {
            "wrapper": 'style="text-align:center;margin:1.5rem 0;"',
            "img": 'class="max-w-full h-auto rounded-md" style="max-width:100%;height:auto;display:block;margin:1rem auto;"',
            "caption": 'style="text-align:center;color:#666;font-size:0.9em;margin-top:0.5rem;"',
        },
        "table": {
            "table": 'style="border-collapse:collapse;border:1px solid #ddd;max-width:100%;width:100%;margin:1rem 0;"',
            "header_row": 'style="background-color:#e2fffb;"',
            "header_cell": 'style="border:1px solid #ddd;padding:8px 12px;font-weight:bold;text-align:left;"',
            "cell": 'style="border:1px solid #ddd;padding:8px 12px;text-align:left;"',
        },
        "callout": {
            "wrapper": 'style="margin:15px 0;padding:15px;border:1px solid #ddd;border-radius:8px;background-color:#f9f9f9;"',
            "icon": 'style="margin-right:8px;font-size:1.2em;"',
            "content": 'style="display:inline;"',
        },
        "quote": {
            "wrapper": 'style="border-left:3px solid #e2fffb;padding:10px 20px;margin:1rem 0;background-color:#f9f9f9;"',
        },
        "divider": {
            "hr": 'style="border:none;border-top:1px solid #ddd;margin:2rem 0;"',
        },
        "code": {
            "pre": 'style="background-color:#1e1e1e;color:#d4d4d4;padding:16px;border-radius:8px;overflow-x:auto;margin:1rem 0;font-family:monospace;font-size:14px;line-height:1.5;"',
            "inline": 'style="background-color:#f0f0f0;padding:2px 4px;border-radius:3px;font-family:monospace;"',
        },
        "toggle": {
            "details": 'style="margin:1rem 0;border:1px solid #ddd;border-radius:8px;overflow:hidden;"',
            "summary": 'style="padding:12px 16px;cursor:pointer;font-weight:bold;background-color:#f5f5f5;"',
            "content": 'style="padding:12px 16px;"',
        },
        "bookmark": {
            "wrapper": 'style="margin:1rem 0;padding:12px 16px;border:1px solid #ddd;border-radius:8px;"',
            "link": 'style="color:#0b6e99;text-decoration:none;"',
        },
        "video": {
            "wrapper": 'style="position:relative;padding-bottom:56.25%;height:0;overflow:hidden;margin:1.5rem 0;"',
            "iframe": 'style="position:absolute;top:0;left:0;width:100%;height:100%;" frameborder="0" allowfullscreen',
            "native": 'style="max-width:100%;margin:1rem auto;display:block;"',
        },
        "todo": {
            "list": 'style="list-style:none;padding-left:0;"',
        },
        "columns": {
            "wrapper": 'style="display:flex;gap:16px;margin:1rem 0;"',
            "column": 'style="flex:1;min-width:0;padding:0 8px;"',
        },
    }
)

# Notion color token -> CSS declaration. "default" and unknown tokens map to nothing.
COLOR_STYLES: Final[Mapping[str, str]] = MappingProxyType(
    {
        "gray": "color:#9b9a97",
        "brown": "color:#64473a",
        "orange": "color:#d9730d",
        "yellow": "color:#dfab01",
        "green": "color:#0f7b6c",
        "blue": "color:#0b6e99",
        "purple": "color:#6940a5",
        "pink": "color:#ad1a72",
        "red": "color:#e03e3e",
        "gray_background": "background-color:#ebeced",
        "brown_background": "background-color:#e9e5e3",
        "orange_background": "background-color:#faebdd",
        "yellow_background": "background-color:#fbf3db",
        "green_background": "background-color:#ddedea",
        "blue_background": "background-color:#ddebf1",
        "purple_background": "background-color:#eae4f2",
        "pink_background": "background-color:#f4dfeb",
        "red_background": "background-color:#fbe4e4",
    }
)
