"""Resolve category and tag names to WordPress term ids, creating missing terms."""

from collections.abc import Mapping
from typing import Literal

from loguru import logger
from pydantic import BaseModel, ConfigDict

from notionpress.wordpress.client import WordPressClient

TermKind = Literal["categories", "tags"]


class WpTerm(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    slug: str = ""


class TaxonomyResolver:
    """Looks up terms by name: known map first, then cache, then search, then create.

    Caches live as long as the resolver, so one resolver per run avoids
    repeating searches for tags shared between pages.
    """

    def __init__(
        self,
        client: WordPressClient,
        category_map: Mapping[str, int] | None = None,
        default_category: str = "블로그",
    ):
        self.client = client
        self.category_map = dict(category_map or {})
        self.default_category = default_category
        self._cache: dict[TermKind, dict[str, int]] = {"categories": {}, "tags": {}}

    async def _resolve(self, kind: TermKind, name: str) -> int:
        cache = self._cache[kind]
        if name in cache:
            return cache[name]

        results = await self.client.request_json("GET", f"/{kind}", params={"search": name, "per_page": 10})
        existing = [WpTerm.model_validate(r) for r in results or []]
        match = next((t for t in existing if t.name == name or t.name.lower() == name.lower()), None)
        if match:
            cache[name] = match.id
            return match.id

        logger.info(f"Creating new WP {'tag' if kind == 'tags' else 'category'}: {name}")
        created = WpTerm.model_validate(await self.client.request_json("POST", f"/{kind}", json={"name": name}))
        cache[name] = created.id
        return created.id

    async def resolve_category(self, name: str) -> int:
        if name in self.category_map:
            return self.category_map[name]
        return await self._resolve("categories", name)

    async def resolve_tag(self, name: str) -> int:
        return await self._resolve("tags", name)

    async def resolve_tags(self, names: list[str]) -> list[int]:
        return [await self.resolve_tag(name) for name in names]

    async def resolve_category_from_tags(self, tags: list[str]) -> int:
        """The first tag doubles as the category; untagged posts go to the default category."""
        if not tags:
            return await self.resolve_category(self.default_category)
        return await self.resolve_category(tags[0])
