from typing import Any, Literal

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from notionpress.wordpress.client import WordPressClient


class CreatePostParams(BaseModel):
    title: str
    content: str
    status: Literal["publish", "draft", "pending", "future", "private"] = "publish"
    slug: str | None = None
    categories: list[int] = Field(default_factory=list)
    tags: list[int] = Field(default_factory=list)
    featured_media: int | None = None
    excerpt: str | None = None
    date: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Request body; empty optional fields are left out so WP keeps its defaults."""
        body: dict[str, Any] = {"title": self.title, "content": self.content, "status": self.status}
        if self.slug:
            body["slug"] = self.slug
        if self.categories:
            body["categories"] = self.categories
        if self.tags:
            body["tags"] = self.tags
        if self.featured_media:
            body["featured_media"] = self.featured_media
        if self.excerpt:
            body["excerpt"] = self.excerpt
        if self.date:
            body["date"] = self.date
        return body


class WpPost(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    link: str = ""
    slug: str = ""


async def create_post(client: WordPressClient, params: CreatePostParams) -> WpPost:
    logger.info(f"Creating WP post: {params.title!r}")
    result = await client.request_json("POST", "/posts", json=params.to_payload())
    post = WpPost.model_validate(result)
    logger.info(f"WP post created: id={post.id} link={post.link}")
    return post


async def find_post_by_slug(client: WordPressClient, slug: str) -> WpPost | None:
    """Existing post with this slug in any status, or None."""
    if not slug:
        return None
    results = await client.request_json(
        "GET",
        "/posts",
        params={"slug": slug, "status": "publish,future,draft,pending,private", "context": "edit"},
    )
    if not results:
        return None
    return WpPost.model_validate(results[0])
