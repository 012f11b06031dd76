"""Publish Notion blog pages as WordPress posts."""

import re
from enum import StrEnum

from loguru import logger
from pydantic import BaseModel, Field

from notionpress.config import Settings
from notionpress.converter import extract_faq_items, extract_plain_text, render_blocks, render_faq_schema
from notionpress.images import process_images, upload_cover_image
from notionpress.notion import (
    NotionClient,
    NotionPage,
    fetch_all_blocks,
    fetch_page,
    get_cover_image,
    get_multi_select_values,
    get_property_value,
    query_publishable_pages,
    query_scheduled_pages,
    update_wp_post_id,
)
from notionpress.wordpress import CreatePostParams, TaxonomyResolver, WordPressClient, create_post, find_post_by_slug

COVER_IMAGE_PROPERTY = "대표 이미지"
MAX_SLUG_LENGTH = 80


class PublishMode(StrEnum):
    all = "all"  # every publishable page
    scheduled = "scheduled"  # oldest page whose date has arrived


class PublishResult(BaseModel):
    page_id: str
    title: str
    slug: str
    wp_post_id: int
    link: str = ""
    duplicate: bool = False  # post already existed; only the Notion write-back happened


class RunSummary(BaseModel):
    total: int = 0
    success: int = 0
    failed: int = 0
    results: list[PublishResult] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failed == 0


def slugify(text: str) -> str:
    slug = re.sub(r"[^\w\s가-힣-]", "", text.lower())
    slug = re.sub(r"[\s_]+", "-", slug)
    return slug.strip("-")[:MAX_SLUG_LENGTH]


def page_title(page: NotionPage) -> str:
    return get_property_value(page, "Title") or get_property_value(page, "Name")


class Publisher:
    def __init__(
        self,
        settings: Settings,
        notion: NotionClient,
        wp: WordPressClient,
        taxonomy: TaxonomyResolver | None = None,
    ):
        self.settings = settings
        self.notion = notion
        self.wp = wp
        self.taxonomy = taxonomy or TaxonomyResolver(
            wp,
            category_map=settings.wp_category_map,
            default_category=settings.wp_default_category,
        )

    async def publish_page(self, page: NotionPage) -> PublishResult:
        title = page_title(page)
        slug = get_property_value(page, "Slug") or slugify(title)
        excerpt = get_property_value(page, "Excerpt")
        date = get_property_value(page, "Date")
        tags = get_multi_select_values(page, "Tags")
        cover_url = get_property_value(page, COVER_IMAGE_PROPERTY) or get_cover_image(page)

        logger.info(f"Publishing {title!r} (page={page.id}, slug={slug}, tags={tags})")

        existing = await find_post_by_slug(self.wp, slug)
        if existing:
            logger.warning(f"Post with slug {slug!r} already exists (id={existing.id}), linking instead of publishing")
            await update_wp_post_id(self.notion, page.id, existing.id)
            return PublishResult(
                page_id=page.id, title=title, slug=slug, wp_post_id=existing.id, link=existing.link, duplicate=True
            )

        blocks = await fetch_all_blocks(self.notion, page.id)
        logger.info(f"Fetched {len(blocks)} top-level blocks")

        image_url_map = await process_images(self.wp, blocks, slug)

        content = render_blocks(blocks, image_url_map)
        if self.settings.faq_schema_enabled:
            faq_items = extract_faq_items(blocks)
            if faq_items:
                logger.info(f"Found {len(faq_items)} FAQ items, adding FAQPage schema")
                content = f"{content}\n{render_faq_schema(faq_items)}"
        logger.info(f"HTML conversion complete ({len(content)} chars)")

        if not excerpt:
            excerpt = extract_plain_text(blocks, self.settings.excerpt_max_length)

        featured_media = await upload_cover_image(self.wp, cover_url, slug)
        category_id = await self.taxonomy.resolve_category_from_tags(tags)
        tag_ids = await self.taxonomy.resolve_tags(tags)

        post = await create_post(
            self.wp,
            CreatePostParams(
                title=title,
                content=content,
                status=self.settings.wp_post_status,
                slug=slug,
                categories=[category_id],
                tags=tag_ids,
                featured_media=featured_media,
                excerpt=excerpt or None,
                date=date or None,
            ),
        )

        await update_wp_post_id(self.notion, page.id, post.id)
        logger.info(f"Successfully published {title!r} (post={post.id}, link={post.link})")
        return PublishResult(page_id=page.id, title=title, slug=slug, wp_post_id=post.id, link=post.link)

    async def publish_by_id(self, page_id: str) -> PublishResult:
        page = await fetch_page(self.notion, page_id)
        return await self.publish_page(page)

    async def run(self, mode: PublishMode = PublishMode.all) -> RunSummary:
        """Publish every selected page. A failing page is logged and the run moves on."""
        database_id = self.settings.notion_blog_db_id
        if mode is PublishMode.scheduled:
            pages = await query_scheduled_pages(self.notion, database_id)
        else:
            pages = await query_publishable_pages(self.notion, database_id)

        summary = RunSummary(total=len(pages))
        if not pages:
            logger.info("No pages to publish")
            return summary

        for page in pages:
            try:
                result = await self.publish_page(page)
            except Exception as e:
                summary.failed += 1
                logger.exception(f"Failed to publish {page_title(page)!r} (page={page.id}): {e}")
                continue
            summary.success += 1
            summary.results.append(result)

        logger.info(f"Publishing complete: total={summary.total} success={summary.success} failed={summary.failed}")
        return summary
