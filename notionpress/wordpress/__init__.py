"""WordPress REST API access: posts, media and taxonomy."""

from notionpress.wordpress.client import WordPressClient
from notionpress.wordpress.media import WpMedia, upload_image
from notionpress.wordpress.posts import CreatePostParams, WpPost, create_post, find_post_by_slug
from notionpress.wordpress.taxonomy import TaxonomyResolver

__all__ = [
    "WordPressClient",
    "WpMedia",
    "WpPost",
    "CreatePostParams",
    "TaxonomyResolver",
    "create_post",
    "find_post_by_slug",
    "upload_image",
]
