import pytest

from notionpress.config import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        notion_api_key="secret_test",
        notion_blog_db_id="db-123",
        notion_api_delay_seconds=0,
        wp_url="https://blog.example.com/",
        wp_username="editor",
        wp_app_password="abcd efgh ijkl",
        retry_max_attempts=2,
        retry_base_delay_seconds=0,
    )
