import os
from functools import lru_cache
from pathlib import Path

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from notionpress.exceptions import ConfigurationError


class Settings(BaseSettings):
    notion_api_key: str
    notion_blog_db_id: str
    notion_api_version: str = "2022-06-28"
    notion_api_delay_seconds: float = 0.35  # pause before each Notion request

    wp_url: str
    wp_username: str
    wp_app_password: str
    wp_post_status: str = "publish"
    # Known WordPress categories (name -> term id); anything else is searched/created
    wp_category_map: dict[str, int] = {"교육사례": 1, "블로그": 11}
    wp_default_category: str = "블로그"

    excerpt_max_length: int = 160
    faq_schema_enabled: bool = True

    retry_max_attempts: int = 3
    retry_base_delay_seconds: float = 1.0
    http_timeout_seconds: float = 30.0

    log_dir: Path | None = None
    webhook_secret: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=[os.getenv("ENV_FILE", ""), ".env"],
        extra="ignore",
        env_nested_delimiter="__",
    )

    @field_validator("wp_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as e:
        fields = ", ".join(".".join(str(part) for part in err["loc"]).upper() for err in e.errors())
        raise ConfigurationError(f"Invalid or missing settings: {fields}") from e
