"""HTTP entry point: publish a single page when Notion automation calls the webhook."""

import secrets
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel

from notionpress.config import Settings, get_settings
from notionpress.exceptions import PageNotFoundError, PublishError
from notionpress.logging_config import RequestContextMiddleware, unhandled_exception_handler
from notionpress.notion import NotionClient
from notionpress.publisher import Publisher, PublishResult
from notionpress.wordpress import WordPressClient


class WebhookRequest(BaseModel):
    page_id: str


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.dependency_overrides[get_settings]()
    assert isinstance(settings, Settings)

    async with NotionClient.from_settings(settings) as notion, WordPressClient.from_settings(settings) as wp:
        app.state.publisher = Publisher(settings, notion, wp)
        yield


def get_publisher(request: Request) -> Publisher:
    return request.app.state.publisher


async def verify_secret(
    settings: Annotated[Settings, Depends(get_settings)],
    x_webhook_secret: Annotated[str | None, Header()] = None,
) -> None:
    if settings.webhook_secret is None:
        return
    if x_webhook_secret is None or not secrets.compare_digest(x_webhook_secret, settings.webhook_secret):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid webhook secret")


async def publish_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, PublishError)
    status_code = status.HTTP_404_NOT_FOUND if isinstance(exc, PageNotFoundError) else status.HTTP_502_BAD_GATEWAY
    logger.error(f"Webhook publish failed on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


def create_app(settings: Settings | None = None, *, use_lifespan: bool = True) -> FastAPI:
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="notionpress webhook",
        version="0.1.0",
        lifespan=lifespan if use_lifespan else None,
    )
    app.dependency_overrides[get_settings] = lambda: settings
    app.add_middleware(RequestContextMiddleware)
    app.add_exception_handler(PublishError, publish_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.post("/webhook", dependencies=[Depends(verify_secret)])
    async def webhook(
        body: WebhookRequest,
        publisher: Annotated[Publisher, Depends(get_publisher)],
    ) -> PublishResult:
        logger.info(f"Webhook received for page {body.page_id}")
        return await publisher.publish_by_id(body.page_id)

    return app
