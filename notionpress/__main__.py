"""Command line entry point.

Usage::

    python -m notionpress                  # publish every ready page
    python -m notionpress --mode scheduled # publish the oldest page whose date has arrived
    python -m notionpress --page-id <id>   # publish one page
    python -m notionpress --serve          # run the webhook server
"""

import argparse
import asyncio
import sys

from loguru import logger

from notionpress.config import Settings, get_settings
from notionpress.exceptions import ConfigurationError
from notionpress.logging_config import configure_logging
from notionpress.notion import NotionClient
from notionpress.publisher import Publisher, PublishMode, RunSummary
from notionpress.wordpress import WordPressClient


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notionpress",
        description="Publish Notion blog database pages to WordPress.",
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in PublishMode],
        default=PublishMode.all.value,
        help="Which pages to publish (default: all).",
    )
    parser.add_argument("--page-id", help="Publish a single Notion page by id.")
    parser.add_argument("--serve", action="store_true", help="Run the webhook server instead of a one-off run.")
    parser.add_argument("--host", default="0.0.0.0", help="Webhook server host (with --serve).")
    parser.add_argument("--port", type=int, default=8000, help="Webhook server port (with --serve).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


async def run_once(settings: Settings, mode: PublishMode, page_id: str | None) -> RunSummary:
    async with NotionClient.from_settings(settings) as notion, WordPressClient.from_settings(settings) as wp:
        publisher = Publisher(settings, notion, wp)
        if page_id:
            result = await publisher.publish_by_id(page_id)
            return RunSummary(total=1, success=1, results=[result])
        return await publisher.run(mode)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except ConfigurationError as e:
        configure_logging(debug=args.verbose)
        logger.error(str(e))
        return 2
    configure_logging(settings.log_dir, debug=args.verbose)

    if args.serve:
        import uvicorn

        from notionpress.webhook import create_app

        uvicorn.run(create_app(settings), host=args.host, port=args.port, log_config=None)
        return 0

    logger.info("=== Notion to WordPress publisher ===")
    try:
        summary = asyncio.run(run_once(settings, PublishMode(args.mode), args.page_id))
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1
    return 0 if summary.ok else 1


if __name__ == "__main__":
    sys.exit(main())
