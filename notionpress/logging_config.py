"""Logging configuration: loguru sinks, stdlib interception, webhook request context."""

import inspect
import logging
import sys
import time
import uuid
from collections.abc import Callable
from pathlib import Path

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"
NO_REQUEST = "-"

STDOUT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<magenta>{extra[request_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

# Stdlib loggers that are chatty at INFO
_NOISY_LOGGERS = ("httpx", "httpcore")


class InterceptHandler(logging.Handler):
    """Forward stdlib log records (httpx, uvicorn) to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk out of the logging module so loguru reports the real caller
        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def configure_logging(log_dir: Path | None = None, debug: bool = False) -> None:
    """Log to stdout, plus `notionpress.jsonl` under `log_dir` when given.

    Safe to call more than once; existing sinks are replaced.
    """
    level = "DEBUG" if debug else "INFO"
    logger.remove()
    logger.configure(extra={"request_id": NO_REQUEST})
    logger.add(sys.stdout, format=STDOUT_FORMAT, level=level, colorize=True)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_dir / "notionpress.jsonl",
            format="{message}",
            level=level,
            serialize=True,
            rotation="100 MB",
            retention=20,
            compression="gz",
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag every log line of a request with its id and log one line per request.

    An incoming X-Request-ID (e.g. from the automation that calls the webhook)
    is reused; otherwise a short random id is generated. The id is echoed back
    in the response headers.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        started = time.perf_counter()

        with logger.contextualize(request_id=request_id):
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.0f} ms)")

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected errors with the request id and answer with a bare 500."""
    request_id = getattr(request.state, "request_id", None)
    logger.opt(exception=exc).error(f"Unhandled exception on {request.method} {request.url.path} (request_id={request_id})")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
