import json
import logging
import sys

import pytest
from loguru import logger

from notionpress.logging_config import configure_logging


@pytest.fixture
def restore_logging():
    yield
    logger.remove()
    logger.add(sys.stderr)
    logging.basicConfig(handlers=[], force=True)


def test_json_log_file_receives_stdlib_records(tmp_path, restore_logging):
    configure_logging(tmp_path)

    logger.info("from loguru")
    logging.getLogger("notionpress.test").warning("from stdlib")
    logger.debug("filtered out at INFO")

    lines = (tmp_path / "notionpress.jsonl").read_text().splitlines()
    messages = [json.loads(line)["record"]["message"] for line in lines]
    assert messages == ["from loguru", "from stdlib"]


def test_httpx_quiet_unless_debug(restore_logging):
    configure_logging()
    assert logging.getLogger("httpx").level == logging.WARNING

    configure_logging(debug=True)
    assert logging.getLogger("httpx").level == logging.DEBUG
