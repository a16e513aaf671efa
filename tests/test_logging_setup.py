import io
import logging
import pathlib
import sys
import uuid

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from utils.logging_setup import (
    LOG_FILENAME,
    create_stream_handler,
    parse_level,
    resolve_log_paths,
)


def _build_logger(default_tag: str):
    stream = io.StringIO()
    handler = create_stream_handler(stream, default_tag=default_tag)
    logger_name = f"test_logger_{uuid.uuid4()}"
    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    logger.handlers = [handler]
    return logger, stream


def test_default_tag_applied_when_missing():
    logger, stream = _build_logger("[app] ")
    logger.info("local message")
    output = stream.getvalue().strip()
    assert output.startswith("[app] ")


def test_transaction_tag_preserved_when_present():
    logger, stream = _build_logger("[app] ")
    logger.info("revert message", extra={"transaction": "[revert#2] "})
    output = stream.getvalue().strip()
    assert output.startswith("[revert#2] ")
    assert "revert message" in output


def test_parse_level_accepts_names_and_falls_back():
    assert parse_level("debug") == logging.DEBUG
    assert parse_level(" WARNING ") == logging.WARNING
    assert parse_level("chatty") == logging.INFO
    assert parse_level(None, logging.ERROR) == logging.ERROR


def test_log_paths_live_under_brand_directory(tmp_path):
    log_dir, log_file = resolve_log_paths(tmp_path)
    assert log_dir.startswith(str(tmp_path))
    assert "TeXClipper" in log_dir
    assert log_file.endswith(LOG_FILENAME)
