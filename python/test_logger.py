#!/usr/bin/env python3
"""ロガーと進捗トラッカーのテスト"""
import logging

from s3_multipart.models.config import LoggingConfig
from s3_multipart.utils.logger import LoggerManager, LOGGER_NAME
from s3_multipart.utils.progress import ProgressTracker


def test_logger(tmp_path):
    """ロガーが正しく動作するか確認"""
    log_file = tmp_path / "logs" / "uploader.log"
    logger = LoggerManager.setup(LoggingConfig(level="warning", file=str(log_file)))

    logger.info("info message")
    logger.warning("warning message")
    for handler in logger.handlers:
        handler.flush()

    assert logger.level == logging.WARNING
    assert LoggerManager.get_logger() is logger
    content = log_file.read_text(encoding="utf-8")
    assert "warning message" in content
    assert "info message" not in content


def test_setup_is_idempotent():
    first = LoggerManager.setup(LoggingConfig())
    second = LoggerManager.setup(LoggingConfig(level="DEBUG"))

    assert first is second
    assert first.level == logging.INFO


def test_get_logger_without_setup():
    assert LoggerManager.get_logger().name == LOGGER_NAME


def test_progress_tracker_counts_parts(caplog):
    tracker = ProgressTracker(total_size=300, total_parts=3, filename="data.bin")

    with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
        tracker(2, 100)
        tracker(1, 100)
        tracker.complete()

    assert tracker.uploaded_parts == 2
    assert tracker.uploaded_size == 200
    assert "2/3 parts" in caplog.text
    assert "Complete!" in caplog.text
