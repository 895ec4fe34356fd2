"""Tests for the logging configuration."""
import logging

import pytest

from src.logging_config import ROOT_LOGGER_NAME, get_logger, setup_logging


@pytest.fixture
def clean_logger():
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    saved = list(root_logger.handlers)
    root_logger.handlers.clear()
    yield root_logger
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers[:] = saved


def test_get_logger_is_a_child():
    assert get_logger("reviews").name == "handcrafted_haven.reviews"


def test_console_only_without_log_dir(clean_logger):
    assert setup_logging(log_dir="") is None
    assert len(clean_logger.handlers) == 1


def test_per_run_log_file(clean_logger, tmp_path):
    log_file = setup_logging(log_dir=str(tmp_path))
    assert log_file.exists()
    assert log_file.name.startswith("run_")
    assert len(clean_logger.handlers) == 2


def test_repeated_setup_keeps_handlers(clean_logger, tmp_path):
    setup_logging(log_dir="")
    assert setup_logging(log_dir=str(tmp_path)) is None
    assert len(clean_logger.handlers) == 1
