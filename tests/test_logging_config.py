import logging

import pytest

from farmbooks.core.logging_config import setup_logging


@pytest.fixture
def restore_log_levels():
    root = logging.getLogger()
    pdf_logger = logging.getLogger("PyPDF2")
    levels = (root.level, pdf_logger.level)
    yield
    root.setLevel(levels[0])
    pdf_logger.setLevel(levels[1])


def test_setup_logging_creates_log_dir_and_quiets_pypdf2(tmp_path, restore_log_levels) -> None:
    log_dir = tmp_path / "logs" / "nested"

    setup_logging(log_dir)

    assert log_dir.is_dir()
    assert logging.getLogger().level == logging.INFO
    assert logging.getLogger("PyPDF2").level == logging.ERROR


def test_setup_logging_is_safe_to_call_twice(tmp_path, restore_log_levels) -> None:
    setup_logging(tmp_path)
    handlers = list(logging.getLogger().handlers)

    setup_logging(tmp_path)

    assert logging.getLogger().handlers == handlers
