import io
import logging
import re
import sys
from unittest.mock import patch

import pendulum

from session_logger.log import (
    setup_logging_to_console,
    setup_logging_to_file,
    setup_logging_to_seq,
)
from session_logger.utils.timestamps import format_timestamp, now_timestamp


def test_format_timestamp():
    dt = pendulum.datetime(2024, 3, 5, 7, 8, 9)

    assert format_timestamp(dt) == "2024-03-05 07:08:09"


def test_now_timestamp_shape():
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", now_timestamp())


def test_setup_logging_to_file(tmp_path):
    test_logger = logging.getLogger("session_logger.tests.file")
    log_path = setup_logging_to_file(
        "session-logger", logger=test_logger, timestamp=False, log_dir=str(tmp_path)
    )

    test_logger.info("written to file")
    for handler in test_logger.handlers:
        handler.flush()
        handler.close()
    test_logger.handlers.clear()

    assert log_path == tmp_path / "session-logger.log"
    assert "written to file" in log_path.read_text()


def test_setup_logging_to_seq_requires_server_url():
    with patch("session_logger.log.settings") as mock_settings:
        mock_settings.SEQ_SERVER_URL = None
        assert setup_logging_to_seq() is False


class _Terminal(io.StringIO):
    def isatty(self):
        return True


def test_console_logging_writes_to_stderr(monkeypatch):
    from rich.logging import RichHandler

    monkeypatch.setattr(sys, "stderr", _Terminal())
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    test_logger = logging.getLogger("session_logger.tests.console")

    setup_logging_to_console(logging.INFO, logger=test_logger)

    handlers = [h for h in test_logger.handlers if isinstance(h, RichHandler)]
    test_logger.handlers.clear()
    assert len(handlers) == 1
    assert handlers[0].console.stderr is True
