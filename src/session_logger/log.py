import logging
import pathlib
import sys

import pendulum

from session_logger.core.config import settings

_root_logger = logging.getLogger()


def get_log_path(filename: str, log_dir: str | None = None) -> pathlib.Path:
    if log_dir is None:
        log_dir = "~/logs" if sys.platform == "darwin" else "./logs"

    path = pathlib.Path(log_dir).expanduser() / f"{filename}.log"
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def setup_logging_to_file(
    app: str,
    level: int = logging.INFO,
    *,
    logger: logging.Logger = _root_logger,
    timestamp: bool = True,
    log_dir: str | None = None,
) -> pathlib.Path:
    formatter = logging.Formatter(
        "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s.%(funcName)s:%(lineno)d %(message)s"
    )
    if timestamp:
        filename = f"{app}.{pendulum.now():%Y%m%d.%H%M%S.%f}"
    else:
        filename = app
    log_path = get_log_path(filename, log_dir)
    file_handler = logging.FileHandler(log_path)
    file_handler.formatter = formatter
    logger.setLevel(level)
    logger.addHandler(file_handler)
    return log_path


def setup_logging_to_console(level=logging.INFO, *, logger: logging.Logger = _root_logger):
    if not sys.stderr.isatty():
        return

    from rich.console import Console
    from rich.logging import RichHandler
    from rich.traceback import install

    install(show_locals=True)
    logger.setLevel(level)
    # stdout carries command output
    handler = RichHandler(
        console=Console(stderr=True), rich_tracebacks=True, level=level, show_time=True
    )
    logger.addHandler(handler)


def setup_logging_to_seq(level=logging.INFO) -> bool:
    if not settings.SEQ_SERVER_URL:
        return False

    import seqlog

    seqlog.log_to_seq(
        server_url=settings.SEQ_SERVER_URL,
        api_key=settings.SEQ_SERVER_API_KEY,
        level=level,
        override_root_logger=True,
    )
    return True
