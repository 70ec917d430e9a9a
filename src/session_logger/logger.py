import sys
import traceback
from typing import IO, Any, List, Optional

from session_logger.core.config import settings
from session_logger.core.constants import (
    CLOSE_NOTICE,
    CONSOLE_LINE_FORMAT,
    DEFAULT_TITLE_SUFFIX,
    ERROR_DETAIL_INDENT,
    START_NOTICE,
    LogLevel,
)
from session_logger.services.session_store import SessionStore


def format_line(level: str, message: Any) -> str:
    return CONSOLE_LINE_FORMAT.format(level=level.upper(), message=message)


def format_error_detail(error: Any) -> str:
    if isinstance(error, BaseException) and error.__traceback__ is not None:
        trace = "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )
        return "".join(
            f"{ERROR_DETAIL_INDENT}{line}\n" for line in trace.rstrip("\n").splitlines()
        )
    return f"{ERROR_DETAIL_INDENT}{type(error).__name__}: {error}\n"


class SessionLogger:
    """Level-gated console logger that records sessions in a SessionStore.

    INFO, WARN and DEBUG lines go to stdout, ERROR lines to stderr. DEBUG is
    printed only when the configured level is exactly ``LogLevel.DEBUG``.
    """

    def __init__(
        self,
        db_path: str | None = None,
        log_level: int | None = None,
        *,
        store: SessionStore | None = None,
        stdout: IO[str] | None = None,
        stderr: IO[str] | None = None,
    ):
        self.log_level = settings.SESSION_LOG_LEVEL if log_level is None else int(log_level)
        self.store = store or SessionStore(db_path)
        self._stdout = stdout
        self._stderr = stderr
        self._started: List[str] = []
        self._closed = False

        self.store.initialize()
        self.info(START_NOTICE)

    def __enter__(self) -> "SessionLogger":
        return self

    def __exit__(self, exc_type, exc_value, tb) -> None:
        self.shutdown()

    # streams are looked up at write time so redirected sys.stdout is honoured
    def _write_out(self, line: str) -> None:
        (self._stdout or sys.stdout).write(line)

    def _write_err(self, line: str) -> None:
        (self._stderr or sys.stderr).write(line)

    def is_enabled(self, level: LogLevel) -> bool:
        if level == LogLevel.DEBUG:
            return self.log_level == LogLevel.DEBUG
        return self.log_level >= level

    def start_session(
        self, package: str, name: str, filename: str, title: str | None = None
    ) -> Optional[int]:
        if title is None:
            title = f"{name} {DEFAULT_TITLE_SUFFIX}"
        key = self.store.create_session(package, name, filename, title)
        if key is not None and filename not in self._started:
            self._started.append(filename)
        return key

    def end_session(self, filename: str) -> Optional[int]:
        return self.store.close_session(filename)

    def set_title(self, filename: str, title: str) -> Optional[int]:
        key = self.store.find_latest_session_key(filename)
        if key is None:
            return None
        self.store.set_title(key, title)
        return key

    def close_session(self, filename: str) -> Optional[int]:
        if self._closed:
            return None

        self.info(CLOSE_NOTICE)
        key = self.end_session(filename)
        self._release()
        return key

    def shutdown(self) -> None:
        if self._closed:
            return

        self.info(CLOSE_NOTICE)
        for filename in self._started:
            if self.store.find_latest_open_session(filename) is not None:
                self.end_session(filename)
        self._release()

    def _release(self) -> None:
        self.store.close()
        self._started = []
        self._closed = True

    def info(self, message: Any) -> None:
        if self.is_enabled(LogLevel.INFO):
            self._write_out(format_line("info", message))

    def debug(self, message: Any) -> None:
        if self.is_enabled(LogLevel.DEBUG):
            self._write_out(format_line("debug", message))

    def warn(self, message: Any) -> None:
        if self.is_enabled(LogLevel.WARN):
            self._write_out(format_line("warn", message))

    warning = warn

    def error(self, message: Any, error: Any = None) -> None:
        if not self.is_enabled(LogLevel.ERROR):
            return

        self._write_err(format_line("error", message))
        if error is not None:
            self._write_err(format_error_detail(error))
