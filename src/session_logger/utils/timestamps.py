import pendulum

from session_logger.core.constants import TIMESTAMP_FORMAT


def format_timestamp(dt: pendulum.DateTime) -> str:
    return dt.format(TIMESTAMP_FORMAT)


def now_timestamp() -> str:
    return format_timestamp(pendulum.now())
