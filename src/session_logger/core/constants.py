import enum


class LogLevel(enum.IntEnum):
    ERROR = 3
    WARN = 4
    INFO = 6
    DEBUG = 7


# reserved attribute names stored in logs_attr
class SessionAttributeName(str, enum.Enum):
    TITLE = "LOGSTARTMESSAGE"


TIMESTAMP_FORMAT = "YYYY-MM-DD HH:mm:ss"
CONSOLE_LINE_FORMAT = "{level}: {message}\n"
ERROR_DETAIL_INDENT = "    "

START_NOTICE = "Start logger"
CLOSE_NOTICE = "Close Logger"
DEFAULT_TITLE_SUFFIX = "started"
