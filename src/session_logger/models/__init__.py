from .log_session import LogSession
from .log_session_attribute import LogSessionAttribute
