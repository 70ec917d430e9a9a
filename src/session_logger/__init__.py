from session_logger.core.constants import LogLevel, SessionAttributeName
from session_logger.logger import SessionLogger
from session_logger.services.session_store import SessionStore, StoreState

__version__ = "0.1.0"
