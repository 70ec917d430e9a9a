import enum
import logging
from typing import List, Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from session_logger.core.config import settings
from session_logger.core.constants import SessionAttributeName
from session_logger.core.db import create_session_engine, init_db
from session_logger.models import LogSession, LogSessionAttribute
from session_logger.utils.timestamps import now_timestamp

logger = logging.getLogger(__name__)


class StoreState(str, enum.Enum):
    NOT_READY = "not_ready"
    READY = "ready"
    CLOSED = "closed"


def _attribute_name(attribute: str | SessionAttributeName) -> str:
    if isinstance(attribute, SessionAttributeName):
        return attribute.value
    return attribute


class SessionStore:
    """Persists log sessions and their attributes in a SQLite file.

    Every operation checks the store state first: until ``initialize`` has run
    (or after ``close``) they return ``None`` instead of touching the database.
    Errors raised by SQLAlchemy/SQLite are not caught here.
    """

    def __init__(self, db_path: str | None = None, journal_mode: str | None = None):
        # a bare path or an sqlite URL; defaults to the configured database URI
        self.db_path = str(db_path or settings.SQLALCHEMY_DATABASE_URI)
        self.journal_mode = journal_mode
        self.state = StoreState.NOT_READY
        self._engine: Engine | None = None

    def __enter__(self) -> "SessionStore":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_value, tb) -> None:
        self.close()

    @property
    def is_ready(self) -> bool:
        return self.state == StoreState.READY

    @property
    def engine(self) -> Engine | None:
        return self._engine

    def initialize(self, clear: bool = False) -> None:
        if self.is_ready:
            return

        self._engine = create_session_engine(self.db_path, self.journal_mode)
        init_db(self._engine, clear=clear)
        self.state = StoreState.READY
        logger.debug("Session store ready at %s", self.db_path)

    def close(self) -> None:
        if self._engine is None:
            return

        self._engine.dispose()
        self._engine = None
        self.state = StoreState.CLOSED
        logger.debug("Session store at %s closed", self.db_path)

    def _latest_session(self, session: Session, filename: str) -> Optional[LogSession]:
        return session.exec(
            select(LogSession)
            .where(LogSession.filename == filename)
            .order_by(LogSession.logstart.desc(), LogSession.logkey.desc())
            .limit(1)
        ).first()

    def find_latest_open_session(self, filename: str) -> Optional[int]:
        if not self.is_ready:
            return None

        with Session(self._engine) as session:
            latest = self._latest_session(session, filename)
            if latest is None or latest.logend is not None:
                return None
            return latest.logkey

    def find_latest_session_key(self, filename: str) -> Optional[int]:
        if not self.is_ready:
            return None

        with Session(self._engine) as session:
            latest = self._latest_session(session, filename)
            return latest.logkey if latest else None

    def create_session(
        self, package: str, name: str, filename: str, title: str
    ) -> Optional[int]:
        if not self.is_ready:
            return None

        # one open session per filename
        existing_key = self.find_latest_open_session(filename)
        if existing_key is not None:
            logger.debug("Session %s already open for %s", existing_key, filename)
            return existing_key

        timestamp = now_timestamp()
        log_session = LogSession(
            package=package,
            name=name,
            filename=filename,
            logstart=timestamp,
            lastmodified=timestamp,
        )
        with Session(self._engine) as session:
            session.add(log_session)
            session.commit()
            session.refresh(log_session)
            key = log_session.logkey

        self.set_title(key, title)
        logger.debug("Created session %s for %s", key, filename)
        return key

    def close_session(self, filename: str) -> Optional[int]:
        if not self.is_ready:
            return None

        key = self.find_latest_session_key(filename)
        if key is None:
            logger.debug("No session to close for %s", filename)
            return None

        timestamp = now_timestamp()
        with Session(self._engine) as session:
            log_session = session.get(LogSession, key)
            log_session.logend = timestamp
            log_session.lastmodified = timestamp
            session.add(log_session)
            session.commit()

        logger.debug("Closed session %s for %s", key, filename)
        return key

    def set_attribute(
        self, key: int, attribute: str | SessionAttributeName, value: str
    ) -> Optional[str]:
        if not self.is_ready:
            return None

        attrib = _attribute_name(attribute)
        with Session(self._engine) as session:
            existing = session.get(LogSessionAttribute, (key, attrib))
            if existing:
                existing.value = value
                session.add(existing)
            else:
                session.add(LogSessionAttribute(keyref=key, attrib=attrib, value=value))
            session.commit()

        return value

    def set_title(self, key: int, title: str) -> Optional[str]:
        return self.set_attribute(key, SessionAttributeName.TITLE, title)

    def get_attribute(
        self, key: int, attribute: str | SessionAttributeName
    ) -> Optional[str]:
        if not self.is_ready:
            return None

        with Session(self._engine) as session:
            row = session.get(LogSessionAttribute, (key, _attribute_name(attribute)))
            return row.value if row else None

    def get_session(self, key: int) -> Optional[LogSession]:
        if not self.is_ready:
            return None

        with Session(self._engine) as session:
            return session.get(LogSession, key)

    def list_sessions(self, filename: str | None = None) -> List[LogSession]:
        if not self.is_ready:
            return []

        query = select(LogSession)
        if filename is not None:
            query = query.where(LogSession.filename == filename)
        query = query.order_by(LogSession.logstart.desc(), LogSession.logkey.desc())

        with Session(self._engine) as session:
            return list(session.exec(query).all())
