import logging

from sqlalchemy import event, text
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from session_logger.core.config import settings, sqlite_url
from session_logger.models import LogSession, LogSessionAttribute

logger = logging.getLogger(__name__)

# make sure all SQLModel models are imported (models) before initializing DB
SESSION_TABLES = [LogSession.__table__, LogSessionAttribute.__table__]


def create_session_engine(db_path: str, journal_mode: str | None = None) -> Engine:
    journal_mode = journal_mode or settings.SQLITE_JOURNAL_MODE
    engine = create_engine(sqlite_url(str(db_path)))

    @event.listens_for(engine, "connect")
    def set_journal_mode(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute(f"PRAGMA journal_mode={journal_mode}")
        cursor.close()

    return engine


def get_journal_mode(engine: Engine) -> str:
    with engine.connect() as conn:
        return conn.execute(text("PRAGMA journal_mode")).scalar_one()


def drop_sessions_table(engine: Engine) -> None:
    # irrecoverable: every session row is gone, logs_attr is left as is
    logger.warning("Dropping table %s", LogSession.__tablename__)
    LogSession.__table__.drop(engine, checkfirst=True)


def init_db(engine: Engine, clear: bool = False) -> None:
    if clear:
        drop_sessions_table(engine)

    SQLModel.metadata.create_all(engine, tables=SESSION_TABLES)
