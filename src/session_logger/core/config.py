from typing import Any, Optional

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    PROJECT_NAME: str = "session-logger"

    SESSION_LOG_DB: str = "session_log.db"
    # numeric threshold, see core.constants.LogLevel
    SESSION_LOG_LEVEL: int = 6
    SQLITE_JOURNAL_MODE: str = "WAL"
    SQLALCHEMY_DATABASE_URI: Optional[str] = Field(default=None, validate_default=True)

    DIAGNOSTIC_LOG_LEVEL: str = "WARNING"

    # Seq log
    SEQ_SERVER_URL: Optional[str] = None
    SEQ_SERVER_API_KEY: Optional[str] = None

    @field_validator("SQLALCHEMY_DATABASE_URI", mode="before")
    def assemble_db_connection(cls, v: str | None, info: ValidationInfo) -> Any:
        if isinstance(v, str) and v:
            return v
        return sqlite_url(info.data.get("SESSION_LOG_DB") or "session_log.db")

    class Config:

        case_sensitive = True
        env_file = ".env"
        extra = "allow"


def sqlite_url(db_path: str) -> str:
    if db_path.startswith("sqlite:"):
        return db_path
    return f"sqlite:///{db_path}"


settings = Settings()
