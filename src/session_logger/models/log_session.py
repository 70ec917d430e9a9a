from typing import Optional

from sqlmodel import Field, SQLModel


class LogSession(SQLModel, table=True):
    __tablename__ = "logs"

    package: str = Field(max_length=255)
    name: str = Field(max_length=255)
    filename: str = Field(max_length=2048, index=True)
    # canonical "YYYY-MM-DD HH:mm:ss" strings, sortable as text
    logstart: Optional[str] = Field(default=None)
    logend: Optional[str] = Field(default=None)
    lastmodified: str
    logkey: Optional[int] = Field(default=None, primary_key=True)

    @property
    def is_open(self) -> bool:
        return self.logend is None
