from typing import Optional

from sqlmodel import Field, SQLModel


class LogSessionAttribute(SQLModel, table=True):
    __tablename__ = "logs_attr"

    # references logs.logkey; rows are not cascaded when a session goes away
    keyref: int = Field(primary_key=True)
    attrib: str = Field(primary_key=True, max_length=255)
    value: Optional[str] = Field(default=None, max_length=255)
