"""
Models for the Files API
"""

from datetime import datetime
from email.utils import format_datetime
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, LargeBinary
from pydantic import ConfigDict


class FileRecord(SQLModel, table=True):
    """
    A stored file and its metadata.

    Rows are insert-only: id, created_date and file_size are assigned
    by the storage layer when the row is written.
    """
    __tablename__ = "storage"

    id: str = Field(primary_key=True)
    name: str
    created_date: str  # ISO-8601 with local UTC offset
    file_size: int
    contents: bytes = Field(sa_column=Column(LargeBinary, nullable=False))

    model_config = ConfigDict(from_attributes=True)


# Column names every compatible storage table must have
STORAGE_COLUMNS = ("id", "name", "created_date", "file_size", "contents")


class FileUpload(SQLModel):
    """Request model for storing a new file"""

    name: str
    contents: str  # base64

    model_config = ConfigDict(extra="forbid")


class FileInfo(SQLModel):
    """
    Public metadata for a stored file. Never carries the contents.
    """
    id: str
    name: str
    createDate: str  # pylint: disable=invalid-name
    fileSize: int  # pylint: disable=invalid-name

    @classmethod
    def from_row(
        cls, file_id: str, name: str, created_date: str, file_size: int
    ) -> "FileInfo":
        """Build from a metadata row, rendering the timestamp as RFC 2822"""
        return cls(
            id=file_id,
            name=name,
            createDate=format_datetime(datetime.fromisoformat(created_date)),
            fileSize=file_size,
        )
