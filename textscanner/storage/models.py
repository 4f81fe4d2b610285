"""File record table and API schemas for the storage service."""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel
from sqlalchemy import BigInteger, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from textscanner.core.identity import FileRecord
from textscanner.db.session import Base


class FileRecordRow(Base):
    """Persisted FileRecord. The whole table is rewritten on every mutation."""

    __tablename__ = "file_records"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    content_hash: Mapped[str] = mapped_column(String(64), nullable=False, index=True)  # SHA-256 hex
    original_name: Mapped[str] = mapped_column(String(1024), nullable=False, default="")
    stored_name: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    content_type: Mapped[str] = mapped_column(String(255), nullable=False, default="text/plain")
    size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    duplicate_of: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    @classmethod
    def from_record(cls, record: FileRecord) -> "FileRecordRow":
        return cls(**record.model_dump())

    def to_record(self) -> FileRecord:
        uploaded_at = self.uploaded_at
        # SQLite drops the offset; values are always written in UTC
        if uploaded_at.tzinfo is None:
            uploaded_at = uploaded_at.replace(tzinfo=timezone.utc)
        return FileRecord(
            id=self.id,
            content_hash=self.content_hash,
            original_name=self.original_name,
            stored_name=self.stored_name,
            content_type=self.content_type,
            size=self.size,
            uploaded_at=uploaded_at,
            duplicate_of=self.duplicate_of,
        )


# Pydantic schemas for API
class StatsData(BaseModel):
    paragraphs: int
    words: int
    chars: int


class FileUploadResponse(BaseModel):
    """Result of an upload. ``duplicate_of`` is the canonical file id for a byte-identical upload."""

    file_id: str
    filename: str
    size: int
    duplicate: bool
    duplicate_of: Optional[str] = None
    stats: StatsData


class FileInfo(BaseModel):
    id: str
    filename: str
    size: int
    upload_date: datetime
    duplicate: bool


class FileListResponse(BaseModel):
    files: List[FileInfo]


class FileDeleteResponse(BaseModel):
    message: str = "File deleted"
    file_id: str
