"""Database models for manga ingestion system."""
from sqlalchemy import Column, String, DateTime, Enum, JSON, Index
from sqlalchemy.sql import func
from database import Base
import enum


class RequestState(str, enum.Enum):
    """Batch request states."""
    PENDING = "pending"
    COMPLETED = "completed"


class RequestType(str, enum.Enum):
    """Kinds of scrape requests."""
    MANGA_LIST = "MangaList"
    MANGA = "Manga"
    CHAPTER_LIST = "ChapterList"
    CHAPTER = "Chapter"


class Entry(Base):
    """
    Series or chapter record.

    Keyed by partition (``manga_<provider>`` or ``chapter_<provider>_<series>``)
    and slug. The record body lives in ``data``.
    """
    __tablename__ = 'entries'

    entry_type = Column(String(500), primary_key=True)
    entry_id = Column(String(500), primary_key=True)
    data = Column(JSON, nullable=False)
    scraped_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index('ix_entries_entry_type', 'entry_type'),
    )

    def __repr__(self):
        return f"<Entry(type='{self.entry_type}', id='{self.entry_id}')>"


class RequestStatus(Base):
    """Batch ingestion job tracking."""
    __tablename__ = 'request_status'

    id = Column(String(500), primary_key=True)
    request_type = Column(Enum(RequestType), nullable=True)
    state = Column(Enum(RequestState), default=RequestState.PENDING, nullable=False, index=True)
    failed_items = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<RequestStatus(id='{self.id}', state='{self.state}')>"
