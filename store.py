"""Durable storage of entries and request statuses."""
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from database import SessionLocal
from errors import StorageError
from models import Entry, RequestStatus
from schemas import StatusRecord

logger = logging.getLogger(__name__)


class EntryStore(ABC):
    """
    Key-value store of entries (by type + id) and request statuses (by id).

    Every method raises StorageError when the backend fails.
    """

    @abstractmethod
    def get_entry(self, entry_type: str, entry_id: str) -> Optional[dict]:
        pass

    @abstractmethod
    def get_collection(self, entry_type: str) -> Optional[List[dict]]:
        """All entries of a type, or None if there are none."""

    @abstractmethod
    def create_entry(self, record: dict) -> None:
        pass

    @abstractmethod
    def update_entry(self, entry_type: str, entry_id: str, patch: dict) -> dict:
        """Merge ``patch`` into an existing entry and return the result."""

    @abstractmethod
    def create_status(self, status: StatusRecord) -> StatusRecord:
        """
        Start the lifecycle of a batch job.

        Status ids name the job target, so a re-run of the same target starts
        a new lifecycle: the stored record is replaced rather than moved back
        from `completed`. Within one lifecycle the state only advances.
        """

    @abstractmethod
    def update_status(self, status: StatusRecord) -> StatusRecord:
        pass

    @abstractmethod
    def get_status(self, status_id: str) -> Optional[StatusRecord]:
        pass


def _scraped_at(record: dict) -> Optional[datetime]:
    value = record.get('scraped_at')
    if isinstance(value, str):
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
    return value


class SqlStore(EntryStore):
    """EntryStore backed by the SQL database."""

    def __init__(self, session_factory=None):
        self.session_factory = session_factory or SessionLocal

    @contextmanager
    def _session(self):
        db = self.session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error: {e}")
            raise StorageError(str(e)) from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def get_entry(self, entry_type: str, entry_id: str) -> Optional[dict]:
        with self._session() as db:
            entry = db.get(Entry, (entry_type, entry_id))
            return dict(entry.data) if entry else None

    def get_collection(self, entry_type: str) -> Optional[List[dict]]:
        with self._session() as db:
            entries = (
                db.query(Entry)
                .filter_by(entry_type=entry_type)
                .order_by(Entry.created_at, Entry.entry_id)
                .all()
            )
            return [dict(e.data) for e in entries] or None

    def create_entry(self, record: dict) -> None:
        with self._session() as db:
            db.add(Entry(
                entry_type=record['type'],
                entry_id=record['id'],
                data=record,
                scraped_at=_scraped_at(record),
            ))
        logger.debug(f"Created entry {record['type']}/{record['id']}")

    def update_entry(self, entry_type: str, entry_id: str, patch: dict) -> dict:
        with self._session() as db:
            entry = db.get(Entry, (entry_type, entry_id))
            if entry is None:
                raise StorageError(f"Entry {entry_type}/{entry_id} does not exist")

            # Reassign so the JSON column is flagged dirty
            entry.data = {**entry.data, **patch}
            entry.scraped_at = _scraped_at(entry.data)
            data = dict(entry.data)

        logger.debug(f"Updated entry {entry_type}/{entry_id}")
        return data

    def create_status(self, status: StatusRecord) -> StatusRecord:
        with self._session() as db:
            # New lifecycle for the same job target
            row = db.get(RequestStatus, status.id)
            if row is None:
                row = RequestStatus(id=status.id)
                db.add(row)
            row.request_type = status.request_type
            row.state = status.state
            row.failed_items = list(status.failed_items)
            db.flush()
            db.refresh(row)
            return StatusRecord.model_validate(row)

    def update_status(self, status: StatusRecord) -> StatusRecord:
        with self._session() as db:
            row = db.get(RequestStatus, status.id)
            if row is None:
                raise StorageError(f"Status '{status.id}' does not exist")
            row.state = status.state
            row.failed_items = list(status.failed_items)
            db.flush()
            db.refresh(row)
            return StatusRecord.model_validate(row)

    def get_status(self, status_id: str) -> Optional[StatusRecord]:
        with self._session() as db:
            row = db.get(RequestStatus, status_id)
            return StatusRecord.model_validate(row) if row else None
