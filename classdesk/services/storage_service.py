from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session, sessionmaker

from classdesk.config import settings
from classdesk.models import StorageSlot


logger = logging.getLogger(__name__)

SLOT_TEACHERS = 'teachers'
SLOT_GROUPS = 'groups'
SLOT_CLASSROOMS = 'classrooms'
SLOT_STUDENTS = 'students'
SLOT_BOOKINGS = 'bookings'
SLOT_ATTENDANCE = 'attendance'
SLOT_PAYMENTS = 'payments'
SLOT_SELECTED_TEACHER_ID = 'selected-teacher-id'
SLOT_VIEW_MODE = 'view-mode'

ALL_SLOTS = (
    SLOT_TEACHERS,
    SLOT_GROUPS,
    SLOT_CLASSROOMS,
    SLOT_STUDENTS,
    SLOT_BOOKINGS,
    SLOT_ATTENDANCE,
    SLOT_PAYMENTS,
    SLOT_SELECTED_TEACHER_ID,
    SLOT_VIEW_MODE,
)

RecordT = TypeVar('RecordT', bound=BaseModel)


class BlobBackend:
    def get(self, key: str) -> str | None:
        raise NotImplementedError

    def set(self, key: str, raw: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class MemoryBlobBackend(BlobBackend):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._store: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._store.get(key)

    def set(self, key: str, raw: str) -> None:
        with self._lock:
            self._store[key] = raw

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)


class SqlBlobBackend(BlobBackend):
    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def get(self, key: str) -> str | None:
        db: Session = self._session_factory()
        try:
            row = db.query(StorageSlot).filter(StorageSlot.key == key).first()
            return row.data_json if row else None
        finally:
            db.close()

    def set(self, key: str, raw: str) -> None:
        db: Session = self._session_factory()
        try:
            row = db.query(StorageSlot).filter(StorageSlot.key == key).first()
            if row:
                row.data_json = raw
                row.updated_at = datetime.utcnow()
            else:
                db.add(StorageSlot(key=key, data_json=raw, updated_at=datetime.utcnow()))
            db.commit()
        finally:
            db.close()

    def delete(self, key: str) -> None:
        db: Session = self._session_factory()
        try:
            db.query(StorageSlot).filter(StorageSlot.key == key).delete()
            db.commit()
        finally:
            db.close()


def parse_text(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f'expected a string, got {type(value).__name__}')
    return value


class StorageAdapter:
    """Whole-snapshot persistence of named slots over a key -> JSON blob backend."""

    def __init__(self, backend: BlobBackend) -> None:
        self.backend = backend

    def _read(self, slot: str) -> tuple[bool, Any]:
        try:
            raw = self.backend.get(slot)
        except Exception:
            logger.exception('storage_slot_read_failed slot=%s', slot)
            return False, None
        if raw is None:
            return False, None
        try:
            return True, json.loads(raw)
        except (TypeError, ValueError):
            logger.exception('storage_slot_load_failed slot=%s', slot)
            return False, None

    def load_collection(
        self,
        slot: str,
        model: type[RecordT],
        default_factory: Callable[[], list[RecordT]],
    ) -> tuple[list[RecordT], bool]:
        """Return the stored records and whether they came from storage.

        Missing or malformed slots yield ``default_factory()`` instead.
        """
        found, payload = self._read(slot)
        if not found:
            return default_factory(), False
        if not isinstance(payload, list):
            logger.warning('storage_slot_malformed slot=%s reason=not_a_list', slot)
            return default_factory(), False
        try:
            return [model.model_validate(item) for item in payload], True
        except ValidationError:
            logger.exception('storage_slot_load_failed slot=%s', slot)
            return default_factory(), False

    def load_scalar(self, slot: str, default: Any, parse: Callable[[Any], Any] = parse_text) -> tuple[Any, bool]:
        found, payload = self._read(slot)
        if not found or payload is None:
            return default, False
        try:
            return parse(payload), True
        except (TypeError, ValueError):
            logger.exception('storage_slot_load_failed slot=%s', slot)
            return default, False

    def save(self, slot: str, payload: Any) -> bool:
        # Writes are fire-and-forget: a failing backend never breaks the mutation.
        try:
            raw = json.dumps(payload, default=str)
            self.backend.set(slot, raw)
        except Exception:
            logger.exception('storage_slot_write_failed slot=%s', slot)
            return False
        return True

    def save_records(self, slot: str, records: list[BaseModel]) -> bool:
        return self.save(slot, [record.model_dump(mode='json', by_alias=True) for record in records])

    def clear(self) -> None:
        for slot in ALL_SLOTS:
            try:
                self.backend.delete(slot)
            except Exception:
                logger.exception('storage_slot_delete_failed slot=%s', slot)


def build_blob_backend(session_factory: sessionmaker | None = None) -> BlobBackend:
    if settings.storage_backend == 'memory':
        return MemoryBlobBackend()
    if session_factory is None:
        from classdesk.db import SessionLocal

        session_factory = SessionLocal
    return SqlBlobBackend(session_factory)
