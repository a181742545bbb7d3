from __future__ import annotations

import logging
import threading

from classdesk.config import settings
from classdesk.core.time_provider import TimeProvider, default_time_provider
from classdesk.services.entity_store import EntityStore
from classdesk.services.notification_service import NOTICE_EVENT, NotificationBus, RecentNotices, log_notice
from classdesk.services.storage_service import BlobBackend, StorageAdapter, build_blob_backend


logger = logging.getLogger(__name__)

recent_notices = RecentNotices(settings.recent_notices_limit)

_store: EntityStore | None = None
_store_lock = threading.Lock()


def build_store(
    backend: BlobBackend | None = None,
    *,
    time_provider: TimeProvider = default_time_provider,
    seed_on_empty: bool | None = None,
) -> EntityStore:
    bus = NotificationBus()
    bus.subscribe(NOTICE_EVENT, log_notice)
    bus.subscribe(NOTICE_EVENT, recent_notices)
    store = EntityStore(
        StorageAdapter(backend or build_blob_backend()),
        notifier=bus,
        time_provider=time_provider,
        seed_on_empty=seed_on_empty,
    )
    store.load()
    return store


def init_store(backend: BlobBackend | None = None) -> EntityStore:
    global _store
    with _store_lock:
        _store = build_store(backend)
        return _store


def get_store() -> EntityStore:
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = build_store()
    return _store
