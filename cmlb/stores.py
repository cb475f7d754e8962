#!/usr/bin/env python3
"""
Storage interfaces used by the dinner suggestion job, and their Firestore implementations.

The job only talks to SettingsStore, DeviceRegistry and RecipeCatalog, so it can run
against in-memory fakes in tests.
"""

import logging
from typing import Iterable, List, Optional, Protocol

from .db import (
    get_db, SETTINGS_COLLECTION, NOTIFICATION_SETTINGS_DOC,
    DEVICES_COLLECTION, RECIPES_COLLECTION,
)
from .models import NotificationSettings, RegisteredDevice, RecipeRecord

# Create logger for this module
logger = logging.getLogger(__name__)

# Firestore rejects batches larger than this
MAX_BATCH_SIZE = 500


class SettingsStore(Protocol):
    def load(self) -> Optional[NotificationSettings]: ...

    def mark_sent(self, date_str: str) -> None: ...


class DeviceRegistry(Protocol):
    def list_devices(self) -> List[RegisteredDevice]: ...

    def delete_devices(self, device_ids: Iterable[str]) -> int: ...


class RecipeCatalog(Protocol):
    def list_recipes(self) -> List[RecipeRecord]: ...


class _FirestoreStore:
    def __init__(self, db=None):
        self._db = db

    @property
    def db(self):
        if self._db is None:
            self._db = get_db()
        return self._db


class FirestoreSettingsStore(_FirestoreStore):
    """settings/notifications -> {enabled, hour, lastSent}"""

    def _ref(self):
        return self.db.collection(SETTINGS_COLLECTION).document(NOTIFICATION_SETTINGS_DOC)

    def load(self) -> Optional[NotificationSettings]:
        snapshot = self._ref().get()
        if not snapshot.exists:
            return None
        return NotificationSettings.from_dict(snapshot.to_dict() or {})

    def mark_sent(self, date_str: str) -> None:
        self._ref().update({'lastSent': date_str})

    def save(self, settings: NotificationSettings) -> None:
        """Overwrite the settings document (used by the admin script)"""
        self._ref().set({
            'enabled': settings.enabled,
            'hour': settings.hour,
            'lastSent': settings.last_sent,
        })


class FirestoreDeviceRegistry(_FirestoreStore):
    """fcm_tokens/{uid} -> {token, email, updatedAt}"""

    def list_devices(self) -> List[RegisteredDevice]:
        docs = self.db.collection(DEVICES_COLLECTION).stream()
        return [RegisteredDevice.from_dict(doc.id, doc.to_dict() or {}) for doc in docs]

    def delete_devices(self, device_ids: Iterable[str]) -> int:
        device_ids = list(device_ids)
        if not device_ids:
            return 0

        collection = self.db.collection(DEVICES_COLLECTION)
        for start in range(0, len(device_ids), MAX_BATCH_SIZE):
            batch = self.db.batch()
            for device_id in device_ids[start:start + MAX_BATCH_SIZE]:
                batch.delete(collection.document(device_id))
            batch.commit()

        logger.debug(f"Deleted {len(device_ids)} device document(s) from {DEVICES_COLLECTION}")
        return len(device_ids)


class FirestoreRecipeCatalog(_FirestoreStore):
    """recipes/{id} -> {title, rating, favorite, tags, ...}"""

    def list_recipes(self) -> List[RecipeRecord]:
        docs = self.db.collection(RECIPES_COLLECTION).stream()
        return [RecipeRecord.from_dict(doc.id, doc.to_dict() or {}) for doc in docs]
