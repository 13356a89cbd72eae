from __future__ import annotations

import logging
import uuid
from typing import Callable, Optional

from ..core.constants import DEVICE_ID_KEY
from ..storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


class LocalDeviceIdentity:
    """Resolves the stable per-install device identifier.

    Lookup order: primary store, then the long-lived fallback store, then the
    platform install id (when the platform has one), then a fresh UUID4. The
    resolved value is written back to both stores so later calls return the
    same identifier.
    """

    def __init__(
        self,
        store: KeyValueStore,
        fallback: Optional[KeyValueStore] = None,
        *,
        platform_id: Optional[Callable[[], Optional[str]]] = None,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self._store = store
        self._fallback = fallback
        self._platform_id = platform_id
        self._id_factory = id_factory

    def resolve(self) -> str:
        stored = self._store.get(DEVICE_ID_KEY)
        if stored:
            return str(stored)

        device_id = None
        if self._fallback is not None:
            device_id = self._fallback.get(DEVICE_ID_KEY)
        if not device_id and self._platform_id is not None:
            device_id = self._platform_id()
        if not device_id:
            device_id = self._id_factory()
            logger.info("Generated new device identifier")

        device_id = str(device_id)
        if self._fallback is not None:
            self._fallback.set(DEVICE_ID_KEY, device_id)
        self._store.set(DEVICE_ID_KEY, device_id)
        return device_id
