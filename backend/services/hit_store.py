"""Persisted per-tier award counters.

Stores expose two primitives to the pipeline: find a record by tier label,
and atomically increment a numeric field on it. Callers must never emulate
the increment with a separate read and write-back.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable

from config import settings
from models.schemas.scoring_config import REFERENCE_CONFIG
from services.errors import TierHitStoreError

logger = logging.getLogger(__name__)


class TierHitStore(ABC):
    """Keyed record store addressable by tier label.

    Subclasses must implement:
        - find_by_label(label): record id, or None when the label is unknown
        - increment(record_id, field, amount): atomic server-side increment
        - counts(): label -> current count snapshot
        - ensure_labels(labels): create missing records at 0
    """

    backend: str = ""

    @abstractmethod
    async def find_by_label(self, label: str) -> str | None:
        """Return the id of the record for ``label``, or None."""

    @abstractmethod
    async def increment(self, record_id: str, field: str = "count", amount: int = 1) -> None:
        """Atomically add ``amount`` to ``field`` of ``record_id``."""

    @abstractmethod
    async def counts(self) -> dict[str, int]:
        """Snapshot of label -> count."""

    @abstractmethod
    async def ensure_labels(self, labels: Iterable[str]) -> None:
        """Create records for labels that have none. Existing counts are kept."""


class MemoryTierHitStore(TierHitStore):
    """In-process store. One lock guards every read-modify-write."""

    backend = "memory"

    def __init__(self, labels: Iterable[str] = ()) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, dict] = {}
        for label in labels:
            self._add(label)

    def _add(self, label: str) -> None:
        record_id = f"tier-{len(self._records)}"
        self._records[record_id] = {"label": label, "count": 0}

    async def find_by_label(self, label: str) -> str | None:
        with self._lock:
            for record_id, record in self._records.items():
                if record["label"] == label:
                    return record_id
        return None

    async def increment(self, record_id: str, field: str = "count", amount: int = 1) -> None:
        with self._lock:
            record = self._records.get(record_id)
            if record is None:
                raise TierHitStoreError(f"No record with id {record_id}")
            record[field] = record.get(field, 0) + amount

    async def counts(self) -> dict[str, int]:
        with self._lock:
            return {r["label"]: r["count"] for r in self._records.values()}

    async def ensure_labels(self, labels: Iterable[str]) -> None:
        with self._lock:
            known = {r["label"] for r in self._records.values()}
            for label in labels:
                if label not in known:
                    self._add(label)
                    known.add(label)


_store: TierHitStore | None = None


def _create_store(backend: str) -> TierHitStore:
    """Factory: build the configured backend with deferred imports."""
    if backend == "memory":
        return MemoryTierHitStore(REFERENCE_CONFIG.tier_labels)
    elif backend == "firestore":
        from services.hit_store_firestore import FirestoreTierHitStore
        return FirestoreTierHitStore.from_settings()
    else:
        raise ValueError(f"Unknown hit store backend: {backend}")


def get_hit_store() -> TierHitStore:
    """Get the process-wide store, creating it on first access."""
    global _store
    if _store is None:
        logger.info("Creating tier hit store: %s", settings.hit_store_backend)
        _store = _create_store(settings.hit_store_backend)
    return _store


def clear() -> None:
    """Drop the cached store. Useful for testing."""
    global _store
    _store = None
