"""Firestore-backed tier hit store.

Each tier is one document ``{"label": <tier label>, "count": <int>}`` whose id
is derived from the label, so concurrent seeding from several instances
creates at most one record per tier. Increments use the server-side
``Increment`` transform, so concurrent writers never lose updates.
"""

import hashlib
import logging
from collections.abc import Iterable
from contextlib import aclosing

from google.api_core import exceptions as gcp_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from config import settings
from services.errors import TierHitStoreError
from services.hit_store import TierHitStore

logger = logging.getLogger(__name__)


def tier_document_id(label: str) -> str:
    """Stable document id for a tier label."""
    return "tier-" + hashlib.sha256(label.encode("utf-8")).hexdigest()[:24]


class FirestoreTierHitStore(TierHitStore):
    backend = "firestore"

    def __init__(self, client: firestore.AsyncClient, collection: str = "tier_hits") -> None:
        self._client = client
        self._collection_name = collection

    @classmethod
    def from_settings(cls) -> "FirestoreTierHitStore":
        client = firestore.AsyncClient(project=settings.firestore_project or None)
        return cls(client, collection=settings.firestore_collection)

    @property
    def _collection(self):
        return self._client.collection(self._collection_name)

    async def find_by_label(self, label: str) -> str | None:
        query = self._collection.where(filter=FieldFilter("label", "==", label)).limit(1)
        try:
            async with aclosing(query.stream()) as snapshots:
                async for snapshot in snapshots:
                    return snapshot.id
        except gcp_exceptions.GoogleAPICallError as e:
            raise TierHitStoreError(f"Firestore lookup failed for {label!r}: {e}") from e
        return None

    async def increment(self, record_id: str, field: str = "count", amount: int = 1) -> None:
        try:
            await self._collection.document(record_id).update(
                {field: firestore.Increment(amount)}
            )
        except gcp_exceptions.NotFound as e:
            raise TierHitStoreError(f"No record with id {record_id}") from e
        except gcp_exceptions.GoogleAPICallError as e:
            raise TierHitStoreError(f"Firestore increment failed for {record_id}: {e}") from e

    async def counts(self) -> dict[str, int]:
        # Records created outside ensure_labels may share a label; sum them.
        hits: dict[str, int] = {}
        try:
            async for snapshot in self._collection.stream():
                data = snapshot.to_dict() or {}
                if "label" in data:
                    hits[data["label"]] = hits.get(data["label"], 0) + int(data.get("count", 0))
        except gcp_exceptions.GoogleAPICallError as e:
            raise TierHitStoreError(f"Firestore read failed: {e}") from e
        return hits

    async def ensure_labels(self, labels: Iterable[str]) -> None:
        for label in labels:
            doc = self._collection.document(tier_document_id(label))
            try:
                await doc.create({"label": label, "count": 0})
            except gcp_exceptions.AlreadyExists:
                continue
            except gcp_exceptions.GoogleAPICallError as e:
                raise TierHitStoreError(f"Firestore seed failed for {label!r}: {e}") from e
            logger.info("Seeded tier hit record for %s", label)
