"""Record one tier award against the persisted hit counter."""

import logging

from services.errors import NotFoundWarning
from services.hit_store import TierHitStore

logger = logging.getLogger(__name__)


async def record_tier_hit(store: TierHitStore, label: str) -> None:
    """Increment the count for ``label`` by exactly one.

    Lookup and increment are separate store calls, but the increment itself
    is atomic, so concurrent awards of the same tier are all counted. Raises
    NotFoundWarning (without touching the store) when the label is unknown.
    """
    record_id = await store.find_by_label(label)
    if record_id is None:
        raise NotFoundWarning(f"Tier label {label!r} not found in hit store")
    await store.increment(record_id, "count", 1)
    logger.debug("Recorded tier hit: %s (%s)", label, record_id)
