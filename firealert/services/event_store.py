# firealert/services/event_store.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from bson.errors import BSONError
from pymongo import DESCENDING
from pymongo.errors import PyMongoError
from ..db import create_indexes
from ..errors import StoreError

logger = logging.getLogger(__name__)

MIN_LIMIT = 1
MAX_LIMIT = 200


def _utc_now_ms() -> datetime:
    # Mongo keeps millisecond precision; match it so the echo equals what a read returns
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class EventStore:
    """Persistence for alert records in a single Mongo collection."""

    def __init__(self, collection):
        self.collection = collection
        self._last_received_at: Optional[datetime] = None

    async def ensure_indexes(self):
        await create_indexes(self.collection)

    def _next_received_at(self) -> datetime:
        now = _utc_now_ms()
        if self._last_received_at is not None and now < self._last_received_at:
            # wall clock stepped back; keep received_at non-decreasing
            now = self._last_received_at
        self._last_received_at = now
        return now

    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        doc = dict(document)
        doc["received_at"] = self._next_received_at()
        try:
            res = await self.collection.insert_one(doc)
        except (PyMongoError, BSONError, OverflowError, TypeError) as e:
            raise StoreError(str(e)) from e
        doc["_id"] = res.inserted_id
        return doc

    async def find_recent(self, limit: int) -> List[Dict[str, Any]]:
        limit = max(MIN_LIMIT, min(MAX_LIMIT, int(limit)))
        cursor = (
            self.collection.find({})
            .sort([("received_at", DESCENDING), ("_id", DESCENDING)])
            .limit(limit)
        )
        out = []
        try:
            async for d in cursor:
                out.append(d)
        except (PyMongoError, BSONError, OverflowError, TypeError) as e:
            raise StoreError(str(e)) from e
        return out
