from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from threading import Lock
from uuid import UUID, uuid4

from riichi_score.schemas import ScoreRequest, ScoreResult


def request_fingerprint(req: ScoreRequest) -> str:
    payload = json.dumps(req.model_dump(mode="json"), sort_keys=True, ensure_ascii=False)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


@dataclass
class StoredScore:
    id: UUID
    fingerprint: str
    created_at: datetime
    expires_at: datetime
    request: ScoreRequest
    result: ScoreResult

    def to_data(self) -> dict:
        return {
            "fingerprint": self.fingerprint,
            "request": self.request.model_dump(mode="json"),
            "result": self.result.model_dump(mode="json"),
        }


class InMemoryScoreRepository:
    """Scored requests kept for `ttl_hours`, addressable by id or by request fingerprint."""

    def __init__(self, ttl_hours: int = 24) -> None:
        self._ttl_hours = ttl_hours
        self._items: dict[UUID, StoredScore] = {}
        self._by_fingerprint: dict[str, UUID] = {}
        self._lock = Lock()

    def _utcnow(self) -> datetime:
        return datetime.now(timezone.utc)

    def _prune(self) -> None:
        now = self._utcnow()
        expired = [item for item in self._items.values() if item.expires_at <= now]
        for item in expired:
            del self._items[item.id]
            if self._by_fingerprint.get(item.fingerprint) == item.id:
                del self._by_fingerprint[item.fingerprint]

    def __len__(self) -> int:
        with self._lock:
            self._prune()
            return len(self._items)

    def save(self, request: ScoreRequest, result: ScoreResult) -> StoredScore:
        fingerprint = request_fingerprint(request)
        with self._lock:
            self._prune()
            now = self._utcnow()
            item = StoredScore(
                id=uuid4(),
                fingerprint=fingerprint,
                created_at=now,
                expires_at=now + timedelta(hours=self._ttl_hours),
                request=request,
                result=result,
            )
            self._items[item.id] = item
            self._by_fingerprint[fingerprint] = item.id
            return item

    def get(self, item_id: UUID) -> StoredScore | None:
        with self._lock:
            self._prune()
            return self._items.get(item_id)

    def find(self, request: ScoreRequest) -> StoredScore | None:
        fingerprint = request_fingerprint(request)
        with self._lock:
            self._prune()
            item_id = self._by_fingerprint.get(fingerprint)
            return self._items.get(item_id) if item_id is not None else None
