from __future__ import annotations

import hashlib
import json
import threading
import time
from dataclasses import dataclass
from typing import Callable

Clock = Callable[[], float]


def make_cache_key(resume_key: str, job_description: str) -> str:
    # A JSON array keeps the pair unambiguous when either side contains a separator.
    encoded = json.dumps([resume_key, job_description], ensure_ascii=False)
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class CacheEntry:
    key: str
    payload: str
    inserted_at: float


class AnalysisCache:
    """In-memory analysis payload cache with a fixed TTL.

    Entries are only checked for age when looked up; an expired entry is
    removed by that lookup. Writes always replace the previous entry for the
    key. Payloads are serialized strings, so a hit hands back exactly the
    bytes that were stored.
    """

    def __init__(self, ttl_seconds: float, clock: Clock = time.time):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.inserted_at > self._ttl_seconds:
                del self._entries[key]
                return None
            return entry.payload

    def set(self, key: str, payload: str) -> None:
        entry = CacheEntry(key=key, payload=payload, inserted_at=self._clock())
        with self._lock:
            self._entries[key] = entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
