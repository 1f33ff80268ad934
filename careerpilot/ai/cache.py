from __future__ import annotations

import hashlib
import json
import threading
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from careerpilot.ai.types import GenerationRequest

DEFAULT_CAPACITY = 100


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def context_fingerprint(context: dict[str, str] | Any) -> str:
    canonical = json.dumps(dict(context), sort_keys=True, ensure_ascii=False, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def cache_key(request: GenerationRequest) -> str:
    """Hash of the identifying fields only; auxiliary context order does not matter."""
    canonical = "\x1f".join(
        [
            request.mode,
            request.subject_role.strip(),
            (request.company or "").strip(),
            context_fingerprint(request.auxiliary_context),
        ]
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Any
    created_at: datetime


class ResultCache:
    """Process-local memo of normalized results.

    Bounded FIFO: once more than ``capacity`` keys are held, the
    oldest-inserted key is evicted. Re-putting an existing key replaces its
    value without changing its position.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def entry(self, key: str) -> CacheEntry | None:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(key=key, value=value, created_at=_utc_now())
            while len(self._entries) > self._capacity:
                self._entries.popitem(last=False)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
