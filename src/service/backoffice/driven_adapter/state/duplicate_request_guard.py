"""
In-memory duplicate request guard

Suppresses an identical request (same scope, same fingerprint parts) sent
again within the TTL window, e.g. a double-clicked payment form. Entries
live in an insertion-ordered dict so expiry and eviction pop from the front.
Per-process only; it is not a correctness mechanism.
"""

from collections import OrderedDict
import hashlib
import time
from typing import Callable

from src.platform.logging.loguru_io import Logger
from src.service.backoffice.app.interface.i_duplicate_request_guard import (
    IDuplicateRequestGuard,
)


class InMemoryDuplicateRequestGuard(IDuplicateRequestGuard):
    def __init__(
        self,
        *,
        ttl_seconds: float = 10.0,
        max_entries: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, float] = OrderedDict()

    @staticmethod
    def fingerprint(*, scope: str, parts: tuple[object, ...]) -> str:
        raw = '|'.join([scope, *(str(part) for part in parts)])
        return hashlib.sha256(raw.encode()).hexdigest()

    def claim(self, *, scope: str, parts: tuple[object, ...]) -> str | None:
        now = self._clock()
        self._evict_expired(now)

        key = self.fingerprint(scope=scope, parts=parts)
        if key in self._entries:
            Logger.base.warning(f'🔁 [GUARD] Duplicate {scope} request suppressed')
            return None

        self._entries[key] = now + self._ttl
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)
        return key

    def release(self, fingerprint: str) -> None:
        self._entries.pop(fingerprint, None)

    def _evict_expired(self, now: float) -> None:
        while self._entries:
            key, expires_at = next(iter(self._entries.items()))
            if expires_at > now:
                break
            self._entries.popitem(last=False)
