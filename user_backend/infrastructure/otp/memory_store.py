from __future__ import annotations

import asyncio
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional

import user_backend.domain.services as domain_services
from user_backend.domain.ports.otp_store import OtpStorePort

logger = logging.getLogger(__name__)

OTP_STORE_MAX_LENGTH = 10_000
OTP_STORE_MAX_AGE_SECONDS = 10 * 60


@dataclass(frozen=True)
class OtpEntry:
    code: str
    bound_identity: Optional[str]
    created_at: float


class InMemoryOtpStore(OtpStorePort):
    """
    Process-local OTP table with a fixed TTL and a fixed capacity.

    Entries are kept in creation order; an overwrite moves the key to the
    newest position so capacity eviction always drops the oldest-created code.
    Expiry is lazy: checked on verify, and expired heads are purged on insert.
    """

    def __init__(
        self,
        *,
        ttl_seconds: int = OTP_STORE_MAX_AGE_SECONDS,
        capacity: int = OTP_STORE_MAX_LENGTH,
        consume_on_verify: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self._ttl = ttl_seconds
        self._capacity = capacity
        self._consume = consume_on_verify
        self._clock = clock
        self._entries: OrderedDict[str, OtpEntry] = OrderedDict()
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def _is_expired(self, entry: OtpEntry, now: float) -> bool:
        return now - entry.created_at >= self._ttl

    def _purge_expired_head(self, now: float) -> None:
        while self._entries:
            oldest = next(iter(self._entries.values()))
            if not self._is_expired(oldest, now):
                break
            self._entries.popitem(last=False)

    async def create(self, key: str, bound_identity: Optional[str] = None) -> str:
        code = domain_services.generate_6digit_code()
        async with self._lock:
            now = self._clock()
            self._entries.pop(key, None)
            self._purge_expired_head(now)
            self._entries[key] = OtpEntry(code, bound_identity, now)
            while len(self._entries) > self._capacity:
                self._entries.popitem(last=False)
                logger.warning("otp store full, evicted oldest entry")
        return code

    async def verify(self, key: str, bound_identity: Optional[str], code: str) -> bool:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False
            if self._is_expired(entry, self._clock()):
                del self._entries[key]
                return False
            matched = entry.bound_identity == bound_identity and domain_services.secure_compare(
                entry.code, code
            )
            if matched and self._consume:
                del self._entries[key]
            return matched
