# backend/beautyplaza/core/otp_store.py
"""
Storage backends for pending OTP challenges.

A challenge is keyed by contact address and consumed at most once. ``consume``
performs check-and-invalidate as a single step:

- ``InMemoryOtpStore`` guards a dict with a lock (single process, tests)
- ``RedisOtpStore`` runs the check inside a Lua script, so concurrent
  verifications across processes cannot both succeed
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from enum import Enum
import logging
import threading
from typing import Dict, Optional

import redis

logger = logging.getLogger(__name__)


class ConsumeResult(str, Enum):
    """Outcome of presenting a code for an address."""

    VERIFIED = "verified"
    MISMATCH = "mismatch"
    EXPIRED = "expired"
    MISSING = "missing"
    LOCKED = "locked"  # too many wrong codes; challenge discarded


@dataclass(frozen=True)
class OtpChallenge:
    address: str
    code: str
    issued_at: datetime
    expires_at: datetime
    attempts: int = 0

    @classmethod
    def issue(cls, address: str, code: str, issued_at: datetime, ttl_seconds: int) -> "OtpChallenge":
        return cls(
            address=address,
            code=code,
            issued_at=issued_at,
            expires_at=issued_at + timedelta(seconds=ttl_seconds),
        )


def _to_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def _from_ms(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


class OtpStore(ABC):
    """Keyed store of outstanding challenges, one per address."""

    @abstractmethod
    def save(self, challenge: OtpChallenge) -> None:
        """Store a challenge, replacing any outstanding one for the address."""

    @abstractmethod
    def get(self, address: str) -> Optional[OtpChallenge]:
        """The outstanding challenge for an address, if any."""

    @abstractmethod
    def discard(self, address: str) -> None:
        ...

    @abstractmethod
    def consume(
        self, address: str, code: str, now: datetime, max_attempts: int = 0
    ) -> ConsumeResult:
        """
        Check a presented code and invalidate the challenge when it is used up.

        The challenge is removed on success, on expiry, and once ``max_attempts``
        wrong codes were presented (``0`` disables the limit). A wrong code below
        the limit leaves it in place.
        """


class InMemoryOtpStore(OtpStore):
    """Process-local store; not shared between workers."""

    def __init__(self) -> None:
        self._challenges: Dict[str, OtpChallenge] = {}
        self._lock = threading.Lock()

    def save(self, challenge: OtpChallenge) -> None:
        with self._lock:
            self._challenges[challenge.address] = challenge

    def get(self, address: str) -> Optional[OtpChallenge]:
        with self._lock:
            return self._challenges.get(address)

    def discard(self, address: str) -> None:
        with self._lock:
            self._challenges.pop(address, None)

    def consume(
        self, address: str, code: str, now: datetime, max_attempts: int = 0
    ) -> ConsumeResult:
        with self._lock:
            challenge = self._challenges.get(address)
            if challenge is None:
                return ConsumeResult.MISSING
            if now > challenge.expires_at:
                del self._challenges[address]
                return ConsumeResult.EXPIRED
            if challenge.code == code:
                del self._challenges[address]
                return ConsumeResult.VERIFIED
            attempts = challenge.attempts + 1
            if max_attempts > 0 and attempts >= max_attempts:
                del self._challenges[address]
                return ConsumeResult.LOCKED
            self._challenges[address] = replace(challenge, attempts=attempts)
            return ConsumeResult.MISMATCH


# KEYS[1] = challenge key
# ARGV[1] = code, ARGV[2] = issued_at_ms, ARGV[3] = expires_at_ms, ARGV[4] = ttl_ms,
# ARGV[5] = attempts already spent
ISSUE_LUA = r"""
local key = KEYS[1]
redis.call('DEL', key)
redis.call('HSET', key, 'code', ARGV[1], 'issued_at_ms', ARGV[2], 'expires_at_ms', ARGV[3], 'attempts', ARGV[5])
redis.call('PEXPIRE', key, ARGV[4])
return 1
"""

# KEYS[1] = challenge key
# ARGV[1] = presented code, ARGV[2] = now_ms, ARGV[3] = max_attempts (0 = unlimited)
# Returns one of: verified, mismatch, expired, missing, locked
CONSUME_LUA = r"""
local key = KEYS[1]
local stored = redis.call('HGET', key, 'code')
if not stored then
  return 'missing'
end
local expires_at_ms = tonumber(redis.call('HGET', key, 'expires_at_ms'))
if tonumber(ARGV[2]) > expires_at_ms then
  redis.call('DEL', key)
  return 'expired'
end
if stored == ARGV[1] then
  redis.call('DEL', key)
  return 'verified'
end
local attempts = redis.call('HINCRBY', key, 'attempts', 1)
local max_attempts = tonumber(ARGV[3])
if max_attempts > 0 and attempts >= max_attempts then
  redis.call('DEL', key)
  return 'locked'
end
return 'mismatch'
"""


class RedisOtpStore(OtpStore):
    """Shared store backed by Redis hashes with a PEXPIRE safety net."""

    def __init__(self, client: redis.Redis, key_prefix: str = "otp") -> None:
        self.client = client
        self.key_prefix = key_prefix

    def _key(self, address: str) -> str:
        return f"{self.key_prefix}:{address}"

    def save(self, challenge: OtpChallenge) -> None:
        issued_ms = _to_ms(challenge.issued_at)
        expires_ms = _to_ms(challenge.expires_at)
        # Keep the key a little past expiry so a late attempt reports "expired"
        ttl_ms = max(expires_ms - issued_ms, 1) + 60_000
        self.client.eval(
            ISSUE_LUA,
            1,
            self._key(challenge.address),
            challenge.code,
            issued_ms,
            expires_ms,
            ttl_ms,
            challenge.attempts,
        )

    def get(self, address: str) -> Optional[OtpChallenge]:
        raw = self.client.hgetall(self._key(address))
        if not raw:
            return None
        fields = {
            (k.decode("utf-8") if isinstance(k, bytes) else k): (
                v.decode("utf-8") if isinstance(v, bytes) else v
            )
            for k, v in raw.items()
        }
        return OtpChallenge(
            address=address,
            code=fields["code"],
            issued_at=_from_ms(int(fields["issued_at_ms"])),
            expires_at=_from_ms(int(fields["expires_at_ms"])),
            attempts=int(fields.get("attempts", 0)),
        )

    def discard(self, address: str) -> None:
        self.client.delete(self._key(address))

    def consume(
        self, address: str, code: str, now: datetime, max_attempts: int = 0
    ) -> ConsumeResult:
        outcome = self.client.eval(
            CONSUME_LUA, 1, self._key(address), code, _to_ms(now), max_attempts
        )
        if isinstance(outcome, bytes):
            outcome = outcome.decode("utf-8")
        return ConsumeResult(outcome)


__all__ = [
    "CONSUME_LUA",
    "ISSUE_LUA",
    "ConsumeResult",
    "InMemoryOtpStore",
    "OtpChallenge",
    "OtpStore",
    "RedisOtpStore",
]
