"""Tests for the OTP challenge stores."""

from datetime import datetime, timedelta, timezone

import pytest

from beautyplaza.core.otp_store import (
    CONSUME_LUA,
    ISSUE_LUA,
    ConsumeResult,
    InMemoryOtpStore,
    OtpChallenge,
    RedisOtpStore,
)

NOW = datetime(2030, 1, 1, 9, 0, tzinfo=timezone.utc)
ADDRESS = "carol@example.com"


def _challenge(code: str = "123456", ttl: int = 300) -> OtpChallenge:
    return OtpChallenge.issue(ADDRESS, code, NOW, ttl)


class DummyRedis:
    """Evaluates the two OTP scripts against a dict of hashes."""

    def __init__(self) -> None:
        self.hashes: dict = {}
        self.ttls: dict = {}
        self.calls: list = []

    def eval(self, script, numkeys, *args):
        self.calls.append((script, numkeys, args))
        key, argv = args[0], [str(a) for a in args[1:]]
        if script == ISSUE_LUA:
            self.hashes[key] = {
                "code": argv[0],
                "issued_at_ms": argv[1],
                "expires_at_ms": argv[2],
                "attempts": argv[4],
            }
            self.ttls[key] = int(argv[3])
            return 1
        if script == CONSUME_LUA:
            entry = self.hashes.get(key)
            if entry is None:
                return b"missing"
            if int(argv[1]) > int(entry["expires_at_ms"]):
                del self.hashes[key]
                return b"expired"
            if entry["code"] == argv[0]:
                del self.hashes[key]
                return b"verified"
            entry["attempts"] = str(int(entry["attempts"]) + 1)
            max_attempts = int(argv[2])
            if max_attempts > 0 and int(entry["attempts"]) >= max_attempts:
                del self.hashes[key]
                return b"locked"
            return b"mismatch"
        raise AssertionError("unexpected script")

    def hgetall(self, key):
        return {k.encode(): v.encode() for k, v in self.hashes.get(key, {}).items()}

    def delete(self, key):
        self.hashes.pop(key, None)
        self.ttls.pop(key, None)


@pytest.fixture(params=["memory", "redis"])
def store(request):
    if request.param == "memory":
        return InMemoryOtpStore()
    return RedisOtpStore(DummyRedis())


def test_challenge_expiry_is_issue_time_plus_ttl() -> None:
    challenge = _challenge(ttl=300)
    assert challenge.expires_at == NOW + timedelta(minutes=5)
    assert challenge.attempts == 0


def test_correct_code_verifies_once(store) -> None:
    store.save(_challenge())

    assert store.consume(ADDRESS, "123456", NOW + timedelta(minutes=1)) == ConsumeResult.VERIFIED
    assert store.consume(ADDRESS, "123456", NOW + timedelta(minutes=1)) == ConsumeResult.MISSING


def test_code_after_expiry_is_rejected_and_discarded(store) -> None:
    store.save(_challenge())

    late = NOW + timedelta(minutes=6)
    assert store.consume(ADDRESS, "123456", late) == ConsumeResult.EXPIRED
    assert store.consume(ADDRESS, "123456", NOW) == ConsumeResult.MISSING


def test_code_exactly_at_expiry_is_still_valid(store) -> None:
    store.save(_challenge())

    assert store.consume(ADDRESS, "123456", NOW + timedelta(seconds=300)) == ConsumeResult.VERIFIED


def test_wrong_code_keeps_challenge(store) -> None:
    store.save(_challenge())

    assert store.consume(ADDRESS, "000000", NOW, max_attempts=5) == ConsumeResult.MISMATCH
    assert store.consume(ADDRESS, "123456", NOW, max_attempts=5) == ConsumeResult.VERIFIED


def test_challenge_discarded_after_max_attempts(store) -> None:
    store.save(_challenge())

    assert store.consume(ADDRESS, "000000", NOW, max_attempts=2) == ConsumeResult.MISMATCH
    assert store.consume(ADDRESS, "000001", NOW, max_attempts=2) == ConsumeResult.LOCKED
    assert store.consume(ADDRESS, "123456", NOW, max_attempts=2) == ConsumeResult.MISSING


def test_zero_max_attempts_disables_limit(store) -> None:
    store.save(_challenge())

    for _ in range(10):
        assert store.consume(ADDRESS, "999999", NOW, max_attempts=0) == ConsumeResult.MISMATCH
    assert store.consume(ADDRESS, "123456", NOW) == ConsumeResult.VERIFIED


def test_new_challenge_replaces_outstanding_one(store) -> None:
    store.save(_challenge(code="111111"))
    store.save(_challenge(code="222222"))

    assert store.consume(ADDRESS, "111111", NOW) == ConsumeResult.MISMATCH
    assert store.consume(ADDRESS, "222222", NOW) == ConsumeResult.VERIFIED


def test_redis_store_keys_and_safety_ttl() -> None:
    client = DummyRedis()
    store = RedisOtpStore(client, key_prefix="otp")

    store.save(_challenge(ttl=300))

    assert "otp:carol@example.com" in client.hashes
    assert client.ttls["otp:carol@example.com"] == 300_000 + 60_000
    script, numkeys, _ = client.calls[0]
    assert script == ISSUE_LUA
    assert numkeys == 1


def test_redis_store_accepts_str_replies() -> None:
    class StrRedis(DummyRedis):
        def eval(self, script, numkeys, *args):
            result = super().eval(script, numkeys, *args)
            return result.decode() if isinstance(result, bytes) else result

    store = RedisOtpStore(StrRedis())
    store.save(_challenge())

    assert store.consume(ADDRESS, "123456", NOW) == ConsumeResult.VERIFIED


def test_get_returns_outstanding_challenge(store) -> None:
    store.save(_challenge())
    store.consume(ADDRESS, "000000", NOW, max_attempts=5)

    pending = store.get(ADDRESS)

    assert pending is not None
    assert pending.code == "123456"
    assert pending.expires_at == NOW + timedelta(minutes=5)
    assert pending.attempts == 1
    assert store.get("nobody@example.com") is None


def test_saved_copy_restores_a_consumed_challenge(store) -> None:
    store.save(_challenge())
    pending = store.get(ADDRESS)
    assert store.consume(ADDRESS, "123456", NOW) == ConsumeResult.VERIFIED

    store.save(pending)

    assert store.consume(ADDRESS, "123456", NOW) == ConsumeResult.VERIFIED


def test_discard_removes_challenge(store) -> None:
    store.save(_challenge())

    store.discard(ADDRESS)
    store.discard(ADDRESS)

    assert store.get(ADDRESS) is None
    assert store.consume(ADDRESS, "123456", NOW) == ConsumeResult.MISSING
