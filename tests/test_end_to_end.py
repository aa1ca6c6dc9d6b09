"""End-to-end: dispatch, relay callback, query, re-delivery, conflict."""

import pytest

from sigverdict import (
    CallContext,
    NotAvailable,
    PutOutcome,
    StoreConflict,
    UntrustedProgram,
    UntrustedSource,
    VerificationCache,
    VerificationRequest,
)
from sigverdict.adapters.loopback_relay import LoopbackRelay

from conftest import OTHER, OTHER_PROGRAM, PROGRAM, RELAY


@pytest.fixture
def relay():
    return LoopbackRelay(RELAY, PROGRAM, compute=lambda request: request.signature == b"xyz")


@pytest.fixture
def cache(config, relay):
    return VerificationCache(config, relay)


def test_full_scenario(cache, relay, relay_context):
    r = VerificationRequest(message=b"abc", signature=b"xyz")

    with pytest.raises(NotAvailable):
        cache.query(r)

    cache.request_verification(r)
    assert relay.pending == 1
    with pytest.raises(NotAvailable):
        cache.query(r)

    assert relay.deliver_pending(cache) == [PutOutcome.INSERTED]
    assert cache.query(r) is True

    assert cache.ingest(relay_context, r, True) is PutOutcome.ALREADY_PRESENT_SAME
    assert cache.query(r) is True

    with pytest.raises(StoreConflict):
        cache.ingest(relay_context, r, False)
    assert cache.query(r) is True

    assert [n.result for n in cache.notifications] == [True, True]


def test_negative_verdict_is_queryable(cache, relay):
    r = VerificationRequest(message=b"abc", signature=b"bad")
    cache.request_verification(r)
    relay.deliver_pending(cache)
    assert cache.query(r) is False
    assert cache.status(r).available is True


def test_forged_relay_cannot_write(config):
    impostor = LoopbackRelay(OTHER, PROGRAM, compute=lambda request: True)
    cache = VerificationCache(config, impostor)
    r = VerificationRequest(message=b"abc", signature=b"bad")
    cache.request_verification(r)
    with pytest.raises(UntrustedSource):
        impostor.deliver_pending(cache)
    assert cache.status(r).available is False
    assert len(cache.notifications) == 0


def test_wrong_program_cannot_write(cache):
    r = VerificationRequest(message=b"abc", signature=b"xyz")
    with pytest.raises(UntrustedProgram):
        cache.ingest(CallContext(caller=RELAY, program_id=OTHER_PROGRAM), r, True)
    assert len(cache.store) == 0


def test_request_if_absent(cache, relay):
    r = VerificationRequest(message=b"abc", signature=b"xyz")
    assert cache.request_if_absent(r) is True
    assert cache.request_if_absent(r) is True  # still absent until the callback lands
    relay.deliver_pending(cache)
    assert cache.request_if_absent(r) is False
    assert len(relay.dispatched) == 2


def test_callbacks_arrive_independently(cache, relay):
    requests = [VerificationRequest(message=bytes([i]), signature=b"xyz") for i in range(5)]
    for r in requests:
        cache.request_verification(r)
    assert len(cache.store) == 0
    relay.deliver_pending(cache)
    assert all(cache.query(r) is True for r in requests)
    assert relay.pending == 0


def test_relay_uses_entry_point_from_request(config, relay_context):
    from sigverdict.config import VerifierConfig

    custom = VerifierConfig(**{**config.model_dump(), "callback_entry_point": "on_verdict"})

    class Target:
        def __init__(self):
            self.calls = []

        def on_verdict(self, context, request, result):
            self.calls.append((context, request, result))
            return "ok"

    relay = LoopbackRelay(RELAY, PROGRAM, compute=lambda request: False)
    cache = VerificationCache(custom, relay)
    r = VerificationRequest(message=b"abc", signature=b"xyz")
    cache.request_verification(r)
    target = Target()
    assert relay.deliver_pending(target) == ["ok"]
    assert target.calls == [(relay_context, r, False)]


def test_key_for_matches_dispatch_correlation(cache, relay):
    r = VerificationRequest(message=b"abc", signature=b"xyz")
    cache.request_verification(r)
    assert relay.dispatched[0].key == cache.key_for(r)
