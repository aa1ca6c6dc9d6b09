"""Tests for the read side: presence is never confused with a negative verdict."""

import pytest

from sigverdict.contracts import VerificationRequest
from sigverdict.kernel.key_deriver import derive_key
from sigverdict.kernel.query import NotAvailable, QueryResult, QueryService
from sigverdict.kernel.result_store import ResultStore


@pytest.fixture
def store():
    return ResultStore()


def test_absent_raises_not_available(store, request_abc):
    with pytest.raises(NotAvailable) as excinfo:
        QueryService(store).query(request_abc)
    assert excinfo.value.key == derive_key(request_abc)


def test_not_available_is_a_lookup_error():
    assert issubclass(NotAvailable, LookupError)


def test_true_verdict(store, request_abc):
    store.put(derive_key(request_abc), True)
    assert QueryService(store).query(request_abc) is True


def test_false_verdict_is_returned_not_raised(store, request_abc):
    store.put(derive_key(request_abc), False)
    assert QueryService(store).query(request_abc) is False


def test_status_distinguishes_absent_from_false(store, request_abc):
    other = VerificationRequest(message=b"abc", signature=b"xy")
    store.put(derive_key(request_abc), False)
    service = QueryService(store)

    assert service.status(request_abc) == QueryResult(key=derive_key(request_abc), available=True, result=False)
    missing = service.status(other)
    assert missing.available is False
    assert missing.result is None


def test_reads_reflect_later_writes(store, request_abc):
    service = QueryService(store)
    assert service.status(request_abc).available is False
    store.put(derive_key(request_abc), True)
    assert service.query(request_abc) is True
