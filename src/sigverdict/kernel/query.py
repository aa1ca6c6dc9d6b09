"""Read side: look up stored verdicts."""

from typing import Optional

from pydantic import BaseModel

from sigverdict.contracts import VerificationRequest
from sigverdict.kernel.key_deriver import CacheKey, derive_key
from sigverdict.kernel.result_store import ResultStore


class NotAvailable(LookupError):
    """No verdict has been recorded for the request yet.

    Not a negative result: dispatch the request and ask again later.
    """

    def __init__(self, key: CacheKey):
        super().__init__(f"no verdict available for {key}")
        self.key = key


class QueryResult(BaseModel):
    """Non-raising view of a lookup."""
    key: str
    available: bool
    result: Optional[bool] = None


class QueryService:
    """Read-only lookups; never blocks on in-flight requests."""

    def __init__(self, store: ResultStore):
        self._store = store

    def query(self, request: VerificationRequest) -> bool:
        """Return the stored verdict.

        Raises:
            NotAvailable: nothing stored for this request
        """
        key = derive_key(request)
        value = self._store.get(key)
        if value is None:
            raise NotAvailable(key)
        return value

    def status(self, request: VerificationRequest) -> QueryResult:
        key = derive_key(request)
        value = self._store.get(key)
        return QueryResult(key=key, available=value is not None, result=value)
