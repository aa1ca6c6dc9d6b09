"""Public API for sigverdict.

VerificationCache wires the components together. Callers that need finer
control can build them individually from sigverdict.kernel.
"""

from typing import Optional

from sigverdict.codes import PutOutcome
from sigverdict.config import VerifierConfig
from sigverdict.contracts import CallContext, VerificationRequest
from sigverdict.kernel.dispatcher import Relay, RequestDispatcher
from sigverdict.kernel.guard import CallbackGuard
from sigverdict.kernel.ingestor import ResultIngestor
from sigverdict.kernel.key_deriver import CacheKey, derive_key
from sigverdict.kernel.notifications import NotificationLog
from sigverdict.kernel.query import QueryResult, QueryService
from sigverdict.kernel.result_store import ResultStore


class VerificationCache:
    """Dispatch verifications, accept authorized verdicts, answer queries."""

    def __init__(
        self,
        config: VerifierConfig,
        relay: Relay,
        store: Optional[ResultStore] = None,
        notifications: Optional[NotificationLog] = None,
    ):
        self.config = config
        self.store = store if store is not None else ResultStore()
        self.notifications = notifications if notifications is not None else NotificationLog()
        self.guard = CallbackGuard(config.relay_address, config.program_id)
        self.dispatcher = RequestDispatcher(config, relay)
        self.ingestor = ResultIngestor(self.guard, self.store, self.notifications)
        self.queries = QueryService(self.store)

    def key_for(self, request: VerificationRequest) -> CacheKey:
        return derive_key(request)

    def request_verification(self, request: VerificationRequest) -> None:
        self.dispatcher.request_verification(request)

    def request_if_absent(self, request: VerificationRequest) -> bool:
        """Dispatch only when no verdict is stored. Returns True if dispatched."""
        if self.queries.status(request).available:
            return False
        self.dispatcher.request_verification(request)
        return True

    def ingest(self, context: CallContext, request: VerificationRequest, result: bool) -> PutOutcome:
        """Inbound callback entry point (the relay calls this by name)."""
        return self.ingestor.ingest(context, request, result)

    def query(self, request: VerificationRequest) -> bool:
        return self.queries.query(request)

    def status(self, request: VerificationRequest) -> QueryResult:
        return self.queries.status(request)
