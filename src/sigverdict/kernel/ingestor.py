"""Inbound side: record authorized verdicts delivered by the relay."""

import logging
import threading

from sigverdict.codes import PutOutcome
from sigverdict.contracts import CallContext, VerificationRequest
from sigverdict.kernel.guard import CallbackGuard
from sigverdict.kernel.key_deriver import CacheKey, derive_key
from sigverdict.kernel.notifications import NotificationLog
from sigverdict.kernel.result_store import ResultStore

logger = logging.getLogger(__name__)


class StoreConflict(Exception):
    """Two different verdicts were delivered for the same request.

    Fatal for that key: the computation service contradicted itself.
    The first verdict stays in the store.
    """

    def __init__(self, key: CacheKey, stored: bool, attempted: bool):
        super().__init__(
            f"conflicting verdict for {key}: stored {stored}, attempted {attempted}"
        )
        self.key = key
        self.stored = stored
        self.attempted = attempted


class ResultIngestor:
    """Authorize, derive, store, notify.

    Ingestions are serialized: each callback finishes (including its
    notice) before the next one is admitted. Subscribers are called after
    the lock is released.
    """

    def __init__(self, guard: CallbackGuard, store: ResultStore, notifications: NotificationLog):
        self._guard = guard
        self._store = store
        self._notifications = notifications
        self._lock = threading.Lock()

    def ingest(self, context: CallContext, request: VerificationRequest, result: bool) -> PutOutcome:
        """Handle one callback from the relay.

        Raises:
            UntrustedSource, UntrustedProgram: provenance check failed; nothing changed
            StoreConflict: a different verdict is already stored; nothing changed
            TypeError: result is not a bool
        """
        with self._lock:
            self._guard.authorize(context.caller, context.program_id)
            if not isinstance(result, bool):
                raise TypeError(f"result must be a bool, got {type(result).__name__}")

            key = derive_key(request)
            outcome = self._store.put(key, result)
            if outcome is PutOutcome.ALREADY_PRESENT_CONFLICT:
                stored = self._store.get(key)
                logger.error(
                    "Store conflict for %s: stored %s, relay delivered %s",
                    key, stored, result,
                )
                raise StoreConflict(key, stored, result)

            if outcome is PutOutcome.INSERTED:
                logger.info("Recorded verdict %s for %s", result, key)
            else:
                logger.debug("Duplicate delivery for %s (verdict %s)", key, result)

            notice = self._notifications.record(
                key=key,
                message=request.message,
                signature=request.signature,
                result=result,
                outcome=outcome.value,
            )
        self._notifications.publish(notice)
        return outcome
