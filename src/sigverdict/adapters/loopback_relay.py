"""In-process relay: queue requests, run a verifier, deliver callbacks.

Stands in for the off-process relay and computation service when running
locally. Requests and callbacks travel as separate messages; nothing is
delivered until deliver_pending() is called.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Any, Callable, Deque, List

from sigverdict.contracts import CallContext, RelayRequest, VerificationRequest

logger = logging.getLogger(__name__)

Verifier = Callable[[VerificationRequest], bool]


class LoopbackRelay:
    """Relay that computes verdicts with a local callable."""

    def __init__(self, address: str, program_id: str, compute: Verifier):
        self.address = address
        self.program_id = program_id
        self._compute = compute
        self._pending: Deque[RelayRequest] = deque()
        self._lock = threading.Lock()
        self.dispatched: List[RelayRequest] = []

    def dispatch(self, request: RelayRequest) -> None:
        with self._lock:
            self._pending.append(request)
            self.dispatched.append(request)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def deliver_pending(self, target: Any) -> List[Any]:
        """Deliver a callback for every queued request, oldest first.

        The entry point is looked up on target by the name carried in each
        request. Exceptions raised by the entry point propagate; requests
        not yet delivered stay queued.

        Returns:
            Whatever the entry point returned, one item per delivery
        """
        results = []
        while True:
            with self._lock:
                if not self._pending:
                    break
                relay_request = self._pending.popleft()
            request = VerificationRequest.from_payload(relay_request.payload)
            verdict = bool(self._compute(request))
            logger.debug("Delivering verdict %s for %s", verdict, relay_request.key)
            entry_point = getattr(target, relay_request.reply_entry_point)
            context = CallContext(caller=self.address, program_id=self.program_id)
            results.append(entry_point(context, request, verdict))
        return results
