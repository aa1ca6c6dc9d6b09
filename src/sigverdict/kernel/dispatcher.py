"""Outbound side: hand verification requests to the relay."""

import logging
from typing import Protocol

from sigverdict.config import VerifierConfig
from sigverdict.contracts import RelayRequest, VerificationRequest
from sigverdict.kernel.key_deriver import derive_key

logger = logging.getLogger(__name__)


class Relay(Protocol):
    """Transport that carries requests to the computation service."""

    def dispatch(self, request: RelayRequest) -> None:
        ...


class RequestDispatcher:
    """Builds one RelayRequest per call and forwards it.

    Fire-and-forget: nothing is locked and nothing waits for the callback.
    The cache is not consulted; every call dispatches.
    """

    def __init__(self, config: VerifierConfig, relay: Relay):
        self._config = config
        self._relay = relay

    def build(self, request: VerificationRequest) -> RelayRequest:
        """Build the outbound message without sending it."""
        return RelayRequest(
            program_id=self._config.program_id,
            payload=request.encode_payload(),
            reply_to=self._config.self_address,
            reply_entry_point=self._config.callback_entry_point,
            budget=self._config.callback_budget,
            key=derive_key(request),
        )

    def request_verification(self, request: VerificationRequest) -> None:
        """Forward a request to the relay. Relay errors propagate unchanged."""
        relay_request = self.build(request)
        logger.debug(
            "Dispatching %s to relay (program %s, budget %d)",
            relay_request.key, relay_request.program_id, relay_request.budget,
        )
        self._relay.dispatch(relay_request)
