"""Callback authorization: provenance checks on inbound verdicts.

The guard is the only trust boundary between the core and the outside
world. It checks where a callback came from, never what it claims.
"""

import logging

from sigverdict.codes import AuthErrorCode
from sigverdict.contracts import (
    ADDRESS_PATTERN,
    PROGRAM_ID_PATTERN,
    normalize_address,
    normalize_program_id,
)

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Raised when a callback fails a provenance check."""
    code: AuthErrorCode

    def __init__(self, message: str, *, caller: str, program_id: str):
        super().__init__(message)
        self.caller = caller
        self.program_id = program_id


class UntrustedSource(AuthError):
    """The callback did not come from the configured relay."""
    code = AuthErrorCode.UNTRUSTED_SOURCE


class UntrustedProgram(AuthError):
    """The callback is bound to a program other than the trusted one."""
    code = AuthErrorCode.UNTRUSTED_PROGRAM


class CallbackGuard:
    """Accepts callbacks only from one relay, for one program."""

    def __init__(self, relay_address: str, program_id: str):
        """
        Raises:
            ValueError: relay_address is not 0x + 40 hex, or program_id is not 64 hex
        """
        self._relay_address = normalize_address(relay_address)
        self._program_id = normalize_program_id(program_id)
        if not ADDRESS_PATTERN.match(self._relay_address):
            raise ValueError(f"relay_address must be 0x followed by 40 hex characters, got '{relay_address}'")
        if not PROGRAM_ID_PATTERN.match(self._program_id):
            raise ValueError(f"program_id must be 64 hex characters, got '{program_id}'")

    @property
    def relay_address(self) -> str:
        return self._relay_address

    @property
    def program_id(self) -> str:
        return self._program_id

    def authorize(self, caller: str, program_id: str) -> None:
        """Check provenance of a callback.

        Source is checked before program. Both values come from the host
        call context, never from the callback payload.

        Raises:
            UntrustedSource: caller is not the configured relay
            UntrustedProgram: program_id is not the trusted program
        """
        caller_norm = normalize_address(caller)
        program_norm = normalize_program_id(program_id)

        if caller_norm != self._relay_address:
            logger.warning(
                "Rejected callback from untrusted source %s (expected relay %s)",
                caller_norm, self._relay_address,
            )
            raise UntrustedSource(
                f"caller {caller_norm} is not the configured relay",
                caller=caller_norm, program_id=program_norm,
            )
        if program_norm != self._program_id:
            logger.warning(
                "Rejected callback for untrusted program %s from relay %s",
                program_norm, caller_norm,
            )
            raise UntrustedProgram(
                f"program {program_norm} is not the trusted program",
                caller=caller_norm, program_id=program_norm,
            )
