"""Outcome and error code constants for sigverdict.

These constants prevent stringly-typed codes and ensure client code
branches on the correct values.
"""

from enum import Enum


class PutOutcome(str, Enum):
    """Result of writing a verdict into the result store."""

    INSERTED = "INSERTED"
    ALREADY_PRESENT_SAME = "ALREADY_PRESENT_SAME"
    ALREADY_PRESENT_CONFLICT = "ALREADY_PRESENT_CONFLICT"


class AuthErrorCode(str, Enum):
    """Reasons a callback is refused by the guard."""

    UNTRUSTED_SOURCE = "UNTRUSTED_SOURCE"
    UNTRUSTED_PROGRAM = "UNTRUSTED_PROGRAM"
