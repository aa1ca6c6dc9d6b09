"""Public message models for sigverdict.

Every value crossing a component boundary is one of these frozen models:
requests flowing out to the relay, the call context the host transport
supplies on the way back in, and the notices emitted after ingestion.
"""

import json
import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from sigverdict._internal.canonical_json import canonical_bytes

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-f]{40}$")
PROGRAM_ID_PATTERN = re.compile(r"^[0-9a-f]{64}$")


def normalize_address(value: str) -> str:
    """Lowercase an address and make sure it carries the 0x prefix.

    Never raises on malformed input; callers that need a valid address
    check the result against ADDRESS_PATTERN.
    """
    value = value.strip().lower()
    if not value.startswith("0x"):
        value = "0x" + value
    return value


def normalize_program_id(value: str) -> str:
    """Lowercase a program id and drop an optional 0x prefix."""
    value = value.strip().lower()
    if value.startswith("0x"):
        value = value[2:]
    return value


def _decode_hex(value: str, field: str) -> bytes:
    text = value.strip()
    if text.lower().startswith("0x"):
        text = text[2:]
    try:
        return bytes.fromhex(text)
    except ValueError:
        raise ValueError(f"{field} is not valid hex: {value!r}")


class VerificationRequest(BaseModel):
    """A message together with the aggregate signature claimed over it.

    Value type: two requests are equal iff both byte fields are equal.
    Fields take raw bytes, or hex strings (optional 0x) which are decoded.
    """
    message: bytes
    signature: bytes

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("message", "signature", mode="before")
    @classmethod
    def _decode_hex_text(cls, v: Any, info: ValidationInfo) -> Any:
        if isinstance(v, str):
            return _decode_hex(v, info.field_name)
        return v

    @classmethod
    def from_hex(cls, message: str, signature: str) -> "VerificationRequest":
        """Build a request from hex strings (an optional 0x prefix is allowed)."""
        return cls(message=message, signature=signature)

    @classmethod
    def from_payload(cls, payload: bytes) -> "VerificationRequest":
        """Decode the wire payload produced by encode_payload()."""
        data = json.loads(payload)
        if not isinstance(data, dict) or set(data) != {"message", "signature"}:
            raise ValueError("payload must be an object with exactly 'message' and 'signature'")
        return cls.from_hex(data["message"], data["signature"])

    def encode_payload(self) -> bytes:
        """Canonical JSON payload carried to the computation service."""
        return canonical_bytes({
            "message": self.message.hex(),
            "signature": self.signature.hex(),
        })


class CallContext(BaseModel):
    """Provenance of an inbound callback, as reported by the host transport.

    Values are normalized but not validated: a malformed caller is an
    authorization failure, not a parse failure.
    """
    caller: str
    program_id: str

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("caller")
    @classmethod
    def _normalize_caller(cls, v: str) -> str:
        return normalize_address(v)

    @field_validator("program_id")
    @classmethod
    def _normalize_program(cls, v: str) -> str:
        return normalize_program_id(v)


class RelayRequest(BaseModel):
    """Outbound message handed to the relay for one verification."""
    program_id: str
    payload: bytes
    reply_to: str
    reply_entry_point: str
    budget: int = Field(..., gt=0)
    key: str  # correlation key, equal to the request's cache key

    model_config = ConfigDict(frozen=True, extra="forbid")

    def to_dict(self) -> dict:
        """JSON-friendly view (payload is canonical JSON text already)."""
        return {
            "program_id": self.program_id,
            "payload": self.payload.decode("utf-8"),
            "reply_to": self.reply_to,
            "reply_entry_point": self.reply_entry_point,
            "budget": self.budget,
            "key": self.key,
        }


class VerificationNotice(BaseModel):
    """Append-only record emitted after each successful ingestion."""
    sequence: int = Field(..., ge=0)
    key: str
    message: str  # hex
    signature: str  # hex
    result: bool
    outcome: Optional[str] = None  # PutOutcome value of the underlying write

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def request(self) -> VerificationRequest:
        return VerificationRequest.from_hex(self.message, self.signature)
