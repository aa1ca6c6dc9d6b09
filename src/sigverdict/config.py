"""Process configuration: who may call back, and with which program."""

import json
from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sigverdict.contracts import (
    ADDRESS_PATTERN,
    PROGRAM_ID_PATTERN,
    normalize_address,
    normalize_program_id,
)

DEFAULT_CALLBACK_BUDGET = 50_000
MAX_CALLBACK_BUDGET = 10_000_000
DEFAULT_ENTRY_POINT = "ingest"


class VerifierConfig(BaseModel):
    """Immutable configuration bound at construction time."""
    relay_address: str = Field(..., description="Address of the only relay allowed to deliver callbacks")
    program_id: str = Field(..., description="Trusted program identity (32 bytes, hex)")
    self_address: str = Field(..., description="Address the relay replies to")
    callback_entry_point: str = DEFAULT_ENTRY_POINT
    callback_budget: int = Field(
        DEFAULT_CALLBACK_BUDGET,
        gt=0,
        le=MAX_CALLBACK_BUDGET,
        description="Cost ceiling attached to every dispatched request"
    )

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("relay_address", "self_address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Validate address is 0x + 40 hex chars; normalize to lowercase."""
        normalized = normalize_address(v)
        if not ADDRESS_PATTERN.match(normalized):
            raise ValueError(f"address must be 0x followed by 40 hex characters, got '{v}'")
        return normalized

    @field_validator("program_id")
    @classmethod
    def validate_program_id(cls, v: str) -> str:
        """Validate program id is 64 hex chars (optional 0x); normalize to lowercase."""
        normalized = normalize_program_id(v)
        if not PROGRAM_ID_PATTERN.match(normalized):
            raise ValueError(
                f"program_id must be 64 hex characters, got '{v}' (length: {len(normalized)})"
            )
        return normalized

    @field_validator("callback_entry_point")
    @classmethod
    def validate_entry_point(cls, v: str) -> str:
        if not v.isidentifier():
            raise ValueError(f"callback_entry_point must be an identifier, got '{v}'")
        return v

    @classmethod
    def from_json_bytes(cls, data: bytes) -> "VerifierConfig":
        """Load configuration from JSON bytes (pure, no I/O)."""
        payload = json.loads(data)
        return cls(**payload)


def load_config_from_path(path: Union[str, Path]) -> VerifierConfig:
    """Load configuration from a JSON file path."""
    return VerifierConfig.from_json_bytes(Path(path).read_bytes())
