"""Pytest configuration for tests.

No sys.path hacks - tests should import from installed sigverdict package.
"""

import json

import pytest

from sigverdict.config import VerifierConfig
from sigverdict.contracts import CallContext, VerificationRequest

RELAY = "0x" + "11" * 20
SELF = "0x" + "22" * 20
OTHER = "0x" + "33" * 20
PROGRAM = "ab" * 32
OTHER_PROGRAM = "cd" * 32


@pytest.fixture
def config():
    return VerifierConfig(relay_address=RELAY, program_id=PROGRAM, self_address=SELF)


@pytest.fixture
def relay_context():
    """Call context of a genuine callback from the configured relay."""
    return CallContext(caller=RELAY, program_id=PROGRAM)


@pytest.fixture
def request_abc():
    return VerificationRequest(message=b"abc", signature=b"xyz")


@pytest.fixture
def config_path(tmp_path, config):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config.model_dump(), indent=2), encoding="utf-8")
    return path
