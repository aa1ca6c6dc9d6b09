"""Tests for content-addressed key derivation."""

import hashlib

import pytest

from sigverdict.contracts import VerificationRequest
from sigverdict.kernel.key_deriver import (
    KEY_LENGTH,
    derive_key,
    encode_request,
    is_cache_key,
)


def _req(message: bytes, signature: bytes) -> VerificationRequest:
    return VerificationRequest(message=message, signature=signature)


class TestDeriveKey:
    """Tests for derive_key function."""

    def test_deterministic(self):
        assert derive_key(_req(b"abc", b"xyz")) == derive_key(_req(b"abc", b"xyz"))

    def test_fixed_width_prefixed(self):
        key = derive_key(_req(b"abc", b"xyz"))
        assert key.startswith("sha256:")
        assert len(key) == KEY_LENGTH == 71
        assert is_cache_key(key)

    def test_shifted_boundary_differs(self):
        """("ab", "c") and ("a", "bc") concatenate identically but must not collide."""
        assert derive_key(_req(b"ab", b"c")) != derive_key(_req(b"a", b"bc"))

    def test_swapped_fields_differ(self):
        assert derive_key(_req(b"abc", b"xyz")) != derive_key(_req(b"xyz", b"abc"))

    def test_empty_fields_differ(self):
        assert derive_key(_req(b"", b"abc")) != derive_key(_req(b"abc", b""))
        assert derive_key(_req(b"", b"")) != derive_key(_req(b"\x00", b""))

    def test_length_prefix_cannot_be_forged(self):
        """A message that embeds a fake length prefix still maps elsewhere."""
        forged = b"a" + (1).to_bytes(8, "big") + b"b"
        assert derive_key(_req(b"a", b"b")) != derive_key(_req(forged, b""))

    @pytest.mark.parametrize("message,signature", [
        (b"abc", b"xyz"),
        (b"", b""),
        (bytes(range(256)), b"\xff" * 96),
    ])
    def test_matches_documented_encoding(self, message, signature):
        expected = hashlib.sha256(
            len(message).to_bytes(8, "big") + message
            + len(signature).to_bytes(8, "big") + signature
        ).hexdigest()
        assert derive_key(_req(message, signature)) == f"sha256:{expected}"

    def test_hex_and_bytes_construction_agree(self):
        assert derive_key(VerificationRequest.from_hex("0x616263", "78797a")) == derive_key(_req(b"abc", b"xyz"))


class TestEncodeRequest:

    def test_layout(self):
        encoded = encode_request(_req(b"ab", b"c"))
        assert encoded == b"\x00" * 7 + b"\x02" + b"ab" + b"\x00" * 7 + b"\x01" + b"c"


@pytest.mark.parametrize("value", [
    None,
    42,
    "sha256:",
    "sha256:" + "A" * 64,
    "md5:" + "a" * 64,
    "sha256:" + "a" * 63,
])
def test_is_cache_key_rejects_malformed(value):
    assert is_cache_key(value) is False
