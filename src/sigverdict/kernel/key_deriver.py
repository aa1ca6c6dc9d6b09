"""Content-addressed cache keys for verification requests.

Key rules:
- Each variable-length field is length-prefixed (u64, big-endian)
- Fields are hashed in a fixed order: message, then signature
- Digest is SHA256, rendered as "sha256:" + 64 lowercase hex chars

Length prefixes make the encoding unambiguous, so ("ab", "c") and
("a", "bc") never collide the way plain concatenation would.
"""

import hashlib
import re
import struct

from sigverdict.contracts import VerificationRequest

KEY_PREFIX = "sha256:"
KEY_LENGTH = len(KEY_PREFIX) + 64
_KEY_PATTERN = re.compile(r"^sha256:[0-9a-f]{64}$")

# "sha256:" + 64 hex chars
CacheKey = str


def _length_prefixed(field: bytes) -> bytes:
    return struct.pack(">Q", len(field)) + field


def encode_request(request: VerificationRequest) -> bytes:
    """Canonical, unambiguous binary encoding of a request.

    Args:
        request: The verification request

    Returns:
        len(message) || message || len(signature) || signature
    """
    return _length_prefixed(request.message) + _length_prefixed(request.signature)


def derive_key(request: VerificationRequest) -> CacheKey:
    """Compute the cache key of a request.

    Pure and total: identical (message, signature) pairs always map to the
    same key.

    Args:
        request: The verification request

    Returns:
        SHA256 hash as hex string (prefixed with "sha256:")
    """
    digest = hashlib.sha256(encode_request(request)).hexdigest()
    return f"{KEY_PREFIX}{digest}"


def is_cache_key(value: object) -> bool:
    """Check that a value is a well-formed cache key."""
    return isinstance(value, str) and _KEY_PATTERN.match(value) is not None
