"""
Fixture Payload Module

Random payload generation for fixture jobs. The payload only needs to be
non-trivial in size and content; it is never used as key material.
"""

import logging
import random
import secrets
from typing import Optional

logger = logging.getLogger(__name__)


class EntropyError(Exception):
    """Raised when random payload bytes cannot be produced."""
    pass


def generate_payload(length: int, rng: Optional[random.Random] = None) -> bytes:
    """
    Generate exactly ``length`` random bytes.

    Args:
        length: Number of bytes, must be positive
        rng: Seeded generator for reproducible payloads; the OS entropy
            source is used when omitted

    Returns:
        Random bytes of the requested length
    """
    if length <= 0:
        raise ValueError(f"Payload length must be positive, got {length}")

    if rng is not None:
        return rng.randbytes(length)

    try:
        return secrets.token_bytes(length)
    except (NotImplementedError, OSError) as e:
        raise EntropyError(f"Entropy source unavailable: {e}") from e


def encode_payload(data: bytes) -> bytes:
    """Hex-encode payload bytes so they can be piped as plain ASCII."""
    return data.hex().encode("ascii")
