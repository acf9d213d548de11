"""
Caller identity descriptors.

Format:
    <64 hex chars>@<opaque suffix>

Only the hex segment carries meaning: it is the claimed key fingerprint.
The suffix is ignored by the contract.
"""

from __future__ import annotations

import binascii

from .errors import IdentityFormatError
from .models import FINGERPRINT_LEN


def parse_identity(descriptor: str) -> bytes:
    """
    Decode the claimed fingerprint from an identity descriptor.

    Strict hex only: no whitespace, no 0x prefix, ASCII only.
    Raises IdentityFormatError on any deviation.
    """
    if not isinstance(descriptor, str):
        raise IdentityFormatError("identity must be a string")

    head = descriptor.split("@", 1)[0]
    try:
        fingerprint = binascii.unhexlify(head)
    except (binascii.Error, ValueError):
        raise IdentityFormatError("identity prefix is not valid hex") from None

    if len(fingerprint) != FINGERPRINT_LEN:
        raise IdentityFormatError(
            f"identity prefix must decode to {FINGERPRINT_LEN} bytes, got {len(fingerprint)}"
        )
    return fingerprint


def fingerprint_hex(fingerprint: bytes) -> str:
    return binascii.hexlify(fingerprint).decode("ascii")
