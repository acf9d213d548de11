"""
Core data models for cardid.

- action tags accepted by the contract
- the transient card credential supplied with a verification call
- fixed sizes and limits shared by every layer
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


FINGERPRINT_LEN = 32
NONCE_MAX = 0xFFFFFFFF
INITIAL_NONCE = 1

# Lengths are serialized as big-endian u32 inside the key hash preimage.
LENGTH_PREFIX_MAX = 0xFFFFFFFF


class Action(str, Enum):
    REGISTER_IDENTITY = "RegisterIdentity"
    VERIFY_IDENTITY = "VerifyIdentity"


@dataclass(frozen=True)
class CardCredential:
    """
    Card material presented for one verification call.

    All four fields are raw bytes exactly as read from the card / terminal:

    - modulus, exponent: big-endian unsigned RSA public key components
    - signature: recoverable signature, same length as the modulus
    - hash_content: challenge bytes whose SHA-1 digest is embedded in the
      signature; the last 4 bytes are the big-endian nonce being consumed

    Never persisted.
    """
    modulus: bytes
    exponent: bytes
    signature: bytes
    hash_content: bytes

    def __repr__(self) -> str:
        return (
            "CardCredential("
            f"modulus=<{len(self.modulus)} bytes>, "
            f"exponent=<{len(self.exponent)} bytes>, "
            f"signature=<{len(self.signature)} bytes>, "
            f"hash_content=<{len(self.hash_content)} bytes>)"
        )
