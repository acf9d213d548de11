from __future__ import annotations

from ..codec import encode_credential
from ..crypto import NONCE_LEN, compute_key_hash
from ..identity import fingerprint_hex
from ..models import NONCE_MAX, CardCredential


def build_identity_descriptor(modulus: bytes, exponent: bytes, suffix: str) -> str:
    """
    Build the caller identity for a card public key.

    Returns "<hex(key fingerprint)>@<suffix>".
    """
    if not isinstance(suffix, str) or not suffix:
        raise ValueError("identity suffix must be a non-empty string")
    if "@" in suffix:
        raise ValueError("identity suffix must not contain '@'")
    return f"{fingerprint_hex(compute_key_hash(modulus, exponent))}@{suffix}"


def build_hash_content(challenge: bytes, nonce: int) -> bytes:
    """
    Challenge bytes followed by the big-endian u32 nonce.

    This is the exact byte string the card must sign for the call that
    consumes `nonce`.
    """
    if not isinstance(nonce, int) or isinstance(nonce, bool) or not 0 <= nonce <= NONCE_MAX:
        raise ValueError("nonce must fit in u32")
    return bytes(challenge) + nonce.to_bytes(NONCE_LEN, "big")


def build_verify_input(credential: CardCredential) -> bytes:
    """Private input for IdentityContract.execute(VerifyIdentity, ...)."""
    return encode_credential(credential)
