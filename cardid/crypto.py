"""
Card verification engine for cardid.

Smart cards used for dynamic authentication answer a challenge with an
ISO/IEC 9796-2 scheme-1 style recoverable RSA signature. The signature
itself carries the SHA-1 digest of the challenge ("hash content"), so the
verifier only needs the public key and the challenge bytes:

    recovered = signature ^ e mod n
    recovered = 0x6A 0x05 ... SHA1(hash_content) 0xBC

The last four bytes of the hash content are the identity nonce the card
signed for. Binding the nonce into the signed digest is what makes every
signature single-use.

Only the public-key direction is implemented here; the package has no
signing or decryption helper.
"""

from __future__ import annotations

import hashlib
from typing import Optional

from cryptography.hazmat.primitives.asymmetric import rsa

from .errors import VerificationFailed
from .models import LENGTH_PREFIX_MAX, NONCE_MAX, CardCredential


# ---------------------------------------------------------------------------
# Recoverable signature block layout
# ---------------------------------------------------------------------------

BLOCK_HEADER = b"\x6a\x05"
BLOCK_TRAILER = 0xBC
DIGEST_LEN = 20  # SHA-1
NONCE_LEN = 4

# header + digest + trailer must fit without overlapping
MIN_BLOCK_LEN = len(BLOCK_HEADER) + DIGEST_LEN + 1


# ---------------------------------------------------------------------------
# Key fingerprint
# ---------------------------------------------------------------------------


def _length_prefix(data: bytes) -> bytes:
    if len(data) > LENGTH_PREFIX_MAX:
        raise ValueError("key component too long for a u32 length prefix")
    return len(data).to_bytes(4, "big")


def compute_key_hash(modulus: bytes, exponent: bytes) -> bytes:
    """
    Fingerprint of an RSA public key.

    fingerprint = SHA256( be32(len(n)) || n || be32(len(e)) || e )

    The length prefixes keep (n, e) pairs unambiguous: moving bytes from the
    end of the modulus to the start of the exponent changes the preimage.
    Empty components are allowed here; they simply never verify.
    """
    h = hashlib.sha256()
    h.update(_length_prefix(modulus))
    h.update(modulus)
    h.update(_length_prefix(exponent))
    h.update(exponent)
    return h.digest()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _positive_int(raw: bytes) -> Optional[int]:
    if not isinstance(raw, (bytes, bytearray)) or not raw:
        return None
    value = int.from_bytes(raw, "big")
    if value <= 0:
        return None
    return value


def _load_public_key(modulus: bytes, exponent: bytes) -> Optional[rsa.RSAPublicKey]:
    n = _positive_int(modulus)
    e = _positive_int(exponent)
    if n is None or e is None:
        return None
    try:
        return rsa.RSAPublicNumbers(e, n).public_key()
    except (ValueError, TypeError):
        return None


def _public_transform(key: rsa.RSAPublicKey, signature: bytes) -> Optional[bytes]:
    """
    Raw RSA public operation (s^e mod n), no padding handling.

    Returns the minimal big-endian encoding of the result, or None when the
    signature is not a valid representative (s >= n).
    """
    numbers = key.public_numbers()
    s = int.from_bytes(signature, "big")
    if s >= numbers.n:
        return None
    m = pow(s, numbers.e, numbers.n)
    return m.to_bytes((m.bit_length() + 7) // 8, "big")


def _hash_content_nonce(hash_content: bytes) -> Optional[int]:
    if len(hash_content) < NONCE_LEN:
        return None
    return int.from_bytes(hash_content[-NONCE_LEN:], "big")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def card_signature_valid(credential: CardCredential, expected_nonce: int) -> bool:
    """
    Check a card credential against the nonce the registry expects.

    Returns True only when every check passes:

    1. (n, e) form a valid RSA public key
    2. signature length matches the modulus bit length
    3. raw public transform succeeds
    4. recovered block length matches the modulus bit length
    5. trailer byte is 0xBC
    6. header is 0x6A 0x05 (SHA-1, scheme 1)
    7-8. the 20 bytes before the trailer equal SHA1(hash_content)
    9. last 4 bytes of hash_content (big-endian) equal expected_nonce

    Fail-closed: malformed input of any kind returns False, never raises.
    """
    try:
        if not isinstance(expected_nonce, int) or isinstance(expected_nonce, bool):
            return False
        if not 0 <= expected_nonce <= NONCE_MAX:
            return False

        key = _load_public_key(credential.modulus, credential.exponent)
        if key is None:
            return False
        modulus_bits = key.key_size

        signature = bytes(credential.signature)
        if len(signature) * 8 != modulus_bits:
            return False

        block = _public_transform(key, signature)
        if block is None:
            return False
        if len(block) * 8 != modulus_bits:
            return False
        if len(block) < MIN_BLOCK_LEN:
            return False

        if block[-1] != BLOCK_TRAILER:
            return False
        if block[: len(BLOCK_HEADER)] != BLOCK_HEADER:
            return False

        hash_content = bytes(credential.hash_content)
        digest = hashlib.sha1(hash_content).digest()
        if block[-1 - DIGEST_LEN : -1] != digest:
            return False

        return _hash_content_nonce(hash_content) == expected_nonce
    except Exception:
        return False


def verify_card(credential: CardCredential, expected_nonce: int) -> None:
    """
    Raise VerificationFailed unless card_signature_valid() holds.

    The raised error is identical for every failing check.
    """
    if not card_signature_valid(credential, expected_nonce):
        raise VerificationFailed()
