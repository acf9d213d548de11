"""
State commitment for the identity registry.

Layout (same bytes as a Borsh-encoded BTreeMap<[u8; 32], u32>):

    u32 count
    count x ( fingerprint[32] || u32 nonce )

Entries are written in ascending fingerprint order, so two registries with
the same contents always commit to the same bytes. Decoding only accepts
that canonical form.
"""

from __future__ import annotations

import hashlib
from typing import List, Tuple

from .codec import ByteReader, ByteWriter
from .errors import CodecError
from .models import FINGERPRINT_LEN
from .registry import IdentityRegistry


def encode_registry(registry: IdentityRegistry) -> bytes:
    w = ByteWriter()
    entries = sorted(registry.items())
    w.u32(len(entries))
    for fp, nonce in entries:
        w.fixed(fp)
        w.u32(nonce)
    return w.getvalue()


def decode_registry(data: bytes) -> IdentityRegistry:
    """
    Rebuild a registry from a committed snapshot.

    Raises CodecError on truncation, trailing bytes, unsorted or duplicate
    fingerprints, or nonces outside the reachable range.
    """
    r = ByteReader(data)
    count = r.u32()
    # each entry is 36 bytes; reject impossible counts before looping
    if count * (FINGERPRINT_LEN + 4) > r.remaining:
        raise CodecError(f"registry count {count} exceeds available data")

    entries: List[Tuple[bytes, int]] = []
    previous = None
    for _ in range(count):
        fp = r.fixed(FINGERPRINT_LEN)
        nonce = r.u32()
        if previous is not None and fp <= previous:
            raise CodecError("registry fingerprints are not strictly ascending")
        if nonce == 0:
            raise CodecError("registry nonce must be >= 1")
        entries.append((fp, nonce))
        previous = fp
    r.finish()

    return IdentityRegistry(entries)


def commitment_digest(registry: IdentityRegistry) -> bytes:
    """SHA-256 over the canonical encoding."""
    return hashlib.sha256(encode_registry(registry)).digest()
