from __future__ import annotations

import hashlib
import random

import pytest

from cardid.commitment import commitment_digest, decode_registry, encode_registry
from cardid.errors import CodecError
from cardid.registry import IdentityRegistry


A = b"\x01" * 32
B = b"\x02" * 32


def _registry(fps, nonces=None) -> IdentityRegistry:
    r = IdentityRegistry()
    for fp in fps:
        r = r.register(fp)
    for fp, n in (nonces or {}).items():
        for _ in range(n - 1):
            r = r.advance(fp)
    return r


def test_empty_registry_encoding() -> None:
    assert encode_registry(IdentityRegistry()) == b"\x00\x00\x00\x00"
    assert decode_registry(b"\x00\x00\x00\x00") == IdentityRegistry()


def test_layout_is_count_then_sorted_entries() -> None:
    r = _registry([B, A], {B: 3})
    expected = (
        b"\x02\x00\x00\x00"
        + A + b"\x01\x00\x00\x00"
        + B + b"\x03\x00\x00\x00"
    )
    assert encode_registry(r) == expected


@pytest.mark.parametrize("size", [0, 1, 2, 25])
def test_roundtrip_with_arbitrary_insertion_order(size: int) -> None:
    rng = random.Random(size)
    fps = [bytes(rng.getrandbits(8) for _ in range(32)) for _ in range(size)]
    r = _registry(fps, {fp: rng.randint(1, 5) for fp in fps})
    shuffled = list(fps)
    rng.shuffle(shuffled)
    r2 = IdentityRegistry({fp: r.nonce_of(fp) for fp in shuffled})

    assert decode_registry(encode_registry(r)) == r
    assert encode_registry(r) == encode_registry(r2)


def test_commitment_digest_is_sha256_of_encoding() -> None:
    r = _registry([A, B])
    assert commitment_digest(r) == hashlib.sha256(encode_registry(r)).digest()


def _entry(fp: bytes, nonce: int) -> bytes:
    return fp + nonce.to_bytes(4, "little")


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"\x01\x00\x00",
        b"\x01\x00\x00\x00",                                  # count without entry
        b"\x01\x00\x00\x00" + A,                              # missing nonce
        b"\x00\x00\x00\x00\x00",                              # trailing byte
        b"\x01\x00\x00\x00" + _entry(A, 1) + b"\x00",         # trailing byte
        b"\x02\x00\x00\x00" + _entry(B, 1) + _entry(A, 1),    # unsorted
        b"\x02\x00\x00\x00" + _entry(A, 1) + _entry(A, 2),    # duplicate
        b"\x01\x00\x00\x00" + _entry(A, 0),                   # zero nonce
        b"\xff\xff\xff\xff" + _entry(A, 1),                   # hostile count
    ],
)
def test_decode_rejects_malformed(data: bytes) -> None:
    with pytest.raises(CodecError):
        decode_registry(data)


def test_decode_rejects_non_bytes() -> None:
    with pytest.raises(CodecError):
        decode_registry("00000000")  # type: ignore[arg-type]
