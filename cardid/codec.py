"""
Binary codec for cardid.

Borsh-compatible primitives:

- u32: 4 bytes little-endian
- fixed(n): n raw bytes
- vec: u32 length followed by that many bytes

Decoding never trusts a length prefix further than the bytes actually
present, and every decode must consume its input exactly.
"""

from __future__ import annotations

from typing import List

from .errors import CodecError
from .models import CardCredential


U32_MAX = 0xFFFFFFFF


class ByteWriter:
    def __init__(self) -> None:
        self._parts: List[bytes] = []

    def u32(self, value: int) -> "ByteWriter":
        if not isinstance(value, int) or not 0 <= value <= U32_MAX:
            raise CodecError("u32 out of range")
        self._parts.append(value.to_bytes(4, "little"))
        return self

    def fixed(self, data: bytes) -> "ByteWriter":
        self._parts.append(bytes(data))
        return self

    def vec(self, data: bytes) -> "ByteWriter":
        self.u32(len(data))
        return self.fixed(data)

    def getvalue(self) -> bytes:
        return b"".join(self._parts)


class ByteReader:
    def __init__(self, data: bytes) -> None:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise CodecError("encoded data must be bytes")
        self._buf = bytes(data)
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._buf) - self._pos

    def fixed(self, size: int) -> bytes:
        if size < 0 or size > self.remaining:
            raise CodecError(f"unexpected end of data (need {size}, have {self.remaining})")
        out = self._buf[self._pos : self._pos + size]
        self._pos += size
        return out

    def u32(self) -> int:
        return int.from_bytes(self.fixed(4), "little")

    def vec(self) -> bytes:
        return self.fixed(self.u32())

    def finish(self) -> None:
        if self.remaining:
            raise CodecError(f"{self.remaining} trailing bytes")


# ---------------------------------------------------------------------------
# Card credential (private input of a verification call)
# ---------------------------------------------------------------------------


def encode_credential(credential: CardCredential) -> bytes:
    return (
        ByteWriter()
        .vec(credential.modulus)
        .vec(credential.exponent)
        .vec(credential.signature)
        .vec(credential.hash_content)
        .getvalue()
    )


def decode_credential(data: bytes) -> CardCredential:
    """
    Decode a credential blob.

    Raises CodecError on truncated, oversized or trailing input.
    """
    r = ByteReader(data)
    credential = CardCredential(
        modulus=r.vec(),
        exponent=r.vec(),
        signature=r.vec(),
        hash_content=r.vec(),
    )
    r.finish()
    return credential
