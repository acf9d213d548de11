"""
Identity registry: key fingerprint -> nonce.

The registry is an immutable snapshot. Operations that change it return a
new IdentityRegistry and leave the receiver untouched.

Iteration is always in ascending fingerprint byte order, whatever order the
entries were inserted in.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union

from .errors import AlreadyRegistered, NonceOverflow, NotFound
from .models import FINGERPRINT_LEN, INITIAL_NONCE, NONCE_MAX


Entries = Union[Mapping[bytes, int], Iterable[Tuple[bytes, int]]]


def _check_fingerprint(fp: Any) -> bytes:
    if not isinstance(fp, (bytes, bytearray)):
        raise TypeError("fingerprint must be bytes")
    if len(fp) != FINGERPRINT_LEN:
        raise ValueError(f"fingerprint must be {FINGERPRINT_LEN} bytes")
    return bytes(fp)


def _check_nonce(nonce: Any) -> int:
    if not isinstance(nonce, int) or isinstance(nonce, bool):
        raise TypeError("nonce must be an int")
    if not INITIAL_NONCE <= nonce <= NONCE_MAX:
        raise ValueError(f"nonce must be in [{INITIAL_NONCE}, {NONCE_MAX}]")
    return nonce


class IdentityRegistry:
    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[Entries] = None) -> None:
        items: Iterable[Tuple[bytes, int]]
        if entries is None:
            items = ()
        elif isinstance(entries, Mapping):
            items = entries.items()
        else:
            items = entries

        table: Dict[bytes, int] = {}
        for fp, nonce in items:
            key = _check_fingerprint(fp)
            if key in table:
                raise ValueError("duplicate fingerprint in registry entries")
            table[key] = _check_nonce(nonce)
        self._entries = {k: table[k] for k in sorted(table)}

    # -- read side ----------------------------------------------------------

    def __contains__(self, fp: object) -> bool:
        return isinstance(fp, (bytes, bytearray)) and bytes(fp) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IdentityRegistry):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(tuple(self._entries.items()))

    def __repr__(self) -> str:
        return f"IdentityRegistry({len(self._entries)} identities)"

    def get(self, fp: bytes) -> Optional[int]:
        return self._entries.get(bytes(fp))

    def nonce_of(self, fp: bytes) -> int:
        nonce = self.get(fp)
        if nonce is None:
            raise NotFound()
        return nonce

    def items(self) -> Tuple[Tuple[bytes, int], ...]:
        return tuple(self._entries.items())

    # -- transitions (return new snapshots) ---------------------------------

    def register(self, fp: bytes) -> "IdentityRegistry":
        key = _check_fingerprint(fp)
        if key in self._entries:
            raise AlreadyRegistered()
        updated = dict(self._entries)
        updated[key] = INITIAL_NONCE
        return IdentityRegistry(updated)

    def advance(self, fp: bytes) -> "IdentityRegistry":
        key = _check_fingerprint(fp)
        current = self.nonce_of(key)
        if current >= NONCE_MAX:
            raise NonceOverflow()
        updated = dict(self._entries)
        updated[key] = current + 1
        return IdentityRegistry(updated)
