from __future__ import annotations

import hashlib

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from cardid.contract import IdentityContract
from cardid.integration.host import build_hash_content, build_identity_descriptor
from cardid.models import CardCredential


class DevCard:
    """
    Test-only card simulator.

    Produces 0x6A 0x05 || filler || SHA1(hash_content) || 0xBC blocks and
    signs them with the raw RSA private operation, like a payment card
    answering a dynamic authentication challenge.
    """

    def __init__(self, key_size: int = 1024) -> None:
        key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
        priv = key.private_numbers()
        self.n = priv.public_numbers.n
        self.e = priv.public_numbers.e
        self._d = priv.d
        self.size = (self.n.bit_length() + 7) // 8
        self.modulus = self.n.to_bytes(self.size, "big")
        self.exponent = self.e.to_bytes(3, "big")

    def identity(self, suffix: str = "card.test") -> str:
        return build_identity_descriptor(self.modulus, self.exponent, suffix)

    def block_for(
        self,
        hash_content: bytes,
        header: bytes = b"\x6a\x05",
        trailer: bytes = b"\xbc",
    ) -> bytes:
        digest = hashlib.sha1(hash_content).digest()
        filler = b"\xbb" * (self.size - len(header) - len(digest) - len(trailer))
        return header + filler + digest + trailer

    def sign_block(self, block: bytes) -> bytes:
        s = pow(int.from_bytes(block, "big"), self._d, self.n)
        return s.to_bytes(self.size, "big")

    def credential(
        self,
        nonce: int,
        challenge: bytes = b"txn:0001",
        *,
        block: bytes | None = None,
    ) -> CardCredential:
        hash_content = build_hash_content(challenge, nonce)
        if block is None:
            block = self.block_for(hash_content)
        return CardCredential(
            modulus=self.modulus,
            exponent=self.exponent,
            signature=self.sign_block(block),
            hash_content=hash_content,
        )


@pytest.fixture(scope="session")
def card() -> DevCard:
    return DevCard()


@pytest.fixture(scope="session")
def other_card() -> DevCard:
    return DevCard()


@pytest.fixture()
def contract() -> IdentityContract:
    return IdentityContract()
