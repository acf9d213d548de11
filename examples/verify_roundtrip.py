"""
End-to-end cardid roundtrip example.

This simulates:

1. A host registering a card's public key fingerprint.
2. The card answering a challenge bound to the current nonce.
3. The contract verifying the answer, then rejecting a replay.

The card is simulated with a freshly generated RSA key. A real card keeps
its private key on the chip; only the public key and the signed challenge
ever reach the host.
"""

import hashlib

from cryptography.hazmat.primitives.asymmetric import rsa

from cardid.contract import IdentityContract
from cardid.integration.host import (
    build_hash_content,
    build_identity_descriptor,
    build_verify_input,
)
from cardid.models import Action, CardCredential


def simulate_card_answer(key: rsa.RSAPrivateKey, hash_content: bytes) -> bytes:
    priv = key.private_numbers()
    n = priv.public_numbers.n
    size = (n.bit_length() + 7) // 8
    digest = hashlib.sha1(hash_content).digest()
    block = b"\x6a\x05" + b"\xbb" * (size - 23) + digest + b"\xbc"
    s = pow(int.from_bytes(block, "big"), priv.d, n)
    return s.to_bytes(size, "big")


def main() -> None:
    key = rsa.generate_private_key(public_exponent=65537, key_size=1024)
    pub = key.public_key().public_numbers()
    modulus = pub.n.to_bytes((pub.n.bit_length() + 7) // 8, "big")
    exponent = pub.e.to_bytes(3, "big")

    identity = build_identity_descriptor(modulus, exponent, "demo.card")
    contract = IdentityContract()

    # 1. Register
    result = contract.execute(Action.REGISTER_IDENTITY, identity)
    print(result.output)

    # 2. Card signs challenge || nonce(1)
    hash_content = build_hash_content(b"login:demo", 1)
    credential = CardCredential(
        modulus=modulus,
        exponent=exponent,
        signature=simulate_card_answer(key, hash_content),
        hash_content=hash_content,
    )
    blob = build_verify_input(credential)

    # 3. Verify, then replay
    result = contract.execute(Action.VERIFY_IDENTITY, identity, blob)
    print(result.output)

    replay = contract.execute(Action.VERIFY_IDENTITY, identity, blob)
    print(replay.output)
    print("state unchanged by replay:", replay.state == result.state)
    print("state commitment:", result.state.hex())


if __name__ == "__main__":
    main()
