"""
Identity registry contract.

Two actions:

- RegisterIdentity(identity)
    bind a key fingerprint to nonce 1 (single-shot per fingerprint)

- VerifyIdentity(identity, credential)
    check a card signature against the stored nonce and advance it

Each call is one atomic transition. The registry is replaced only after
every check for the call has passed; on failure the committed state is
byte-identical to the state before the call.

Entry points:
- register_identity(...) / verify_identity(...): raise CardIdError subclasses
- execute(...): never raises for bad input, returns a RunResult
- commit() / IdentityContract.from_commitment(...): state snapshots
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .codec import decode_credential
from .commitment import decode_registry, encode_registry
from .crypto import compute_key_hash, verify_card
from .errors import CardIdError, CodecError, KeyMismatch, VerificationFailed
from .identity import fingerprint_hex, parse_identity
from .logger import get_logger
from .models import Action, CardCredential
from .registry import IdentityRegistry


def _log():
    return get_logger("cardid.contract")


@dataclass(frozen=True)
class RunResult:
    """Outcome of one contract call: status, UTF-8 message, committed state."""
    success: bool
    output: str
    state: bytes

    @property
    def output_bytes(self) -> bytes:
        return self.output.encode("utf-8")


class IdentityContract:
    def __init__(self, registry: Optional[IdentityRegistry] = None) -> None:
        self._registry = registry if registry is not None else IdentityRegistry()

    @classmethod
    def from_commitment(cls, data: bytes) -> "IdentityContract":
        return cls(decode_registry(data))

    @property
    def registry(self) -> IdentityRegistry:
        return self._registry

    def commit(self) -> bytes:
        return encode_registry(self._registry)

    # -----------------------------------------------------------------------
    # Actions
    # -----------------------------------------------------------------------

    def register_identity(self, identity: str) -> str:
        fingerprint = parse_identity(identity)
        updated = self._registry.register(fingerprint)

        self._registry = updated
        fp_hex = fingerprint_hex(fingerprint)
        _log().info("registered identity %s", fp_hex)
        return f"Registered identity {fp_hex}"

    def verify_identity(self, identity: str, credential: CardCredential) -> str:
        """
        Verify a card credential for a registered identity.

        Order of checks: identity format, registration, key fingerprint,
        card signature (bound to the current nonce), nonce headroom.
        """
        fingerprint = parse_identity(identity)
        expected_nonce = self._registry.nonce_of(fingerprint)

        fields = (credential.modulus, credential.exponent, credential.signature, credential.hash_content)
        if not all(isinstance(f, (bytes, bytearray)) for f in fields):
            raise VerificationFailed()

        if compute_key_hash(credential.modulus, credential.exponent) != fingerprint:
            raise KeyMismatch()

        verify_card(credential, expected_nonce)
        updated = self._registry.advance(fingerprint)

        self._registry = updated
        new_nonce = updated.nonce_of(fingerprint)
        fp_hex = fingerprint_hex(fingerprint)
        _log().info("verified identity %s nonce=%d", fp_hex, new_nonce)
        return f"Verified identity {fp_hex}; nonce is now {new_nonce}"

    # -----------------------------------------------------------------------
    # Single-call entry point
    # -----------------------------------------------------------------------

    def execute(
        self,
        action: Union[Action, str],
        identity: str,
        private_input: bytes = b"",
    ) -> RunResult:
        """
        Run one action and return (success, output, state).

        On failure `state` is the commitment from before the call.
        """
        before = self.commit()
        try:
            output = self._dispatch(action, identity, private_input)
        except CardIdError as exc:
            _log().debug("call rejected: %s", exc.code)
            return RunResult(success=False, output=exc.render(), state=before)
        return RunResult(success=True, output=output, state=self.commit())

    def _dispatch(self, action: Union[Action, str], identity: str, private_input: bytes) -> str:
        try:
            act = Action(action)
        except ValueError:
            raise CardIdError(f"unsupported action: {action!r}") from None

        if act is Action.REGISTER_IDENTITY:
            return self.register_identity(identity)

        # identity and registration errors take precedence over a bad card blob
        self._registry.nonce_of(parse_identity(identity))
        # The card blob is attacker-controlled: decode problems are reported
        # as a failed verification, not as a codec detail.
        try:
            credential = decode_credential(private_input)
        except CodecError:
            raise VerificationFailed() from None
        return self.verify_identity(identity, credential)
