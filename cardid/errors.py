"""
Error taxonomy for cardid.

Every failure a contract call can produce is a subclass of CardIdError.
The `code` attribute is stable and is what callers see as the prefix of a
failed call's output, so it must never change once published.
"""

from __future__ import annotations


class CardIdError(ValueError):
    code = "CardIdError"
    default_message = "card identity error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else self.default_message

    def render(self) -> str:
        """Return the external (UTF-8 output) form of this error."""
        return f"{self.code}: {self.message}"


class IdentityFormatError(CardIdError):
    code = "IdentityFormatError"
    default_message = "identity must be '<64 hex chars>@<suffix>'"


class AlreadyRegistered(CardIdError):
    code = "AlreadyRegistered"
    default_message = "identity is already registered"


class NotFound(CardIdError):
    code = "NotFound"
    default_message = "identity is not registered"


class KeyMismatch(CardIdError):
    code = "KeyMismatch"
    default_message = "card public key does not match the claimed identity"


class VerificationFailed(CardIdError):
    # One message for every failing check: callers must not learn which step failed.
    code = "VerificationFailed"
    default_message = "card signature verification failed"


class NonceOverflow(CardIdError):
    code = "NonceOverflow"
    default_message = "identity nonce cannot advance past 2^32-1"


class CodecError(CardIdError):
    code = "CodecError"
    default_message = "malformed encoded data"
