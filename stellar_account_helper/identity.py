"""
Account identities and credential parsing.

A credential string is either a secret seed (``S...``), which yields an
identity that can sign, or a public key (``G...``), which yields a
view-only identity. Classification returns a tagged result instead of
raising on the first format that does not match.

The seed never leaves this module in readable form: the keypair is
excluded from ``repr`` and equality, and signing happens through
``Identity.signing_keypair``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from stellar_sdk import Keypair, StrKey

from stellar_account_helper.errors import InvalidIdentity
from stellar_account_helper.events import EventSink, EventType, emit


class CredentialKind(StrEnum):
    SIGNING = "SIGNING"
    VIEW_ONLY = "VIEW_ONLY"


@dataclass(frozen=True)
class Identity:
    """A Stellar account identity.

    Attributes:
        public_key: ``G...`` strkey of the account.
        keypair: Keypair holding the secret seed, or None for a view-only
            identity.
    """

    public_key: str
    keypair: Keypair | None = field(default=None, repr=False, compare=False)

    @property
    def can_sign(self) -> bool:
        return self.keypair is not None and self.keypair.can_sign()

    @property
    def signature_hint(self) -> bytes:
        """Last four bytes of the public key, as used in decorated signatures."""
        return Keypair.from_public_key(self.public_key).signature_hint()

    def secret(self) -> str:
        """The ``S...`` strkey of the seed."""
        return self.signing_keypair().secret

    def signing_keypair(self) -> Keypair:
        """The keypair to sign with.

        Raises:
            ValueError: If the identity is view-only.
        """
        if self.keypair is None or not self.keypair.can_sign():
            raise ValueError(f"{self.public_key} is view-only and cannot sign")
        return self.keypair

    def sign(self, data: bytes) -> bytes:
        """Ed25519-sign ``data`` with this identity's seed."""
        return self.signing_keypair().sign(data)

    @classmethod
    def from_keypair(cls, keypair: Keypair) -> "Identity":
        return cls(public_key=keypair.public_key, keypair=keypair)

    @classmethod
    def random(cls) -> "Identity":
        """A fresh signing identity with no ledger presence."""
        return cls.from_keypair(Keypair.random())


@dataclass(frozen=True)
class ParsedCredential:
    kind: CredentialKind
    identity: Identity


def parse_credential(value: str) -> ParsedCredential | None:
    """Classify a credential string.

    Tried as a secret seed first, then as a public key.

    Returns:
        ParsedCredential, or None when the string is neither.
    """
    if StrKey.is_valid_ed25519_secret_seed(value):
        return ParsedCredential(
            CredentialKind.SIGNING, Identity.from_keypair(Keypair.from_secret(value))
        )

    if StrKey.is_valid_ed25519_public_key(value):
        return ParsedCredential(CredentialKind.VIEW_ONLY, Identity(public_key=value))

    return None


def resolve_identity(value: str, sink: EventSink | None = None) -> Identity:
    """Turn a credential string into an Identity.

    A view-only result emits a ``VIEW_ONLY_IDENTITY`` advisory: funds sent
    to the account cannot be moved without the matching secret.

    Raises:
        InvalidIdentity: If the string is neither a seed nor a public key.
    """
    parsed = parse_credential(value)
    if parsed is None:
        raise InvalidIdentity("`id` must be a valid account ID or secret.")

    if parsed.kind is CredentialKind.VIEW_ONLY:
        emit(
            sink,
            EventType.VIEW_ONLY_IDENTITY,
            "Only a public key was provided. Make sure you have access to the "
            "secret if you want to access funds sent to this account.",
            account=parsed.identity.public_key,
        )
    return parsed.identity
