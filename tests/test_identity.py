"""
Tests for credential parsing and identities.

Test plan:
- Seed → SIGNING identity with the derived public key
- Public key → VIEW_ONLY identity plus an advisory event
- Neither → None from parse, InvalidIdentity from resolve
- Seed never shows in repr; equality ignores it
- Signing matches RFC 8032; view-only identities refuse to sign
"""

import pytest
from stellar_sdk import Keypair

from conftest import PUBLIC_A, PUBLIC_B, SEED_A, SEED_B
from stellar_account_helper.errors import InvalidIdentity
from stellar_account_helper.events import EventType, RecordingEventSink
from stellar_account_helper.identity import (
    CredentialKind,
    Identity,
    parse_credential,
    resolve_identity,
)

RFC8032_EMPTY_MESSAGE_SIGNATURE = (
    "e5564300c360ac729086e2cc806e828a84877f1eb8e5d974d873e06522490155"
    "5fb8821590a33bacc61e39701cf9b46bd25bf5f0595bbe24655141438e7a100b"
)


class TestParseCredential:
    def test_seed_is_signing(self) -> None:
        parsed = parse_credential(SEED_A)
        assert parsed is not None
        assert parsed.kind is CredentialKind.SIGNING
        assert parsed.identity.public_key == PUBLIC_A
        assert parsed.identity.can_sign

    def test_second_seed_derives_its_key(self) -> None:
        parsed = parse_credential(SEED_B)
        assert parsed is not None
        assert parsed.identity.public_key == PUBLIC_B

    def test_public_key_is_view_only(self) -> None:
        parsed = parse_credential(PUBLIC_A)
        assert parsed is not None
        assert parsed.kind is CredentialKind.VIEW_ONLY
        assert parsed.identity.public_key == PUBLIC_A
        assert not parsed.identity.can_sign

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "hello",
            SEED_A[:-1],
            PUBLIC_A + "A",
            PUBLIC_A[:-1] + ("A" if PUBLIC_A[-1] != "A" else "B"),
            "G" * 56,
        ],
    )
    def test_unrecognized(self, value: str) -> None:
        assert parse_credential(value) is None


class TestResolveIdentity:
    def test_seed_emits_nothing(self) -> None:
        sink = RecordingEventSink()
        identity = resolve_identity(SEED_A, sink)
        assert identity.can_sign
        assert sink.events == []

    def test_public_key_emits_advisory(self) -> None:
        sink = RecordingEventSink()
        identity = resolve_identity(PUBLIC_A, sink)
        assert not identity.can_sign
        assert sink.types() == [EventType.VIEW_ONLY_IDENTITY]
        assert sink.events[0].fields["account"] == PUBLIC_A

    def test_advisory_without_sink_is_silent(self) -> None:
        assert resolve_identity(PUBLIC_A).public_key == PUBLIC_A

    def test_invalid_raises(self) -> None:
        with pytest.raises(InvalidIdentity) as exc_info:
            resolve_identity("definitely-not-a-key")
        assert exc_info.value.error_code == "INVALID_IDENTITY"


class TestIdentity:
    def test_repr_hides_seed(self) -> None:
        identity = resolve_identity(SEED_A)
        assert SEED_A not in repr(identity)
        assert "seed" not in repr(identity)

    def test_equality_ignores_seed(self) -> None:
        assert resolve_identity(SEED_A) == resolve_identity(PUBLIC_A)

    def test_secret_roundtrip(self) -> None:
        assert resolve_identity(SEED_A).secret() == SEED_A

    def test_view_only_has_no_secret(self) -> None:
        with pytest.raises(ValueError):
            resolve_identity(PUBLIC_A).secret()

    def test_sign_matches_rfc8032(self) -> None:
        assert resolve_identity(SEED_A).sign(b"").hex() == RFC8032_EMPTY_MESSAGE_SIGNATURE

    def test_view_only_cannot_sign(self) -> None:
        with pytest.raises(ValueError, match="view-only"):
            resolve_identity(PUBLIC_A).sign(b"payload")

    def test_signature_hint_is_last_four_key_bytes(self) -> None:
        identity = resolve_identity(PUBLIC_A)
        assert identity.signature_hint == Keypair.from_public_key(PUBLIC_A).raw_public_key()[-4:]
        assert len(identity.signature_hint) == 4

    def test_random_identities_differ_and_can_sign(self) -> None:
        first, second = Identity.random(), Identity.random()
        assert first.can_sign and second.can_sign
        assert first.public_key != second.public_key
        assert parse_credential(first.secret()).identity.public_key == first.public_key  # type: ignore[union-attr]

    def test_keypair_hidden_from_repr(self) -> None:
        identity = Identity.random()
        assert identity.secret() not in repr(identity)
        assert "keypair" not in repr(identity)

    def test_view_only_has_no_signing_keypair(self) -> None:
        with pytest.raises(ValueError, match="view-only"):
            Identity(public_key=PUBLIC_A).signing_keypair()

    def test_public_only_keypair_cannot_sign(self) -> None:
        identity = Identity.from_keypair(Keypair.from_public_key(PUBLIC_A))
        assert not identity.can_sign
        with pytest.raises(ValueError, match="view-only"):
            identity.sign(b"payload")
