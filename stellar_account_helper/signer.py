"""
Transaction signing: the secrets boundary.

Turns an unsigned FundingTransaction into a stellar-sdk
``TransactionEnvelope``, signs it with every required identity, and
returns the base64 envelope ready for submission. Seeds stay inside
``Identity``; only signatures and public hints come out.
"""

from __future__ import annotations

from dataclasses import dataclass

from stellar_sdk import (
    Account,
    BeginSponsoringFutureReserves,
    CreateAccount,
    EndSponsoringFutureReserves,
    SetOptions,
    Signer,
    TransactionBuilder,
    TransactionEnvelope,
)

from stellar_account_helper import tx as recipe
from stellar_account_helper.networks import NetworkProfile


@dataclass(frozen=True)
class SignResult:
    """Result of signing a transaction.

    Attributes:
        envelope_xdr: Base64 TransactionEnvelope, ready for submission.
        tx_hash: Hex transaction hash (network-specific).
        signer_keys: Public keys that signed, in order. Safe to log.
    """

    envelope_xdr: str
    tx_hash: str
    signer_keys: tuple[str, ...]


def _to_sdk_operation(op: recipe.Operation):  # type: ignore[no-untyped-def]
    if isinstance(op, recipe.BeginSponsoringFutureReserves):
        return BeginSponsoringFutureReserves(sponsored_id=op.sponsored_id, source=op.source)
    if isinstance(op, recipe.CreateAccount):
        return CreateAccount(
            destination=op.destination,
            starting_balance=op.starting_balance,
            source=op.source,
        )
    if isinstance(op, recipe.SetOptions):
        return SetOptions(
            signer=Signer.ed25519_public_key(op.signer_key, op.signer_weight),
            source=op.source,
        )
    if isinstance(op, recipe.EndSponsoringFutureReserves):
        return EndSponsoringFutureReserves(source=op.source)
    raise TypeError(f"unsupported operation: {type(op).__name__}")


def build_envelope(tx: recipe.FundingTransaction, network: NetworkProfile) -> TransactionEnvelope:
    """Build the unsigned envelope for ``tx``.

    Raises:
        ValueError: If the memo does not fit a text memo.
    """
    if len(tx.memo.encode("utf-8")) > recipe.MAX_MEMO_BYTES:
        raise ValueError(f"memo exceeds {recipe.MAX_MEMO_BYTES} bytes: {tx.memo!r}")

    # The builder bumps the account sequence by one when it builds.
    source = Account(tx.source, tx.sequence - 1)
    builder = TransactionBuilder(
        source_account=source,
        network_passphrase=network.passphrase,
        base_fee=tx.fee // len(tx.operations),
    )
    builder.add_text_memo(tx.memo)
    builder.add_time_bounds(*tx.time_bounds)
    for op in tx.operations:
        builder.append_operation(_to_sdk_operation(op))
    return builder.build()


def sign_transaction(tx: recipe.FundingTransaction, network: NetworkProfile) -> SignResult:
    """Sign ``tx`` with all of its required signers.

    Raises:
        ValueError: If any required signer is view-only.
    """
    envelope = build_envelope(tx, network)
    for identity in tx.signers:
        envelope.sign(identity.signing_keypair())

    return SignResult(
        envelope_xdr=envelope.to_xdr(),
        tx_hash=envelope.hash_hex(),
        signer_keys=tuple(identity.public_key for identity in tx.signers),
    )
