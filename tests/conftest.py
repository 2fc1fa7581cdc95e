"""
Shared test fixtures: known keys, an envelope reader, and an in-memory
ledger that applies funding transactions the way the network would.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

import pytest
from stellar_sdk import (
    BeginSponsoringFutureReserves,
    CreateAccount,
    EndSponsoringFutureReserves,
    Keypair,
    SetOptions,
    TransactionEnvelope,
)
from stellar_sdk.exceptions import BadSignatureError

from stellar_account_helper.client import AccountSnapshot, BootstrapResult, SubmitResult
from stellar_account_helper.networks import TESTNET, NetworkProfile

# ---------------------------------------------------------------------------
# Known keys (RFC 8032 test vectors 1 and 2, strkey-encoded)
# ---------------------------------------------------------------------------

SEED_A = "SCOWDMM5576VUYF2QRFPJEXMFTCEISOFNF5TE2IZOA52YAY4VZ7WBQNO"
PUBLIC_A = "GDLVVGABQKYQVN6VJP7NHSLEA45A5YLS6PNKMIZFV4BBU2HXA5IRVHUR"
SEED_B = "SBGM2CE3FD7ZNWU5W3BUN3ARJYHVXCRRT422XJRE3KGPN3KPXCTPXJAU"
PUBLIC_B = "GA6UAF6D5BBYSWUSW4FKOTI3P26JZGBMZ4XMJFUMYDGVL4JK6RTAZGXX"

FRIENDBOT_AMOUNT = Decimal("10000")


# ---------------------------------------------------------------------------
# Envelope reader
# ---------------------------------------------------------------------------


@dataclass
class DecodedEnvelope:
    source: str
    fee: int
    sequence: int
    time_bounds: tuple[int, int]
    memo: str
    operations: list[dict[str, Any]]
    signatures: list[tuple[bytes, bytes]]
    envelope_xdr: str

    def op_types(self) -> list[str]:
        return [op["type"] for op in self.operations]


def _describe(op: Any) -> dict[str, Any]:
    described: dict[str, Any] = {"source": op.source.account_id if op.source else None}
    if isinstance(op, CreateAccount):
        described.update(
            type="create_account",
            destination=op.destination,
            starting_balance=Decimal(str(op.starting_balance)),
        )
    elif isinstance(op, SetOptions):
        described.update(
            type="set_options",
            signer=op.signer.signer_key.encoded_signer_key,
            weight=op.signer.weight,
        )
    elif isinstance(op, BeginSponsoringFutureReserves):
        described.update(type="begin_sponsoring", sponsored_id=op.sponsored_id)
    elif isinstance(op, EndSponsoringFutureReserves):
        described.update(type="end_sponsoring")
    else:
        raise AssertionError(f"unexpected operation {type(op).__name__}")
    return described


def decode_envelope(envelope_xdr: str, network: NetworkProfile = TESTNET) -> DecodedEnvelope:
    envelope = TransactionEnvelope.from_xdr(envelope_xdr, network.passphrase)
    tx = envelope.transaction
    time_bounds = tx.preconditions.time_bounds
    return DecodedEnvelope(
        source=tx.source.account_id,
        fee=tx.fee,
        sequence=tx.sequence,
        time_bounds=(time_bounds.min_time, time_bounds.max_time),
        memo=tx.memo.memo_text.decode("utf-8"),
        operations=[_describe(op) for op in tx.operations],
        signatures=[(sig.signature_hint, sig.signature) for sig in envelope.signatures],
        envelope_xdr=envelope_xdr,
    )


def signed_by(envelope: DecodedEnvelope, public_key: str, network: NetworkProfile = TESTNET) -> bool:
    digest = TransactionEnvelope.from_xdr(envelope.envelope_xdr, network.passphrase).hash()
    verifier = Keypair.from_public_key(public_key)
    for hint, signature in envelope.signatures:
        if hint != verifier.signature_hint():
            continue
        try:
            verifier.verify(digest, signature)
        except BadSignatureError:
            continue
        return True
    return False


# ---------------------------------------------------------------------------
# In-memory ledger
# ---------------------------------------------------------------------------


@dataclass
class _Account:
    balance: Decimal
    sequence: int
    signers: list[str] = field(default_factory=list)


class FakeLedger:
    """LedgerClient that keeps accounts in memory and applies envelopes.

    Every call yields to the event loop once, so concurrent funding runs
    interleave the way they would against a real server.
    """

    def __init__(self, network: NetworkProfile = TESTNET) -> None:
        self.network = network
        self.accounts: dict[str, _Account] = {}
        self.load_calls: list[str] = []
        self.submit_calls: list[DecodedEnvelope] = []
        self.bootstrap_calls: list[str] = []
        self.bootstrap_available = True
        self.forced_rejection: dict[str, Any] | None = None

    @property
    def call_count(self) -> int:
        return len(self.load_calls) + len(self.submit_calls) + len(self.bootstrap_calls)

    def create(self, public_key: str, balance: str | Decimal = "10000") -> None:
        self.accounts[public_key] = _Account(balance=Decimal(balance), sequence=1_000 << 32)

    def snapshot(self, public_key: str) -> AccountSnapshot:
        account = self.accounts[public_key]
        balance = f"{account.balance:.7f}"
        return AccountSnapshot(
            id=public_key,
            sequence=account.sequence,
            native_balance=balance,
            balances=({"balance": balance, "asset_type": "native"},),
        )

    async def load_account(self, public_key: str) -> AccountSnapshot | None:
        self.load_calls.append(public_key)
        await asyncio.sleep(0)
        if public_key not in self.accounts:
            return None
        return self.snapshot(public_key)

    async def submit_transaction(self, envelope_xdr: str) -> SubmitResult:
        envelope = decode_envelope(envelope_xdr, self.network)
        self.submit_calls.append(envelope)
        await asyncio.sleep(0)
        if self.forced_rejection is not None:
            return self._reject(self.forced_rejection)

        source = self.accounts.get(envelope.source)
        if source is None:
            return self._reject({"transaction": "tx_no_source_account"})
        if envelope.sequence != source.sequence + 1:
            return self._reject({"transaction": "tx_bad_seq"})
        if not signed_by(envelope, envelope.source, self.network):
            return self._reject({"transaction": "tx_bad_auth"})

        sponsored: str | None = None
        created: dict[str, _Account] = {}
        spent = Decimal(envelope.fee) / 10_000_000
        for op in envelope.operations:
            if op["type"] == "begin_sponsoring":
                sponsored = op["sponsored_id"]
            elif op["type"] == "create_account":
                destination = op["destination"]
                if destination in self.accounts:
                    return self._reject({"transaction": "tx_failed",
                                         "operations": ["op_already_exists"]})
                if op["starting_balance"] == 0 and sponsored != destination:
                    return self._reject({"transaction": "tx_failed",
                                         "operations": ["op_low_reserve"]})
                spent += op["starting_balance"]
                created[destination] = _Account(balance=op["starting_balance"],
                                                sequence=envelope.sequence << 32)
            elif op["type"] == "set_options":
                pass
            elif op["type"] == "end_sponsoring":
                if op["source"] != sponsored or not signed_by(envelope, sponsored, self.network):
                    return self._reject({"transaction": "tx_bad_auth"})
                sponsored = None

        if sponsored is not None:
            return self._reject({"transaction": "tx_bad_sponsorship"})
        if spent > source.balance:
            return self._reject({"transaction": "tx_failed", "operations": ["op_underfunded"]})

        source.balance -= spent
        source.sequence = envelope.sequence
        source.signers.extend(op["signer"] for op in envelope.operations
                              if op["type"] == "set_options")
        self.accounts.update(created)
        return SubmitResult(accepted=True, tx_hash="ab" * 32)

    async def bootstrap_grant(self, public_key: str) -> BootstrapResult:
        self.bootstrap_calls.append(public_key)
        await asyncio.sleep(0)
        if not self.bootstrap_available:
            return BootstrapResult(granted=False, detail="friendbot unavailable")
        if public_key in self.accounts:
            return BootstrapResult(granted=False, detail="createAccountAlreadyExist")
        self.create(public_key, FRIENDBOT_AMOUNT)
        return BootstrapResult(granted=True, tx_hash="cd" * 32)

    @staticmethod
    def _reject(result_codes: dict[str, Any]) -> SubmitResult:
        return SubmitResult(
            accepted=False,
            result_codes=result_codes,
            detail="Transaction Failed",
        )


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()
