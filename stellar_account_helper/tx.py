"""
Funding transaction assembler.

Builds the unsigned "recipe" for creating an account: ordered operations,
fee, sequence, memo, time bounds, and the set of identities that must sign.
Pure and deterministic: no network calls, no secrets read.

Operation order:
    1. BeginSponsoringFutureReserves(target)   iff target can sign
    2. CreateAccount(target, starting_balance)  always
    3. SetOptions(signer=target, weight=1)      iff anonymous sponsor
    4. EndSponsoringFutureReserves(source=target)  iff target can sign

The begin/end pair and the sponsored account's own operations need the
target's authorization, so the target joins the signer set exactly when
it can sign.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from stellar_account_helper.client import AccountSnapshot
from stellar_account_helper.identity import Identity
from stellar_account_helper.networks import NetworkProfile

MEMO_TEXT = "stellar-account-helper"

# Stellar text memos are at most 28 bytes.
MAX_MEMO_BYTES = 28

# 1 XLM = 10^7 stroops.
STROOPS_PER_LUMEN = 10_000_000

# Largest amount representable in an int64 stroop field.
MAX_STROOPS = 2**63 - 1

# (min_time, max_time) of zero means the transaction never expires.
NO_TIMEOUT = (0, 0)


# =========================================================================
# Operations
# =========================================================================


@dataclass(frozen=True)
class BeginSponsoringFutureReserves:
    sponsored_id: str
    source: str | None = None


@dataclass(frozen=True)
class CreateAccount:
    destination: str
    starting_balance: Decimal
    source: str | None = None


@dataclass(frozen=True)
class SetOptions:
    """Adds ``signer_key`` as an ed25519 signer of the source account."""

    signer_key: str
    signer_weight: int
    source: str | None = None


@dataclass(frozen=True)
class EndSponsoringFutureReserves:
    source: str | None = None


Operation = (
    BeginSponsoringFutureReserves
    | CreateAccount
    | SetOptions
    | EndSponsoringFutureReserves
)


@dataclass(frozen=True)
class FundingTransaction:
    """An unsigned funding transaction plus the identities that must sign it.

    Attributes:
        source: Sponsor account id (pays fee and starting balance).
        sequence: Sequence number for this transaction.
        fee: Total fee in stroops (base fee × operation count).
        memo: Text memo.
        time_bounds: (min_time, max_time) unix seconds; (0, 0) = no expiry.
        operations: Ordered operations.
        signers: Identities whose signatures are required, sponsor first.
    """

    source: str
    sequence: int
    fee: int
    memo: str
    time_bounds: tuple[int, int]
    operations: tuple[Operation, ...]
    signers: tuple[Identity, ...]


def to_stroops(amount: Decimal) -> int:
    """Convert an XLM amount to stroops.

    Raises:
        ValueError: If the amount is negative or has more than 7 decimals.
    """
    if not amount.is_finite():
        raise ValueError(f"amount must be a finite number, got {amount}")
    if amount < 0:
        raise ValueError(f"amount must be non-negative, got {amount}")
    stroops = amount * STROOPS_PER_LUMEN
    if stroops != stroops.to_integral_value():
        raise ValueError(f"amount has more than 7 decimal places: {amount}")
    if stroops > MAX_STROOPS:
        raise ValueError(f"amount exceeds the int64 stroop limit: {amount}")
    return int(stroops)


def to_amount(value: object) -> Decimal:
    """Normalize an XLM amount given as Decimal, int, float or string.

    Raises:
        ValueError: If the value is not a number, or ``to_stroops`` would
            reject it.
    """
    if isinstance(value, bool):
        raise ValueError("amount must be a number, not a boolean")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value))
        except InvalidOperation as e:
            raise ValueError(f"amount is not a number: {value!r}") from e
    else:
        raise ValueError(f"amount must be a number, got {type(value).__name__}")
    to_stroops(amount)
    return amount


def assemble_funding_transaction(
    target: Identity,
    sponsor: Identity,
    sponsor_account: AccountSnapshot,
    desired_balance: Decimal,
    network: NetworkProfile,
    *,
    anonymous_sponsor: bool = False,
) -> FundingTransaction:
    """Build the transaction that creates ``target`` from ``sponsor_account``.

    Args:
        target: Account to create.
        sponsor: Identity of the funding account. Must be able to sign.
        sponsor_account: Current ledger snapshot of the sponsor.
        desired_balance: Starting balance of the new account, in XLM.
        network: Supplies the base fee.
        anonymous_sponsor: The sponsor's secret is not held by the caller;
            add the target key as a signer so the caller keeps control.

    Raises:
        ValueError: If the sponsor cannot sign, the snapshot does not
            belong to the sponsor, or the balance is not representable.
    """
    if not sponsor.can_sign:
        raise ValueError("sponsor must be able to sign")
    if sponsor_account.id != sponsor.public_key:
        raise ValueError(
            f"sponsor snapshot {sponsor_account.id} does not match {sponsor.public_key}"
        )
    to_stroops(desired_balance)

    operations: list[Operation] = []
    if target.can_sign:
        operations.append(BeginSponsoringFutureReserves(sponsored_id=target.public_key))

    operations.append(
        CreateAccount(destination=target.public_key, starting_balance=desired_balance)
    )

    if anonymous_sponsor:
        operations.append(SetOptions(signer_key=target.public_key, signer_weight=1))

    if target.can_sign:
        operations.append(EndSponsoringFutureReserves(source=target.public_key))

    signers = (sponsor, target) if target.can_sign else (sponsor,)

    return FundingTransaction(
        source=sponsor.public_key,
        sequence=sponsor_account.sequence + 1,
        fee=network.base_fee * len(operations),
        memo=MEMO_TEXT,
        time_bounds=NO_TIMEOUT,
        operations=tuple(operations),
        signers=signers,
    )
