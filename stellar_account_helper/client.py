"""
Ledger client protocol: the network boundary.

The orchestrator depends on this interface, not on Horizon or httpx.
Concrete implementations:
    - HorizonClient (real, horizon.py)
    - FakeLedger (tests)

Three methods, all async and single-shot:
    - load_account(public_key) → AccountSnapshot | None
    - submit_transaction(envelope_xdr) → SubmitResult
    - bootstrap_grant(public_key) → BootstrapResult

"Not found", "rejected" and "grant refused" are expected outcomes and are
captured in return values. Only transport failures raise
(``LedgerUnavailableError``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Protocol, runtime_checkable


# =========================================================================
# Result types
# =========================================================================


@dataclass(frozen=True)
class AccountSnapshot:
    """Read-only view of an account as loaded from the ledger.

    Attributes:
        id: ``G...`` account id.
        sequence: Current sequence number. The next transaction sourced
            from this account uses ``sequence + 1``.
        native_balance: XLM balance as a decimal-precise string,
            exactly as the ledger reported it.
        balances: Raw balance entries, for callers that need them.
    """

    id: str
    sequence: int
    native_balance: str
    balances: tuple[dict[str, Any], ...] = field(default=(), compare=False)

    @property
    def native_balance_decimal(self) -> Decimal:
        return Decimal(self.native_balance)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "sequence": str(self.sequence),
            "native_balance": self.native_balance,
        }


@dataclass(frozen=True)
class SubmitResult:
    """Result of submitting a signed transaction envelope.

    Attributes:
        accepted: Whether the transaction was applied.
        tx_hash: Transaction hash, when the server reported one.
        result_codes: Remote rejection detail, verbatim. Empty on success.
        detail: Human-readable summary for diagnostics.
    """

    accepted: bool
    tx_hash: str | None = None
    result_codes: dict[str, Any] = field(default_factory=dict)
    detail: str | None = None


@dataclass(frozen=True)
class BootstrapResult:
    """Result of asking the bootstrap service (friendbot) for funds."""

    granted: bool
    tx_hash: str | None = None
    detail: str | None = None


# =========================================================================
# Protocol
# =========================================================================


@runtime_checkable
class LedgerClient(Protocol):
    """Interface for the ledger operations the orchestrator needs."""

    async def load_account(self, public_key: str) -> AccountSnapshot | None:
        """Load an account, or None if it does not exist."""
        ...

    async def submit_transaction(self, envelope_xdr: str) -> SubmitResult:
        """Submit a base64 TransactionEnvelope."""
        ...

    async def bootstrap_grant(self, public_key: str) -> BootstrapResult:
        """Ask the network's bootstrap service to create and fund an account."""
        ...
