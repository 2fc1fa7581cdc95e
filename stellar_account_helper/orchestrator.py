"""
Funding orchestrator: the state machine that gets an account funded.

States:

    CHECK_EXISTING ──found──────────────────────────────────────▶ DONE
          │ not found
          ▼
    VALIDATE_SPONSOR ──invalid──▶ ConfigurationError
          │
          ▼
    LOOKUP_SPONSOR ──found──▶ BUILD_AND_SUBMIT ──accepted──▶ DONE
          │ not found                 └──rejected──▶ LedgerSubmissionError
          ▼
    BOOTSTRAP ──direct (sponsor is target)──▶ grant target ──▶ DONE
          └──indirect──▶ grant sponsor ──▶ CHECK_EXISTING (anonymous sponsor)

An existing account is returned unchanged and never topped up, which
makes ``fund`` idempotent. The indirect bootstrap path is the only
retry-like behavior and runs at most once per request: after a granted
bootstrap the sponsor exists, so the second pass cannot reach it again.
If it somehow does, the run fails with BootstrapError.

Expected failures are returned inside FundingOutcome, never swallowed.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import StrEnum
from typing import Awaitable, Callable

from stellar_account_helper.client import AccountSnapshot, LedgerClient
from stellar_account_helper.errors import (
    AccountHelperError,
    BootstrapError,
    ConfigurationError,
    LedgerSubmissionError,
    LedgerUnavailableError,
)
from stellar_account_helper.events import EventSink, EventType, emit
from stellar_account_helper.identity import Identity
from stellar_account_helper.networks import NetworkProfile
from stellar_account_helper.signer import sign_transaction
from stellar_account_helper.tx import assemble_funding_transaction, to_amount

# One regular pass plus one after an indirect sponsor bootstrap.
MAX_PASSES = 2


class FundingState(StrEnum):
    CHECK_EXISTING = "check_existing"
    VALIDATE_SPONSOR = "validate_sponsor"
    LOOKUP_SPONSOR = "lookup_sponsor"
    BUILD_AND_SUBMIT = "build_and_submit"
    BOOTSTRAP = "bootstrap"
    DONE = "done"


class FundingPath(StrEnum):
    """How the returned account came to be."""

    EXISTING = "existing"  # already on the ledger, untouched
    SPONSORED = "sponsored"  # created by a sponsor that already existed
    BOOTSTRAPPED_SPONSOR = "bootstrapped_sponsor"  # sponsor created via friendbot first
    DIRECT_BOOTSTRAP = "direct_bootstrap"  # friendbot created the target itself


@dataclass(frozen=True)
class FundingRequest:
    """What to fund and how.

    Attributes:
        target: Account to make exist.
        desired_balance: Starting balance in XLM if the account is created.
        sponsor: Funding account. Must be able to sign.
        anonymous_sponsor: The caller does not hold the sponsor's secret.
    """

    target: Identity
    desired_balance: Decimal
    sponsor: Identity
    anonymous_sponsor: bool = False

    def __post_init__(self) -> None:
        try:
            balance = to_amount(self.desired_balance)
        except ValueError as e:
            raise ConfigurationError(
                f"desired_balance: {e}",
                details={"desired_balance": str(self.desired_balance)},
            ) from e
        object.__setattr__(self, "desired_balance", balance)

    @property
    def is_direct(self) -> bool:
        """The target is funding itself (no separate sponsor)."""
        return self.sponsor.public_key == self.target.public_key


@dataclass(frozen=True)
class FundingOutcome:
    """Result of one ``fund`` call: a snapshot or a typed error.

    Attributes:
        snapshot: Target account after the run, on success.
        error: The failure, otherwise.
        path: Funding path taken, on success.
        states: Every state entered, in order.
    """

    snapshot: AccountSnapshot | None = None
    error: AccountHelperError | None = None
    path: FundingPath | None = None
    states: tuple[FundingState, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> AccountSnapshot:
        """Return the snapshot or raise the recorded error."""
        if self.error is not None:
            raise self.error
        if self.snapshot is None:
            raise RuntimeError("outcome holds neither a snapshot nor an error")
        return self.snapshot


def validate_request(request: FundingRequest) -> None:
    """Reject requests that cannot be authorized. Pure; no I/O.

    Raises:
        ConfigurationError: If the sponsor cannot sign, or a zero-balance
            (sponsored) account is requested for a view-only target.
    """
    if not request.sponsor.can_sign:
        raise ConfigurationError(
            "sponsor must contain a secret in order to sign.",
            details={"sponsor": request.sponsor.public_key},
        )
    if request.desired_balance.is_zero() and not request.target.can_sign:
        raise ConfigurationError(
            "In order to create a sponsored account the secret must be provided.",
            details={"target": request.target.public_key},
        )


@dataclass
class _Run:
    """Mutable bookkeeping for a single ``fund`` call."""

    request: FundingRequest
    network: NetworkProfile
    passes: int = 1
    sponsor_account: AccountSnapshot | None = None
    snapshot: AccountSnapshot | None = None
    path: FundingPath | None = None
    states: list[FundingState] = field(default_factory=list)


class FundingOrchestrator:
    """Drives a FundingRequest to a FundingOutcome.

    Args:
        client: Ledger client for lookups, submission and bootstrap grants.
        sink: Event sink. None keeps the run silent.
    """

    def __init__(self, client: LedgerClient, *, sink: EventSink | None = None) -> None:
        self._client = client
        self._sink = sink
        self._transitions: dict[FundingState, Callable[[_Run], Awaitable[FundingState]]] = {
            FundingState.CHECK_EXISTING: self._check_existing,
            FundingState.VALIDATE_SPONSOR: self._validate_sponsor,
            FundingState.LOOKUP_SPONSOR: self._lookup_sponsor,
            FundingState.BUILD_AND_SUBMIT: self._build_and_submit,
            FundingState.BOOTSTRAP: self._bootstrap,
        }

    async def fund(self, request: FundingRequest, network: NetworkProfile) -> FundingOutcome:
        run = _Run(request=request, network=network)
        try:
            # Fail fast: an unauthorizable request never touches the network.
            validate_request(request)
            state = FundingState.CHECK_EXISTING
            while state is not FundingState.DONE:
                run.states.append(state)
                emit(self._sink, EventType.STATE_ENTERED, f"entering {state}", state=str(state))
                state = await self._transitions[state](run)
        except AccountHelperError as e:
            emit(
                self._sink,
                EventType.FUNDING_FAILED,
                e.message,
                account=request.target.public_key,
                error_code=e.error_code,
            )
            return FundingOutcome(error=e, states=tuple(run.states))

        run.states.append(FundingState.DONE)
        return FundingOutcome(
            snapshot=run.snapshot,
            path=run.path,
            states=tuple(run.states),
        )

    # -----------------------------------------------------------------
    # Transitions
    # -----------------------------------------------------------------

    async def _check_existing(self, run: _Run) -> FundingState:
        target = run.request.target
        account = await self._client.load_account(target.public_key)
        if account is None:
            return FundingState.VALIDATE_SPONSOR

        emit(
            self._sink,
            EventType.ACCOUNT_EXISTS,
            "Account already exists - not funding.",
            account=account.id,
            native_balance=account.native_balance,
        )
        run.snapshot = account
        run.path = FundingPath.EXISTING
        return FundingState.DONE

    async def _validate_sponsor(self, run: _Run) -> FundingState:
        validate_request(run.request)
        return FundingState.LOOKUP_SPONSOR

    async def _lookup_sponsor(self, run: _Run) -> FundingState:
        run.sponsor_account = await self._client.load_account(run.request.sponsor.public_key)
        if run.sponsor_account is None:
            return FundingState.BOOTSTRAP
        return FundingState.BUILD_AND_SUBMIT

    async def _build_and_submit(self, run: _Run) -> FundingState:
        request = run.request
        if run.sponsor_account is None:
            raise RuntimeError("sponsor account must be loaded before building")

        tx = assemble_funding_transaction(
            request.target,
            request.sponsor,
            run.sponsor_account,
            request.desired_balance,
            run.network,
            anonymous_sponsor=request.anonymous_sponsor,
        )
        signed = sign_transaction(tx, run.network)

        emit(
            self._sink,
            EventType.FUNDING_REQUESTED,
            f"Account does not exist - funding with {request.desired_balance} XLM.",
            account=request.target.public_key,
            sponsor=request.sponsor.public_key,
            funds=str(request.desired_balance),
            operations=len(tx.operations),
            tx_hash=signed.tx_hash,
        )

        result = await self._client.submit_transaction(signed.envelope_xdr)
        if not result.accepted:
            emit(
                self._sink,
                EventType.SUBMISSION_REJECTED,
                "funding transaction rejected",
                account=request.target.public_key,
                result_codes=result.result_codes,
            )
            raise LedgerSubmissionError(
                f"funding transaction rejected: {result.detail or 'no detail'}",
                result_codes=result.result_codes,
                details={"tx_hash": result.tx_hash or signed.tx_hash},
            )

        run.snapshot = await self._reload_target(run)
        run.path = FundingPath.SPONSORED if run.passes == 1 else FundingPath.BOOTSTRAPPED_SPONSOR
        return FundingState.DONE

    async def _bootstrap(self, run: _Run) -> FundingState:
        request = run.request
        direct = request.is_direct
        if not direct and run.passes >= MAX_PASSES:
            raise BootstrapError(
                "sponsor still does not exist after bootstrap",
                details={"sponsor": request.sponsor.public_key},
            )

        grantee = request.sponsor.public_key
        emit(
            self._sink,
            EventType.BOOTSTRAP_REQUESTED,
            ("Requested" if direct else "Funding")
            + " account does not exist - asking a friend(ly) bot.",
            account=grantee,
            direct=direct,
        )

        result = await self._client.bootstrap_grant(grantee)
        if not result.granted:
            emit(
                self._sink,
                EventType.BOOTSTRAP_FAILED,
                "bootstrap grant failed",
                account=grantee,
                detail=result.detail,
            )
            raise BootstrapError(
                f"bootstrap grant failed: {result.detail or 'no detail'}",
                details={"account": grantee},
            )

        if direct:
            run.snapshot = await self._reload_target(run)
            run.path = FundingPath.DIRECT_BOOTSTRAP
            return FundingState.DONE

        # A bootstrapped sponsor is always treated as anonymous.
        run.request = replace(request, anonymous_sponsor=True)
        run.passes += 1
        return FundingState.CHECK_EXISTING

    async def _reload_target(self, run: _Run) -> AccountSnapshot:
        target = run.request.target
        account = await self._client.load_account(target.public_key)
        if account is None:
            raise LedgerUnavailableError(
                f"{target.public_key} not visible after funding",
                error_code="ACCOUNT_NOT_VISIBLE",
                details={"account": target.public_key},
            )
        emit(
            self._sink,
            EventType.ACCOUNT_FUNDED,
            "account funded",
            account=account.id,
            native_balance=account.native_balance,
        )
        return account
