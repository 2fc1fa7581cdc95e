"""
AccountHelper, the caller-facing entry point.

    helper = AccountHelper("S...")            # TESTNET by default
    account = await helper.get_funded(funds=1)

Construction validates the credential and network name before any
network access. ``get_funded`` makes sure the account exists, choosing
the funding path on its own, and returns the account snapshot.
"""

from __future__ import annotations

from decimal import Decimal

from stellar_account_helper.client import AccountSnapshot, LedgerClient
from stellar_account_helper.errors import ConfigurationError
from stellar_account_helper.events import EventSink
from stellar_account_helper.horizon import HorizonClient
from stellar_account_helper.identity import Identity, resolve_identity
from stellar_account_helper.networks import NetworkProfile, get_network
from stellar_account_helper.options import FundingOptions
from stellar_account_helper.orchestrator import (
    FundingOrchestrator,
    FundingOutcome,
    FundingRequest,
)


class AccountHelper:
    """Basic actions around one Stellar account.

    Args:
        id: Secret seed (``S...``) or public key (``G...``) of the account.
        network: "TESTNET" (default) or "LIVENET".
        client: Ledger client. Defaults to a HorizonClient for the network.
        sink: Event sink for progress and advisories. Silent when None.

    Raises:
        InvalidNetwork: If the network name is not supported.
        InvalidIdentity: If ``id`` is neither a seed nor a public key.
    """

    def __init__(
        self,
        id: str,
        network: str | None = None,
        *,
        client: LedgerClient | None = None,
        sink: EventSink | None = None,
    ) -> None:
        self._network = get_network(network)
        self._identity = resolve_identity(id, sink)
        self._client = client or HorizonClient(self._network)
        self._orchestrator = FundingOrchestrator(self._client, sink=sink)

    @property
    def identity(self) -> Identity:
        return self._identity

    @property
    def network(self) -> NetworkProfile:
        return self._network

    async def fund(self, options: FundingOptions | None = None) -> FundingOutcome:
        """Run the funding state machine and return its outcome.

        A fresh ephemeral sponsor is generated when ``options.sponsor``
        is not set.
        """
        options = options or FundingOptions()
        request = FundingRequest(
            target=self._identity,
            desired_balance=options.funds,
            sponsor=options.sponsor or Identity.random(),
            anonymous_sponsor=options.anonymous_sponsor,
        )
        return await self._orchestrator.fund(request, self._network)

    async def get_funded(
        self,
        options: FundingOptions | None = None,
        *,
        funds: Decimal | int | str | None = None,
        sponsor: Identity | None = None,
        anonymous_sponsor: bool | None = None,
    ) -> AccountSnapshot:
        """Return the account, creating it first if it does not exist.

        An existing account is returned as-is, whatever its balance.

        The request is validated before the ledger is consulted. With the
        default ``funds=0`` a view-only helper (built from a ``G...`` key)
        is rejected even when the account already exists; pass
        ``funds > 0`` to look up or create a view-only account.

        Options come either as a FundingOptions instance or as keyword
        arguments, not both.

        Raises:
            ConfigurationError: Unauthorizable request or mixed option styles.
            LedgerSubmissionError: The ledger rejected the funding transaction.
            BootstrapError: Friendbot could not fund the account or sponsor.
            LedgerUnavailableError: Horizon could not be reached.
        """
        overrides = {
            name: value
            for name, value in (
                ("funds", funds),
                ("sponsor", sponsor),
                ("anonymous_sponsor", anonymous_sponsor),
            )
            if value is not None
        }
        if options is not None and overrides:
            raise ConfigurationError(
                "pass either a FundingOptions instance or keyword options, not both",
                details={"keywords": sorted(overrides)},
            )
        if options is None:
            options = FundingOptions(**overrides)  # type: ignore[arg-type]

        outcome = await self.fund(options)
        return outcome.unwrap()

    async def reset(self) -> None:
        """Tear the account down. Not defined yet."""
        raise NotImplementedError("Not implemented")
