"""
Horizon client: the real network implementation of LedgerClient.

Translates Horizon REST responses into AccountSnapshot / SubmitResult /
BootstrapResult. Uses an injectable transport (HttpTransport) so the HTTP
layer can be swapped for test fakes without changing parsing logic.

No retry loops. No secrets. No funding logic beyond response parsing.

Horizon conventions relied on:
    - GET /accounts/{id}: 200 with account JSON, 404 when absent
    - POST /transactions (form field ``tx``): 200 with ``hash`` on success,
      400 with ``extras.result_codes`` when the transaction failed
    - friendbot GET ?addr=...: 200 on success, 400 with ``detail`` otherwise
"""

from __future__ import annotations

from typing import Any

from stellar_account_helper.client import AccountSnapshot, BootstrapResult, SubmitResult
from stellar_account_helper.errors import LedgerUnavailableError
from stellar_account_helper.networks import NetworkProfile
from stellar_account_helper.transport import HttpTransport, HttpxTransport, TransportResponse


class HorizonClient:
    """Stellar Horizon client implementing the LedgerClient protocol.

    Args:
        network: Profile supplying the Horizon and friendbot URLs.
        transport: Injectable HTTP transport. Defaults to HttpxTransport.
    """

    def __init__(
        self,
        network: NetworkProfile,
        transport: HttpTransport | None = None,
    ) -> None:
        self._network = network
        self._base_url = network.horizon_url.rstrip("/")
        self._transport = transport or HttpxTransport()

    @property
    def network(self) -> NetworkProfile:
        return self._network

    # -----------------------------------------------------------------
    # LedgerClient protocol methods
    # -----------------------------------------------------------------

    async def load_account(self, public_key: str) -> AccountSnapshot | None:
        url = f"{self._base_url}/accounts/{public_key}"
        response = await self._transport.get_json(url)
        if response.status_code == 404:
            return None
        if not response.ok:
            raise _unexpected_status(url, response)
        return _parse_account(response.payload)

    async def submit_transaction(self, envelope_xdr: str) -> SubmitResult:
        url = f"{self._base_url}/transactions"
        response = await self._transport.post_form(url, {"tx": envelope_xdr})
        return _parse_submit_response(response)

    async def bootstrap_grant(self, public_key: str) -> BootstrapResult:
        if self._network.bootstrap_url is None:
            return BootstrapResult(
                granted=False,
                detail=f"no bootstrap service on {self._network.name}",
            )
        response = await self._transport.get_json(
            self._network.bootstrap_url, params={"addr": public_key}
        )
        if response.ok:
            return BootstrapResult(granted=True, tx_hash=response.payload.get("hash"))
        return BootstrapResult(granted=False, detail=_problem_detail(response.payload))


# =====================================================================
# Response parsing (pure functions, no I/O)
# =====================================================================


def _parse_account(payload: dict[str, Any]) -> AccountSnapshot:
    """Parse a Horizon account resource.

    Raises:
        LedgerUnavailableError: If required fields are missing.
    """
    account_id = payload.get("id")
    sequence = payload.get("sequence")
    balances = payload.get("balances")
    if not isinstance(account_id, str) or sequence is None or not isinstance(balances, list):
        raise LedgerUnavailableError(
            "account response is missing id, sequence or balances",
            error_code="MALFORMED_RESPONSE",
            details={"keys": sorted(payload)},
        )

    native = next(
        (entry.get("balance") for entry in balances if entry.get("asset_type") == "native"),
        None,
    )
    if native is None:
        raise LedgerUnavailableError(
            f"account {account_id} has no native balance entry",
            error_code="MALFORMED_RESPONSE",
            details={"id": account_id},
        )

    return AccountSnapshot(
        id=account_id,
        sequence=int(sequence),
        native_balance=native,
        balances=tuple(balances),
    )


def _parse_submit_response(response: TransportResponse) -> SubmitResult:
    """Parse a Horizon POST /transactions response.

    Handles:
        - Success (hash present)
        - Transaction failure (extras.result_codes present)
        - Other problem responses (title/detail only)
    """
    payload = response.payload
    if response.ok:
        return SubmitResult(accepted=True, tx_hash=payload.get("hash"))

    extras = payload.get("extras")
    if not isinstance(extras, dict):
        extras = {}

    result_codes = extras.get("result_codes")
    return SubmitResult(
        accepted=False,
        tx_hash=extras.get("hash"),
        result_codes=result_codes if isinstance(result_codes, dict) else {},
        detail=_problem_detail(payload),
    )


def _problem_detail(payload: dict[str, Any]) -> str:
    """Best human-readable summary of a Horizon problem document."""
    return str(payload.get("detail") or payload.get("title") or "unknown error")


def _unexpected_status(url: str, response: TransportResponse) -> LedgerUnavailableError:
    return LedgerUnavailableError(
        f"HTTP {response.status_code}: {_problem_detail(response.payload)}",
        error_code="HTTP_ERROR",
        details={"url": url, "status_code": response.status_code},
    )
