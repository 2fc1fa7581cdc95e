"""
Error taxonomy for account funding.

Every failure the helper can report derives from ``AccountHelperError``.
Each carries a stable ``error_code`` for automation and an optional
``details`` dict for diagnostics. Secrets never appear in either.

    InvalidIdentity         credential is neither a secret seed nor a public key
    InvalidNetwork          network name outside the supported set
    ConfigurationError      request cannot be authorized (detected before I/O)
    LedgerSubmissionError   ledger rejected the funding transaction
    BootstrapError          friendbot grant failed or is unavailable
    LedgerUnavailableError  transport-level failure talking to the ledger
"""

from __future__ import annotations

from typing import Any


class AccountHelperError(Exception):
    """Base class for all account helper failures."""

    error_code = "ACCOUNT_HELPER_ERROR"

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code is not None:
            self.error_code = error_code
        self.details: dict[str, Any] = details or {}

    def to_dict(self) -> dict[str, object]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class InvalidIdentity(AccountHelperError):
    error_code = "INVALID_IDENTITY"


class InvalidNetwork(AccountHelperError):
    error_code = "INVALID_NETWORK"


class ConfigurationError(AccountHelperError):
    error_code = "CONFIGURATION_ERROR"


class LedgerSubmissionError(AccountHelperError):
    """The ledger rejected the assembled transaction.

    ``result_codes`` is the remote rejection detail, verbatim
    (Horizon's ``extras.result_codes``).
    """

    error_code = "SUBMISSION_REJECTED"

    def __init__(
        self,
        message: str,
        *,
        result_codes: dict[str, Any] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.result_codes: dict[str, Any] = result_codes or {}


class BootstrapError(AccountHelperError):
    error_code = "BOOTSTRAP_FAILED"


# The bootstrap service is friendbot; keep the familiar name around.
FaucetError = BootstrapError


class LedgerUnavailableError(AccountHelperError):
    error_code = "LEDGER_UNAVAILABLE"
