"""
stellar-account-helper: make sure a Stellar account exists and is funded.

Public API:

    Entry point:
        - ``AccountHelper``: resolve a credential, ``get_funded()``, ``reset()``.

    Core (pure + state machine):
        - ``FundingOrchestrator`` / ``FundingRequest`` / ``FundingOutcome``.
        - ``assemble_funding_transaction``: ordered operations and signer set.
        - ``sign_transaction``: base64 envelope from an assembled transaction.

    Inputs:
        - ``get_network`` / ``SUPPORTED_NETWORKS``: TESTNET and LIVENET.
        - ``resolve_identity`` / ``parse_credential`` / ``Identity``.
        - ``FundingOptions``: funds, sponsor, anonymous_sponsor.

    Protocols (for dependency injection):
        - ``LedgerClient``: account lookup, submission, bootstrap grant.
        - ``HttpTransport``: HTTP seam under ``HorizonClient``.
        - ``EventSink``: structured events; silent by default.
"""

from stellar_account_helper.client import (
    AccountSnapshot,
    BootstrapResult,
    LedgerClient,
    SubmitResult,
)
from stellar_account_helper.errors import (
    AccountHelperError,
    BootstrapError,
    ConfigurationError,
    FaucetError,
    InvalidIdentity,
    InvalidNetwork,
    LedgerSubmissionError,
    LedgerUnavailableError,
)
from stellar_account_helper.events import (
    EventSink,
    EventType,
    FundingEvent,
    NullEventSink,
    RecordingEventSink,
    StructlogEventSink,
)
from stellar_account_helper.helper import AccountHelper
from stellar_account_helper.horizon import HorizonClient
from stellar_account_helper.identity import (
    CredentialKind,
    Identity,
    ParsedCredential,
    parse_credential,
    resolve_identity,
)
from stellar_account_helper.logging_config import configure_logging
from stellar_account_helper.networks import (
    LIVENET,
    SUPPORTED_NETWORKS,
    TESTNET,
    NetworkProfile,
    get_network,
)
from stellar_account_helper.options import FundingOptions
from stellar_account_helper.orchestrator import (
    FundingOrchestrator,
    FundingOutcome,
    FundingPath,
    FundingRequest,
    FundingState,
)
from stellar_account_helper.signer import SignResult, sign_transaction
from stellar_account_helper.transport import HttpTransport, HttpxTransport
from stellar_account_helper.tx import FundingTransaction, assemble_funding_transaction

__all__ = [
    "AccountHelper",
    "AccountHelperError",
    "AccountSnapshot",
    "BootstrapError",
    "BootstrapResult",
    "ConfigurationError",
    "CredentialKind",
    "EventSink",
    "EventType",
    "FaucetError",
    "FundingEvent",
    "FundingOptions",
    "FundingOrchestrator",
    "FundingOutcome",
    "FundingPath",
    "FundingRequest",
    "FundingState",
    "FundingTransaction",
    "HorizonClient",
    "HttpTransport",
    "HttpxTransport",
    "Identity",
    "InvalidIdentity",
    "InvalidNetwork",
    "LIVENET",
    "LedgerClient",
    "LedgerSubmissionError",
    "LedgerUnavailableError",
    "NetworkProfile",
    "NullEventSink",
    "ParsedCredential",
    "RecordingEventSink",
    "SUPPORTED_NETWORKS",
    "SignResult",
    "StructlogEventSink",
    "SubmitResult",
    "TESTNET",
    "assemble_funding_transaction",
    "configure_logging",
    "get_network",
    "parse_credential",
    "resolve_identity",
    "sign_transaction",
]

__version__ = "0.2.0"
