"""
Supported Stellar networks.

Exactly two profiles exist. The mapping is built once at import time and
never mutated, so it is safe to share between concurrent funding runs.
"""

from __future__ import annotations

from dataclasses import dataclass

from stellar_sdk import Network

from stellar_account_helper.errors import InvalidNetwork

# Minimum per-operation fee, in stroops.
BASE_FEE = 100

TESTNET_PASSPHRASE = Network.TESTNET_NETWORK_PASSPHRASE
PUBLIC_PASSPHRASE = Network.PUBLIC_NETWORK_PASSPHRASE


@dataclass(frozen=True)
class NetworkProfile:
    """Connection, fee and signing data for one Stellar network.

    Attributes:
        name: Network name ("TESTNET" or "LIVENET").
        horizon_url: Base URL of the Horizon API server.
        base_fee: Per-operation fee in stroops.
        passphrase: Network passphrase, hashed into every signature.
        bootstrap_url: Friendbot endpoint, or None where no bootstrap
            service exists (the public network).
    """

    name: str
    horizon_url: str
    base_fee: int
    passphrase: str
    bootstrap_url: str | None = None

    @property
    def network_id(self) -> bytes:
        """SHA256 of the passphrase, as used in the signature base."""
        return Network(self.passphrase).network_id()


TESTNET = NetworkProfile(
    name="TESTNET",
    horizon_url="https://horizon-testnet.stellar.org",
    base_fee=BASE_FEE,
    passphrase=TESTNET_PASSPHRASE,
    bootstrap_url="https://friendbot.stellar.org",
)

LIVENET = NetworkProfile(
    name="LIVENET",
    horizon_url="https://horizon.stellar.org",
    base_fee=BASE_FEE,
    passphrase=PUBLIC_PASSPHRASE,
)

SUPPORTED_NETWORKS: dict[str, NetworkProfile] = {
    TESTNET.name: TESTNET,
    LIVENET.name: LIVENET,
}

DEFAULT_NETWORK = TESTNET.name


def get_network(name: str | None = None) -> NetworkProfile:
    """Look up a network profile by name.

    Args:
        name: "TESTNET" or "LIVENET". None selects TESTNET.

    Raises:
        InvalidNetwork: If the name is not supported.
    """
    if name is None:
        name = DEFAULT_NETWORK
    profile = SUPPORTED_NETWORKS.get(name)
    if profile is None:
        raise InvalidNetwork(
            f"Network must be one of [{','.join(SUPPORTED_NETWORKS)}]",
            details={"network": name},
        )
    return profile
