"""
Funding options.

Three knobs, each with a documented default:

    funds              Decimal  0       starting balance of a new account, in XLM.
                                        0 creates a sponsored account, which
                                        requires the target's secret.
    sponsor            Identity random  funding account; must be able to sign.
                                        When omitted a fresh ephemeral keypair
                                        is generated per request.
    anonymous_sponsor  bool     False   the caller does not hold the sponsor's
                                        secret; the target key is added as a
                                        signer so control is not lost.

``FundingOptions.from_dict`` accepts JSON-shaped input (sponsor given as a
credential string) and validates it against ``OPTIONS_SCHEMA``; any
unrecognized field is rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import jsonschema  # type: ignore[import-untyped]

from stellar_account_helper.errors import ConfigurationError
from stellar_account_helper.identity import Identity, resolve_identity
from stellar_account_helper.tx import to_amount

DEFAULT_FUNDS = Decimal("0")

OPTIONS_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "funds": {
            "oneOf": [
                {"type": "number", "minimum": 0},
                {"type": "string", "pattern": r"^\d+(\.\d{1,7})?$"},
            ],
        },
        "sponsor": {"type": "string", "minLength": 1},
        "anonymous_sponsor": {"type": "boolean"},
    },
    "additionalProperties": False,
}


@dataclass(frozen=True)
class FundingOptions:
    """Validated options for ``AccountHelper.get_funded``."""

    funds: Decimal = DEFAULT_FUNDS
    sponsor: Identity | None = None
    anonymous_sponsor: bool = False

    def __post_init__(self) -> None:
        try:
            funds = to_amount(self.funds)
        except ValueError as e:
            raise ConfigurationError(f"funds: {e}", details={"funds": str(self.funds)}) from e
        object.__setattr__(self, "funds", funds)

        if self.sponsor is not None and not isinstance(self.sponsor, Identity):
            raise ConfigurationError(
                f"sponsor must be an Identity, got {type(self.sponsor).__name__}"
            )
        if not isinstance(self.anonymous_sponsor, bool):
            raise ConfigurationError("anonymous_sponsor must be a boolean")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FundingOptions":
        """Build options from JSON-shaped input.

        Raises:
            ConfigurationError: On unknown fields or invalid values.
            InvalidIdentity: If ``sponsor`` is not a valid credential.
        """
        try:
            jsonschema.validate(instance=data, schema=OPTIONS_SCHEMA)
        except jsonschema.ValidationError as e:
            raise ConfigurationError(
                f"invalid funding options: {e.message}",
                details={"path": list(e.absolute_path)},
            ) from e

        sponsor = data.get("sponsor")
        return cls(
            funds=data.get("funds", DEFAULT_FUNDS),
            sponsor=resolve_identity(sponsor) if sponsor is not None else None,
            anonymous_sponsor=data.get("anonymous_sponsor", False),
        )
