"""Versioned policy constants used by the calculation engine.

Stored analyses carry the policy version they were computed with, so a change
to any rate here must ship as a new version rather than an edit in place.
"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PolicyConstants:
    version: int
    transfer_tax_rate: Decimal  # One-time, % of price (tapu harcı)
    property_tax_rate: Decimal  # Annual, % of price
    maintenance_rate: Decimal  # Annual, % of annual rent
    good_roi_threshold: Decimal  # Headline ROI % at or above this is "good"
    good_amortization_threshold: Decimal  # Years at or below this is "good"


POLICY_V1 = PolicyConstants(
    version=1,
    transfer_tax_rate=Decimal("0.04"),
    property_tax_rate=Decimal("0.002"),
    maintenance_rate=Decimal("0.10"),
    good_roi_threshold=Decimal("5"),
    good_amortization_threshold=Decimal("20"),
)

POLICIES: dict[int, PolicyConstants] = {
    POLICY_V1.version: POLICY_V1,
}

CURRENT_POLICY = POLICY_V1


def get_policy(version: int | None) -> PolicyConstants:
    """Policy for a stored version. Unknown or missing versions map to v1."""
    if version is None:
        return POLICY_V1
    return POLICIES.get(version, POLICY_V1)
