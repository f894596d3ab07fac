"""Annual expense breakdown for the detailed expense view.

These estimates are informational and are not deducted in the cash flow.
"""

from decimal import Decimal, ROUND_HALF_UP

from emlakmetrik.models.policy import CURRENT_POLICY, PolicyConstants
from emlakmetrik.models.results import ExpenseBreakdown

TWO_PLACES = Decimal("0.01")


def annual_expenses(
    price: Decimal,
    monthly_rent: Decimal,
    monthly_dues: Decimal,
    policy: PolicyConstants = CURRENT_POLICY,
) -> ExpenseBreakdown:
    property_tax = (price * policy.property_tax_rate).quantize(TWO_PLACES, ROUND_HALF_UP)
    maintenance = (monthly_rent * 12 * policy.maintenance_rate).quantize(TWO_PLACES, ROUND_HALF_UP)
    dues = (monthly_dues * 12).quantize(TWO_PLACES, ROUND_HALF_UP)

    return ExpenseBreakdown(
        property_tax=property_tax,
        maintenance=maintenance,
        dues=dues,
        total=property_tax + maintenance + dues,
    )


def expense_shares(breakdown: ExpenseBreakdown) -> dict[str, Decimal]:
    """Each item as a percentage of the total. All zero when there are no expenses."""
    items = {
        "property_tax": breakdown.property_tax,
        "maintenance": breakdown.maintenance,
        "dues": breakdown.dues,
    }
    if breakdown.total <= 0:
        return {name: Decimal("0") for name in items}
    return {
        name: (amount / breakdown.total * 100).quantize(TWO_PLACES, ROUND_HALF_UP)
        for name, amount in items.items()
    }
