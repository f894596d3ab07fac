from decimal import Decimal

from emlakmetrik.engine.expenses import annual_expenses, expense_shares
from emlakmetrik.models.results import ExpenseBreakdown


class TestAnnualExpenses:
    def test_breakdown(self):
        e = annual_expenses(Decimal("2000000"), Decimal("15000"), Decimal("500"))
        assert e.property_tax == Decimal("4000.00")
        assert e.maintenance == Decimal("18000.00")
        assert e.dues == Decimal("6000.00")
        assert e.total == Decimal("28000.00")

    def test_shares(self):
        e = annual_expenses(Decimal("2000000"), Decimal("15000"), Decimal("500"))
        shares = expense_shares(e)
        assert shares["property_tax"] == Decimal("14.29")
        assert shares["maintenance"] == Decimal("64.29")
        assert shares["dues"] == Decimal("21.43")

    def test_shares_with_no_expenses(self):
        shares = expense_shares(ExpenseBreakdown())
        assert all(v == 0 for v in shares.values())
