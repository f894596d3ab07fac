"""Loan installment and amortization schedule.

Pure functions: Decimal in, dataclass out. No I/O.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from itertools import groupby

from emlakmetrik.models.inputs import Financing
from emlakmetrik.models.results import LoanFacts

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")


@dataclass(frozen=True)
class AmortizationPayment:
    period: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal


@dataclass(frozen=True)
class AmortizationSchedule:
    payments: tuple[AmortizationPayment, ...]
    monthly_payment: Decimal
    total_interest: Decimal
    total_principal: Decimal


@dataclass(frozen=True)
class YearlyDebt:
    year: int  # Loan year, 1-based
    principal: Decimal
    interest: Decimal
    debt_service: Decimal
    ending_balance: Decimal


def monthly_payment(principal: Decimal, monthly_rate: Decimal, term_months: int) -> Decimal:
    """Fixed monthly installment for an amortizing loan.

    monthly_rate is a fraction (0.0249 for 2.49%). A zero rate is repaid
    straight-line, since the annuity denominator (1+r)^n - 1 is 0 there.
    """
    if term_months <= 0 or principal <= 0:
        return ZERO
    # A rate too small to move (1+r)^n at working precision is also straight-line
    factor = (1 + monthly_rate) ** term_months if monthly_rate > 0 else Decimal(1)
    if factor <= 1:
        return (principal / term_months).quantize(TWO_PLACES, ROUND_HALF_UP)

    # M = P * [r(1+r)^n] / [(1+r)^n - 1]
    payment = principal * (monthly_rate * factor) / (factor - 1)
    return payment.quantize(TWO_PLACES, ROUND_HALF_UP)


def down_payment(price: Decimal, financing: Financing) -> Decimal:
    """Cash put down at purchase. An unfinanced purchase is 100% down."""
    if not financing.use_loan:
        return price
    return (price * financing.down_payment_percent / 100).quantize(TWO_PLACES, ROUND_HALF_UP)


def loan_facts(price: Decimal, financing: Financing) -> LoanFacts:
    """Down payment, principal and installment for a purchase."""
    down = down_payment(price, financing)
    if not financing.use_loan:
        return LoanFacts(loan_amount=ZERO, down_payment=down, monthly_loan_payment=ZERO)

    # Principal is derived from the rounded down payment so the two always sum to price
    principal = price - down
    pmt = monthly_payment(principal, financing.monthly_rate, financing.term_months)
    return LoanFacts(loan_amount=principal, down_payment=down, monthly_loan_payment=pmt)


def amortization_schedule(
    principal: Decimal,
    monthly_rate: Decimal,
    term_months: int,
) -> AmortizationSchedule:
    """Month-by-month schedule. The final payment clears any rounding residue."""
    pmt = monthly_payment(principal, monthly_rate, term_months)
    if pmt == 0:
        return AmortizationSchedule(
            payments=(), monthly_payment=ZERO, total_interest=ZERO, total_principal=ZERO
        )

    rate = max(monthly_rate, ZERO)
    payments: list[AmortizationPayment] = []
    balance = principal
    total_interest = ZERO
    total_principal = ZERO

    for period in range(1, term_months + 1):
        interest = (balance * rate).quantize(TWO_PLACES, ROUND_HALF_UP)
        principal_paid = pmt - interest

        if period == term_months or principal_paid > balance:
            principal_paid = balance
            actual_payment = interest + principal_paid
        else:
            actual_payment = pmt

        balance -= principal_paid
        total_interest += interest
        total_principal += principal_paid

        payments.append(AmortizationPayment(
            period=period,
            payment=actual_payment,
            principal=principal_paid,
            interest=interest,
            balance=balance.quantize(TWO_PLACES, ROUND_HALF_UP),
        ))

    return AmortizationSchedule(
        payments=tuple(payments),
        monthly_payment=pmt,
        total_interest=total_interest,
        total_principal=total_principal,
    )


def yearly_debt_summary(schedule: AmortizationSchedule) -> tuple[YearlyDebt, ...]:
    """Roll the monthly schedule up into loan years (months 1-12 are year 1).

    A term that is not a whole number of years ends with a short final year.
    """
    summary = []
    for year, group in groupby(schedule.payments, key=lambda p: (p.period - 1) // 12 + 1):
        months = list(group)
        summary.append(YearlyDebt(
            year=year,
            principal=sum((p.principal for p in months), ZERO),
            interest=sum((p.interest for p in months), ZERO),
            debt_service=sum((p.payment for p in months), ZERO),
            ending_balance=months[-1].balance,
        ))
    return tuple(summary)
