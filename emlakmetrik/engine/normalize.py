"""Raw user input → AnalysisInput.

Malformed numbers are absorbed as zero rather than rejected, so an
interactive preview can call this on every keystroke without raising.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable

from emlakmetrik.models.inputs import (
    AnalysisInput,
    Financing,
    DEFAULT_PROJECTION_OFFSETS,
)
from emlakmetrik.models.regional import FALLBACK_DEFAULTS, RegionalDefaults

ZERO = Decimal("0")
TWO_PLACES = Decimal("0.01")

# Upper bound for any currency or area field (one trillion). Keeps every
# derived figure, including a compounded projection, within Decimal's
# default 28-digit precision.
MAX_AMOUNT = Decimal("1000000000000")
MAX_PROJECTION_YEARS = 30


@dataclass(frozen=True)
class SliderLimit:
    min: Decimal
    max: Decimal
    step: Decimal

    def clamp(self, value: Decimal) -> Decimal:
        return max(self.min, min(self.max, value))


SLIDER_LIMITS: dict[str, SliderLimit] = {
    "loan_rate": SliderLimit(Decimal("0"), Decimal("5"), Decimal("0.01")),
    "loan_term": SliderLimit(Decimal("12"), Decimal("180"), Decimal("12")),
    "down_payment": SliderLimit(Decimal("10"), Decimal("50"), Decimal("5")),
    # The form slider stops at 0; stored regional rates may be negative
    "appreciation": SliderLimit(Decimal("-100"), Decimal("100"), Decimal("5")),
}


def to_decimal(value: Any) -> Decimal:
    """Parse a user-entered number. Empty, invalid, NaN and infinite → 0."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        result = value
    else:
        text = str(value).strip()
        if not text:
            return ZERO
        try:
            result = Decimal(text)
        except InvalidOperation:
            return ZERO
    if not result.is_finite():
        return ZERO
    return result


def non_negative(value: Any) -> Decimal:
    """Currency or area: floored at 0, capped at MAX_AMOUNT, rounded to cents."""
    value = min(max(to_decimal(value), ZERO), MAX_AMOUNT)
    return value.quantize(TWO_PLACES, ROUND_HALF_UP)


def _on_slider(name: str, value: Decimal) -> Decimal:
    return SLIDER_LIMITS[name].clamp(value).quantize(TWO_PLACES, ROUND_HALF_UP)


def projection_years(offsets: Iterable[int]) -> tuple[int, ...]:
    """Year offsets clamped to 0..MAX_PROJECTION_YEARS, order kept."""
    return tuple(min(max(int(o), 0), MAX_PROJECTION_YEARS) for o in offsets)


def build_financing(
    use_loan: bool,
    down_payment_percent: Any = None,
    monthly_interest_rate_percent: Any = None,
    term_months: Any = None,
    defaults: RegionalDefaults = FALLBACK_DEFAULTS,
) -> Financing:
    """Financing terms clamped to the slider limits, defaulted from regional data."""
    if not use_loan:
        return Financing.cash()

    def pick(raw: Any, fallback: Decimal) -> Decimal:
        return fallback if raw is None or raw == "" else to_decimal(raw)

    down = _on_slider("down_payment", pick(down_payment_percent, defaults.default_down_payment))
    rate = _on_slider("loan_rate", pick(monthly_interest_rate_percent, defaults.default_loan_rate))
    term = SLIDER_LIMITS["loan_term"].clamp(pick(term_months, Decimal(defaults.default_loan_term)))
    return Financing.loan(
        down_payment_percent=down,
        monthly_interest_rate_percent=rate,
        term_months=int(term),
    )


def build_analysis_input(
    price: Any,
    monthly_rent: Any,
    monthly_dues: Any = None,
    renovation_cost: Any = None,
    property_area: Any = None,
    use_loan: bool = False,
    down_payment_percent: Any = None,
    monthly_interest_rate_percent: Any = None,
    term_months: Any = None,
    appreciation_rate_percent: Any = None,
    defaults: RegionalDefaults = FALLBACK_DEFAULTS,
    projection_offsets: tuple[int, ...] = DEFAULT_PROJECTION_OFFSETS,
) -> AnalysisInput:
    """Assemble an engine input from raw form values and regional defaults.

    Missing financing terms and appreciation come from `defaults`; the
    regional benchmark is attached only when `defaults` is a real match.
    Appreciation is bounded to -100..100 %/yr; zero and negative rates are
    valid. Projection offsets are bounded to MAX_PROJECTION_YEARS.
    """
    if appreciation_rate_percent is None or appreciation_rate_percent == "":
        appreciation = defaults.appreciation_rate
    else:
        appreciation = to_decimal(appreciation_rate_percent)
    appreciation = _on_slider("appreciation", appreciation)

    return AnalysisInput(
        price=non_negative(price),
        monthly_rent=non_negative(monthly_rent),
        monthly_dues=non_negative(monthly_dues),
        renovation_cost=non_negative(renovation_cost),
        property_area=non_negative(property_area),
        financing=build_financing(
            use_loan,
            down_payment_percent,
            monthly_interest_rate_percent,
            term_months,
            defaults=defaults,
        ),
        appreciation_rate_percent=appreciation,
        regional_benchmark=defaults.benchmark(),
        projection_offsets=projection_years(projection_offsets),
    )
