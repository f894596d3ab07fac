"""Market price comparison and compound value projection.

Pure functions: Decimal in, Decimal out. No I/O.
"""

from decimal import Decimal, ROUND_HALF_UP

from emlakmetrik.models.inputs import RegionalBenchmark, DEFAULT_PROJECTION_OFFSETS
from emlakmetrik.models.results import MarketComparison, ProjectionPoint

TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")
ZERO = Decimal("0")


def price_per_area(price: Decimal, area: Decimal) -> Decimal | None:
    if area <= 0:
        return None
    return (price / area).quantize(TWO_PLACES, ROUND_HALF_UP)


def compare_to_market(
    price: Decimal,
    area: Decimal,
    benchmark: RegionalBenchmark | None,
) -> MarketComparison | None:
    """Deviation of the property's unit price from the regional average.

    Returns None unless both a positive area and a positive benchmark exist.
    The comparison uses the exact unit price; only the reported figure is
    rounded.
    """
    if area <= 0 or benchmark is None or benchmark.avg_price_per_area <= 0:
        return None

    bench = benchmark.avg_price_per_area
    exact = price / area
    difference = ((exact - bench) / bench * 100).quantize(FOUR_PLACES, ROUND_HALF_UP)
    return MarketComparison(
        price_per_area=exact.quantize(TWO_PLACES, ROUND_HALF_UP),
        benchmark_price_per_area=bench,
        difference_percent=difference,
        is_below_market=exact < bench,
    )


def projected_value(price: Decimal, appreciation_rate_percent: Decimal, years: int) -> Decimal:
    """Value after `years` of compounding at the annual appreciation rate."""
    if years <= 0:
        return price.quantize(TWO_PLACES, ROUND_HALF_UP)
    growth = max(1 + appreciation_rate_percent / 100, ZERO)
    return (price * growth ** years).quantize(TWO_PLACES, ROUND_HALF_UP)


def value_projection(
    price: Decimal,
    appreciation_rate_percent: Decimal,
    base_year: int,
    offsets: tuple[int, ...] = DEFAULT_PROJECTION_OFFSETS,
) -> tuple[ProjectionPoint, ...]:
    return tuple(
        ProjectionPoint(
            year_offset=offset,
            year=base_year + offset,
            value=projected_value(price, appreciation_rate_percent, offset),
        )
        for offset in offsets
    )
