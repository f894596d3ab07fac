"""Regional market defaults: most specific matching row, else the country fallback.

Match order: neighborhood → district → city → country fallback.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from emlakmetrik.data.cache import cached
from emlakmetrik.data.location import parse_location_string
from emlakmetrik.models.db import RegionalDefaultRecord
from emlakmetrik.models.regional import FALLBACK_DEFAULTS, MatchLevel, RegionalDefaults

logger = logging.getLogger(__name__)

# Columns that override the fallback when the matched row has a value
_VALUE_FIELDS = (
    "avg_price_per_sqm",
    "avg_rent_per_sqm",
    "avg_dues",
    "appreciation_rate",
    "rent_increase_rate",
    "default_loan_rate",
    "default_loan_term",
    "default_down_payment",
)


def merge_with_fallback(row: RegionalDefaultRecord, level: MatchLevel) -> RegionalDefaults:
    """Overlay a regional row on the fallback so missing columns keep country values."""
    update = {
        name: getattr(row, name)
        for name in _VALUE_FIELDS
        if getattr(row, name) is not None
    }
    update.update(
        city=row.city,
        district=row.district,
        neighborhood=row.neighborhood,
        match_level=level,
        data_source=row.data_source,
    )
    if row.last_updated is not None:
        update["last_updated"] = row.last_updated
    return FALLBACK_DEFAULTS.model_copy(update=update)


class RegionalDefaultsProvider:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def lookup(self, location: str) -> RegionalDefaults:
        parsed = parse_location_string(location)
        return await self.lookup_components(parsed.city, parsed.district, parsed.neighborhood)

    async def lookup_components(
        self, city: str, district: str | None = None, neighborhood: str | None = None
    ) -> RegionalDefaults:
        """Cascade lookup. A database error answers with the fallback, uncached."""
        if not city or len(city) < 2:
            return FALLBACK_DEFAULTS
        try:
            return await self._query(city, district, neighborhood)
        except SQLAlchemyError as e:
            logger.warning("Regional defaults lookup failed for %s: %s", city, e)
            return FALLBACK_DEFAULTS

    @cached("regional:defaults", RegionalDefaults)
    async def _query(
        self, city: str, district: str | None, neighborhood: str | None
    ) -> RegionalDefaults:
        candidates: list[tuple[MatchLevel, str | None, str | None]] = []
        if district and neighborhood:
            candidates.append((MatchLevel.NEIGHBORHOOD, district, neighborhood))
        if district:
            candidates.append((MatchLevel.DISTRICT, district, None))
        candidates.append((MatchLevel.CITY, None, None))

        async with self.session_factory() as session:
            for level, d, n in candidates:
                row = await self._find(session, city, d, n)
                if row is not None:
                    logger.info("Regional defaults for %s matched at %s level", city, level.value)
                    return merge_with_fallback(row, level)

        logger.info("No regional data for %s, using fallback", city)
        return FALLBACK_DEFAULTS

    @staticmethod
    async def _find(
        session: AsyncSession, city: str, district: str | None, neighborhood: str | None
    ) -> RegionalDefaultRecord | None:
        stmt = select(RegionalDefaultRecord).where(RegionalDefaultRecord.city == city)
        if district is None:
            stmt = stmt.where(RegionalDefaultRecord.district.is_(None))
        else:
            stmt = stmt.where(RegionalDefaultRecord.district == district)
        if neighborhood is None:
            stmt = stmt.where(RegionalDefaultRecord.neighborhood.is_(None))
        else:
            stmt = stmt.where(RegionalDefaultRecord.neighborhood == neighborhood)

        result = await session.execute(stmt.limit(1))
        return result.scalars().first()
