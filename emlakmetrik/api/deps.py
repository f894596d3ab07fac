"""FastAPI dependency injection."""

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from emlakmetrik.config import settings
from emlakmetrik.data.regional import RegionalDefaultsProvider

engine = create_async_engine(settings.database_url, echo=settings.debug)
async_session = async_sessionmaker(engine, expire_on_commit=False)


async def get_db() -> AsyncSession:
    async with async_session() as session:
        yield session


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_session


def get_regional_provider() -> RegionalDefaultsProvider:
    return RegionalDefaultsProvider(async_session)
