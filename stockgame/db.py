from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from stockgame.load_settings import database_url
from stockgame.models.schemas import Base


def build_engine(url: str = database_url):
    if url.startswith("sqlite"):
        return create_async_engine(url=url, echo=False)
    return create_async_engine(url, pool_size=20, max_overflow=20)


engine = build_engine()

# Centralized session factory to avoid creating it in router modules.
Session = async_sessionmaker(
    autocommit=False,
    class_=AsyncSession,
    autoflush=True,
    bind=engine,
)


async def create_tables(bind=engine) -> None:
    """Create the game table if it does not exist yet."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
