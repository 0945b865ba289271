import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from commanderdle.models.db import Base
from commanderdle.services.http_client import HttpRetryClient

TOPDECK_URL = "https://topdeck.test/api"
SCRYFALL_URL = "https://scryfall.test"


def no_sleep(_seconds: float) -> None:
    """Sleep replacement so retry tests run instantly."""


@pytest.fixture
def sample_decklist() -> str:
    """Topdeck decklist with a partner pair."""
    return (
        "~~Commanders~~\n"
        "1 Tymna the Weaver\n"
        "1 Kraum, Ludevic's Opus\n"
        "~~Mainboard~~\n"
        "1 Sol Ring\n"
        "1 Arid Mesa\n"
        "1 Delver of Secrets // Insectile Aberration\n"
        "~~Sideboard~~\n"
        "1 Flusterstorm"
    )


@pytest.fixture
def topdeck_http():
    client = HttpRetryClient(TOPDECK_URL, api_key="test-key", sleep=no_sleep)
    yield client
    client.close()


@pytest.fixture
def scryfall_http():
    client = HttpRetryClient(SCRYFALL_URL, sleep=no_sleep)
    yield client
    client.close()


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory) -> AsyncSession:
    """Provide a database session for tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def topdeck_url() -> str:
    return TOPDECK_URL


@pytest.fixture
def scryfall_url() -> str:
    return SCRYFALL_URL
