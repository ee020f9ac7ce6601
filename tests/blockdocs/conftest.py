import pytest, pytest_asyncio

from blockdocs.environment import Environment, set_current_env
from blockdocs.settings import get_settings

from .setup.clock import ManualScheduler
from .setup.stores import RecordingStore


# ===========================================================================================
# ENV AND SETTINGS
# ===========================================================================================

ENV = set_current_env(Environment.TESTING)
SETTINGS = get_settings()
DCS = SETTINGS.db.get_primary()


# ===========================================================================================
# HOOKS
# ===========================================================================================

@pytest_asyncio.fixture(scope="function")
async def database():
    """Fresh schema on the in-memory database for one test.

    The in-memory database lives exactly as long as the engine's single connection,
    so disposing the engine afterwards also throws the data away.
    """
    from blockdocs.models import Base

    async with DCS.sqlalchemy_transaction() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield DCS

    await DCS.sqlalchemy_dispose_async_engine()


# ===========================================================================================
# FIXTURES
# ===========================================================================================

@pytest.fixture
def clock() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def failing_store() -> RecordingStore:
    return RecordingStore(fail=True)


@pytest_asyncio.fixture
async def repository(database):
    from blockdocs.repository import DocsRepository
    return DocsRepository()


@pytest_asyncio.fixture
async def owner(repository):
    return await repository.create_user("owner@example.com", "Owner")


@pytest_asyncio.fixture
async def stranger(repository):
    return await repository.create_user("stranger@example.com", "Stranger")
