import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from recipe_catalog.database import create_tables, get_db, make_engine, make_session_maker
from recipe_catalog.main import app
from recipe_catalog.seed import seed_database


@pytest_asyncio.fixture
async def engine(tmp_path):
    """A fresh SQLite file per test, with tables created."""
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine):
    return make_session_maker(engine)


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def seeded(engine):
    await seed_database(engine)


@pytest_asyncio.fixture
async def client(session_maker):
    """HTTP client against the app with the database dependency swapped out."""
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
