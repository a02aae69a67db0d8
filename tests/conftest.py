import pytest
import pytest_asyncio

from nuleaf.db_context import Database
from nuleaf.repositories import build_repositories
from nuleaf.schema import create_schema, truncate_all
from tests.fakes import InMemoryDatabase


@pytest.fixture
def memory_db():
    """Database backed by a single in-memory connection."""
    return InMemoryDatabase()


@pytest.fixture
def memory_repos(memory_db):
    return build_repositories(memory_db)


@pytest.fixture(scope="session")
def postgres_container():
    """Start a PostgreSQL test container for the session, or skip without one."""
    postgres = pytest.importorskip("testcontainers.postgres")
    container = postgres.PostgresContainer("postgres:17")
    try:
        container.start()
    except Exception as exc:
        pytest.skip(f"PostgreSQL container unavailable: {exc}")
    yield container
    container.stop()


@pytest_asyncio.fixture
async def database(postgres_container):
    """A pool on the test container with empty tables, closed after each test."""
    host = postgres_container.get_container_host_ip()
    port = postgres_container.get_exposed_port(5432)
    dsn = f"postgresql://{postgres_container.username}:{postgres_container.password}@{host}:{port}/{postgres_container.dbname}"

    database = await Database.connect(dsn, min_size=1, max_size=5, name="test")
    await create_schema(database)

    yield database

    await truncate_all(database)
    await database.close()


@pytest_asyncio.fixture
async def repositories(database):
    return build_repositories(database)
