"""
pytest configuration and fixtures for the country records test suite
The app is built around an in-memory store so no Cassandra cluster is needed.
"""

import pytest
import pytest_asyncio
import httpx

from country_records.app import create_app
from country_records.database.country_store import CountryStore, InMemoryCountryStore
from country_records.utils.error_handling import StorageError


SEED_COUNTRIES = [
    {"country": "Kenya", "capital": "Nairobi", "population": 54000000},
    {"country": "Japan", "capital": "Tokyo", "population": 125000000},
    {"country": "Chile", "capital": "Santiago", "population": 19000000},
]


class FailingCountryStore(CountryStore):
    """Store whose every call fails the way a driver error surfaces"""

    def __init__(self):
        self.calls = []

    async def _fail(self, name, message):
        self.calls.append(name)
        raise StorageError(message) from ConnectionError("cluster unreachable")

    async def upsert(self, country, capital, population):
        await self._fail("upsert", "Error inserting data")

    async def get(self, country):
        await self._fail("get", "Error fetching country")

    async def fetch_page(self, limit, offset):
        await self._fail("fetch_page", "Error fetching countries")

    async def delete_if_exists(self, country):
        await self._fail("delete_if_exists", "Error deleting country")

    async def rename(self, old_country, new_country, capital, population):
        await self._fail("rename", "Error updating country")

    async def ping(self):
        await self._fail("ping", "Error checking database health")


class FailingWritesCountryStore(InMemoryCountryStore):
    """Reads succeed against the seeded rows, every write fails"""

    async def upsert(self, country, capital, population):
        raise StorageError("Error inserting data") from ConnectionError("write timeout")

    async def rename(self, old_country, new_country, capital, population):
        raise StorageError("Error updating country") from ConnectionError("write timeout")


class BrokenCountryStore(InMemoryCountryStore):
    """Raises an exception the error kinds do not cover"""

    async def fetch_page(self, limit, offset):
        raise RuntimeError("unexpected driver state")


@pytest.fixture
def store() -> InMemoryCountryStore:
    return InMemoryCountryStore(SEED_COUNTRIES)


@pytest.fixture
def empty_store() -> InMemoryCountryStore:
    return InMemoryCountryStore()


@pytest.fixture
def failing_store() -> FailingCountryStore:
    return FailingCountryStore()


def _client_for(store):
    app = create_app(store=store)
    transport = httpx.ASGITransport(app=app)
    return httpx.AsyncClient(transport=transport, base_url="http://test")


@pytest_asyncio.fixture
async def client(store):
    async with _client_for(store) as ac:
        yield ac


@pytest_asyncio.fixture
async def empty_client(empty_store):
    async with _client_for(empty_store) as ac:
        yield ac


@pytest_asyncio.fixture
async def failing_client(failing_store):
    async with _client_for(failing_store) as ac:
        yield ac


@pytest_asyncio.fixture
async def failing_writes_client():
    async with _client_for(FailingWritesCountryStore(SEED_COUNTRIES)) as ac:
        yield ac


@pytest_asyncio.fixture
async def broken_client():
    async with _client_for(BrokenCountryStore(SEED_COUNTRIES)) as ac:
        yield ac
