"""
Country store implementations
CountryStore is the interface the service layer talks to. CassandraCountryStore
runs parameterized CQL against the countries table; InMemoryCountryStore keeps
rows in a dict with the same semantics for local development and tests.
"""

import asyncio
import logging
from functools import partial
from itertools import islice
from typing import Any, Callable, Dict, List, Optional

from cassandra.query import BatchStatement, BatchType, dict_factory

from country_records.utils.error_handling import StorageError

logger = logging.getLogger(__name__)

INSERT_COUNTRY_CQL = "INSERT INTO countries (country, capital, population) VALUES (?, ?, ?)"
SELECT_COUNTRIES_CQL = "SELECT country, capital, population FROM countries LIMIT ?"
SELECT_COUNTRY_CQL = "SELECT country, capital, population FROM countries WHERE country = ?"
DELETE_COUNTRY_CQL = "DELETE FROM countries WHERE country = ?"
DELETE_COUNTRY_IF_EXISTS_CQL = "DELETE FROM countries WHERE country = ? IF EXISTS"
HEALTH_CHECK_CQL = "SELECT release_version FROM system.local"


class CountryStore:
    """Storage interface for country records keyed by country name"""

    async def upsert(self, country: str, capital: str, population: int) -> None:
        """Insert a row, overwriting any row with the same key"""
        raise NotImplementedError

    async def get(self, country: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    async def fetch_page(self, limit: int, offset: int) -> List[Dict[str, Any]]:
        """Return at most `limit` rows after skipping `offset` rows, in scan order"""
        raise NotImplementedError

    async def delete_if_exists(self, country: str) -> bool:
        """Delete a row atomically with its existence check; False if absent"""
        raise NotImplementedError

    async def rename(self, old_country: str, new_country: str, capital: str, population: int) -> None:
        """Move a row to a new key, leaving a single row under `new_country`"""
        raise NotImplementedError

    async def ping(self) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        pass


class CassandraCountryStore(CountryStore):
    """Country store backed by a Cassandra / Astra DB session"""

    def __init__(self, session, cluster=None):
        self.session = session
        self.cluster = cluster
        self.session.row_factory = dict_factory

        # Prepared once, reused for every request
        self._insert = session.prepare(INSERT_COUNTRY_CQL)
        self._select_page = session.prepare(SELECT_COUNTRIES_CQL)
        self._select_one = session.prepare(SELECT_COUNTRY_CQL)
        self._delete = session.prepare(DELETE_COUNTRY_CQL)
        self._delete_if_exists = session.prepare(DELETE_COUNTRY_IF_EXISTS_CQL)

        logger.info("Cassandra country store initialized")

    async def _run(self, operation: str, func: Callable, *args) -> Any:
        """Run a blocking driver call in the default executor, wrapping driver failures"""
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, partial(func, *args))
        except Exception as e:
            logger.error(f"Cassandra {operation} failed: {e}")
            raise StorageError(f"Error {operation}") from e

    async def upsert(self, country: str, capital: str, population: int) -> None:
        await self._run("inserting data", self.session.execute, self._insert, (country, capital, population))

    async def get(self, country: str) -> Optional[Dict[str, Any]]:
        result = await self._run("fetching country", self.session.execute, self._select_one, (country,))
        return result.one()

    async def fetch_page(self, limit: int, offset: int) -> List[Dict[str, Any]]:
        # CQL has no OFFSET: fetch offset + limit rows and skip client side
        def fetch_window():
            result = self.session.execute(self._select_page, (offset + limit,))
            return list(islice(result, offset, offset + limit))

        return await self._run("fetching countries", fetch_window)

    async def delete_if_exists(self, country: str) -> bool:
        result = await self._run("deleting country", self.session.execute, self._delete_if_exists, (country,))
        return result.was_applied

    async def rename(self, old_country: str, new_country: str, capital: str, population: int) -> None:
        batch = BatchStatement(batch_type=BatchType.LOGGED)
        batch.add(self._insert, (new_country, capital, population))
        batch.add(self._delete, (old_country,))
        await self._run("updating country", self.session.execute, batch)

    async def ping(self) -> None:
        await self._run("checking database health", self.session.execute, HEALTH_CHECK_CQL)

    async def close(self) -> None:
        if self.cluster is not None:
            self.cluster.shutdown()
        logger.info("Cassandra connections closed")


class InMemoryCountryStore(CountryStore):
    """Dict-backed country store; iteration order is insertion order"""

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None):
        self.rows: Dict[str, Dict[str, Any]] = {}
        for row in rows or []:
            self.rows[row["country"]] = dict(row)

    async def upsert(self, country: str, capital: str, population: int) -> None:
        self.rows[country] = {"country": country, "capital": capital, "population": population}

    async def get(self, country: str) -> Optional[Dict[str, Any]]:
        row = self.rows.get(country)
        return dict(row) if row else None

    async def fetch_page(self, limit: int, offset: int) -> List[Dict[str, Any]]:
        return [dict(row) for row in islice(self.rows.values(), offset, offset + limit)]

    async def delete_if_exists(self, country: str) -> bool:
        return self.rows.pop(country, None) is not None

    async def rename(self, old_country: str, new_country: str, capital: str, population: int) -> None:
        self.rows.pop(old_country, None)
        await self.upsert(new_country, capital, population)

    async def ping(self) -> None:
        pass
