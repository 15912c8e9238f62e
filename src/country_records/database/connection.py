"""
Database connection management
"""

import asyncio
import logging

from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import Cluster

from country_records.config import settings
from country_records.database.country_store import CassandraCountryStore, CountryStore, InMemoryCountryStore

logger = logging.getLogger(__name__)


def build_cluster() -> Cluster:
    """Build a Cluster from the secure connect bundle or the configured contact points"""
    settings.validate_store_settings()

    auth_provider = None
    if settings.ASTRA_DB_CLIENT_ID:
        auth_provider = PlainTextAuthProvider(settings.ASTRA_DB_CLIENT_ID, settings.ASTRA_DB_SECRET)

    if settings.ASTRA_DB_BUNDLE_PATH:
        bundle = settings.resolve_bundle_path(settings.ASTRA_DB_BUNDLE_PATH)
        logger.info(f"Connecting to Astra DB with bundle {bundle}")
        return Cluster(cloud={"secure_connect_bundle": str(bundle)}, auth_provider=auth_provider)

    logger.info(f"Connecting to Cassandra at {', '.join(settings.CASSANDRA_CONTACT_POINTS)}:{settings.CASSANDRA_PORT}")
    return Cluster(
        contact_points=settings.CASSANDRA_CONTACT_POINTS,
        port=settings.CASSANDRA_PORT,
        auth_provider=auth_provider,
    )


def connect_cassandra() -> CassandraCountryStore:
    cluster = build_cluster()
    try:
        session = cluster.connect(settings.ASTRA_DB_KEYSPACE)
        return CassandraCountryStore(session, cluster=cluster)
    except Exception:
        cluster.shutdown()
        raise


async def init_database() -> CountryStore:
    """Create the country store selected by COUNTRY_STORE"""
    if settings.COUNTRY_STORE == "memory":
        logger.warning("Using in-memory country store - data is lost on restart")
        return InMemoryCountryStore()

    if settings.COUNTRY_STORE != "cassandra":
        raise ValueError(f"Unsupported COUNTRY_STORE: {settings.COUNTRY_STORE}")

    loop = asyncio.get_running_loop()
    store = await loop.run_in_executor(None, connect_cassandra)

    # Test connection
    await store.ping()

    logger.info(f"Connected to Cassandra keyspace {settings.ASTRA_DB_KEYSPACE}")
    return store


async def close_database(store: CountryStore):
    """Close the country store connections"""
    await store.close()
