"""
Configuration settings for the Country Records Backend
"""

import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Relative bundle paths resolve against the project root, not the working directory
PROJECT_ROOT = Path(__file__).resolve().parents[3]

# Server configuration
PORT = int(os.getenv("PORT", 5000))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Store configuration
COUNTRY_STORE = os.getenv("COUNTRY_STORE", "cassandra").lower()  # cassandra or memory

# Astra DB (secure connect bundle)
ASTRA_DB_BUNDLE_PATH = os.getenv("ASTRA_DB_BUNDLE_PATH")
ASTRA_DB_CLIENT_ID = os.getenv("ASTRA_DB_CLIENT_ID")
ASTRA_DB_SECRET = os.getenv("ASTRA_DB_SECRET")
ASTRA_DB_KEYSPACE = os.getenv("ASTRA_DB_KEYSPACE")

# Self-managed Cassandra cluster, used when no bundle is configured
CASSANDRA_CONTACT_POINTS = [
    host.strip() for host in os.getenv("CASSANDRA_CONTACT_POINTS", "").split(",") if host.strip()
]
CASSANDRA_PORT = int(os.getenv("CASSANDRA_PORT", 9042))

# CORS settings
ALLOWED_ORIGINS = [origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",") if origin.strip()]


def resolve_bundle_path(bundle_path: str) -> Path:
    """Resolve the secure connect bundle path against the project root"""
    path = Path(bundle_path)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path


def validate_store_settings():
    """Validate the connection settings needed to reach Cassandra"""
    if not ASTRA_DB_BUNDLE_PATH and not CASSANDRA_CONTACT_POINTS:
        raise ValueError("ASTRA_DB_BUNDLE_PATH or CASSANDRA_CONTACT_POINTS environment variable is required")
    if not ASTRA_DB_KEYSPACE:
        raise ValueError("ASTRA_DB_KEYSPACE environment variable is required")
    if ASTRA_DB_BUNDLE_PATH and not (ASTRA_DB_CLIENT_ID and ASTRA_DB_SECRET):
        raise ValueError("ASTRA_DB_CLIENT_ID and ASTRA_DB_SECRET are required with a secure connect bundle")
    if not ASTRA_DB_CLIENT_ID:
        logger.warning("ASTRA_DB_CLIENT_ID not set - connecting to Cassandra without authentication")
