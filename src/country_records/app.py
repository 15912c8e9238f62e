"""
Country Records Backend API Server
CRUD over a single countries table stored in Cassandra / Astra DB
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from country_records.config.settings import ALLOWED_ORIGINS, LOG_LEVEL
from country_records.database.connection import init_database, close_database
from country_records.database.country_store import CountryStore
from country_records.api.routes import countries, health
from country_records.utils.error_handling import setup_error_handling

logger = logging.getLogger(__name__)


def setup_logging():
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("cassandra").setLevel(logging.WARNING)


def create_app(store: Optional[CountryStore] = None) -> FastAPI:
    """Build the FastAPI app; an injected store skips connecting to Cassandra"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager"""
        if store is None:
            app.state.country_store = await init_database()
        logger.info("Country Records Backend started")
        yield
        if store is None:
            await close_database(app.state.country_store)
        logger.info("Country Records Backend shutting down")

    app = FastAPI(
        title="Country Records Backend",
        description="CRUD API for country records backed by Cassandra",
        version="1.0.0",
        lifespan=lifespan
    )

    if store is not None:
        app.state.country_store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    setup_error_handling(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(countries.router, tags=["Countries"])

    return app
