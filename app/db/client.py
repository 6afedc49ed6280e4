"""
MongoDB client initialization and access utilities.

This module configures and manages the asynchronous MongoDB client used by
the offering backend. It connects to the database using Motor (the async
MongoDB driver for Python) and exposes the database and the three offering
stores built on top of it.

Environment variables:
    - MONGODB_URI:         Full MongoDB connection string (default: mongodb://localhost:27017)
    - MONGODB_DB:          Database name (default: edc_backend)
    - ASSETS_COLLECTION:    Asset collection (default: assets)
    - POLICIES_COLLECTION:  Policy definition collection (default: policy_definitions)
    - CONTRACTS_COLLECTION: Contract definition collection (default: contract_definitions)

Usage example:
    >>> from app.db.client import init_mongo, get_db, build_stores
    >>> await init_mongo()
    >>> assets, policies, contracts = build_stores(get_db())
"""

import os
from typing import Optional, Tuple

import structlog
from dotenv import load_dotenv
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.db.stores import MongoAssetStore, MongoContractDefinitionStore, MongoPolicyDefinitionStore

# Load environment variables from .env file
load_dotenv()

logger = structlog.get_logger(__name__)

# ------------------------------------------------------------------------------
# Configuration
# ------------------------------------------------------------------------------

MONGO_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
MONGO_DB_NAME = os.getenv("MONGODB_DB", "edc_backend")
ASSETS_COLLECTION = os.getenv("ASSETS_COLLECTION", "assets")
POLICIES_COLLECTION = os.getenv("POLICIES_COLLECTION", "policy_definitions")
CONTRACTS_COLLECTION = os.getenv("CONTRACTS_COLLECTION", "contract_definitions")

# Global MongoDB client and database references
client: Optional[AsyncIOMotorClient] = None
_db: Optional[AsyncIOMotorDatabase] = None

# ------------------------------------------------------------------------------
# Initialization
# ------------------------------------------------------------------------------

async def init_mongo(uri: str = MONGO_URI, db_name: str = MONGO_DB_NAME):
    """
    Initialize the global MongoDB client and database connection.

    It should be called once during application startup (see `app.main`).
    Motor connects lazily, so an unreachable server surfaces on the first
    store call rather than here.

    Args:
        uri (str): MongoDB connection string.
        db_name (str): Name of the database holding the offering collections.
    """
    global client, _db
    client = AsyncIOMotorClient(uri)
    _db = client[db_name]
    logger.info("mongo.connected", uri=uri, database=db_name)


def close_mongo():
    """Close the global MongoDB client, if any."""
    global client, _db
    if client is not None:
        client.close()
        logger.info("mongo.closed")
    client = None
    _db = None

# ------------------------------------------------------------------------------
# Database Access
# ------------------------------------------------------------------------------

def get_db() -> AsyncIOMotorDatabase:
    """
    Retrieve the initialized MongoDB database instance.

    Returns:
        AsyncIOMotorDatabase: The connected MongoDB database instance.

    Raises:
        RuntimeError: If the database has not been initialized yet
        (i.e., `init_mongo()` has not been called).
    """

    if _db is None:
        raise RuntimeError("MongoDB was not initialized. Call init_mongo() first.")
    return _db


def build_stores(db: AsyncIOMotorDatabase) -> Tuple[MongoAssetStore, MongoPolicyDefinitionStore, MongoContractDefinitionStore]:
    """
    Build the asset, policy definition and contract definition stores.

    Args:
        db (AsyncIOMotorDatabase): Database holding the offering collections.

    Returns:
        tuple: ``(asset_store, policy_store, contract_store)``.
    """

    return (
        MongoAssetStore(db[ASSETS_COLLECTION]),
        MongoPolicyDefinitionStore(db[POLICIES_COLLECTION]),
        MongoContractDefinitionStore(db[CONTRACTS_COLLECTION]),
    )
