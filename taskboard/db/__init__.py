# taskboard/db/__init__.py
"""
Database module.

Owns the Motor client and registers the Beanie documents.
"""
from typing import Optional

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from taskboard.core.config import settings
from taskboard.core.logging import log
from taskboard.models import DOCUMENT_MODELS

# Motor client instance
_client = None
_db = None
_connection_error: Optional[str] = None


async def connect_db(client=None) -> None:
    """
    Connect to MongoDB and initialise Beanie.

    A pre-built client (e.g. an in-memory one in tests) may be injected.
    If MongoDB is not available the error is stored for the health check
    rather than crashing start-up.
    """
    global _client, _db, _connection_error
    try:
        if client is None:
            client = AsyncIOMotorClient(settings.MONGO_URL, serverSelectionTimeoutMS=5000)
            # Fail fast if MongoDB is not running
            await client.admin.command("ping")

        _client = client
        _db = client[settings.DB_NAME]

        await init_beanie(database=_db, document_models=DOCUMENT_MODELS)
        log("DB", f"Connected to MongoDB, database '{settings.DB_NAME}'")
        _connection_error = None
    except Exception as e:
        error_msg = str(e)
        log("DB", f"MongoDB not available: {error_msg}")
        log("DB", f"Task endpoints will fail until MongoDB is reachable at {settings.MONGO_URL}")
        _client = None
        _db = None
        _connection_error = error_msg


async def disconnect_db() -> None:
    """Disconnect from MongoDB."""
    global _client, _db
    if _client is not None:
        _client.close()
        log("DB", "Disconnected from MongoDB")
    _client = None
    _db = None


def is_connected() -> bool:
    """Check if database is connected."""
    return _db is not None


def get_connection_error() -> Optional[str]:
    """Get connection error message if connection failed."""
    return _connection_error


__all__ = ["connect_db", "disconnect_db", "is_connected", "get_connection_error"]
