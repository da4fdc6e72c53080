import motor.motor_asyncio
import logging

from clyra_api.core.config import Settings

# Set up logger
logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "clyra"


def mask_uri(uri: str) -> str:
    """Mask the password in a MongoDB connection string for logging"""
    scheme, sep, rest = uri.partition("://")
    if not sep:
        return uri

    # split on the last "@" so a raw "@" inside the password stays masked
    userinfo, at_sign, hosts = rest.rpartition("@")
    if not at_sign or ":" not in userinfo:
        return uri

    user = userinfo.split(":", 1)[0]
    return f"{scheme}://{user}:****@{hosts}"


def create_client(settings: Settings) -> motor.motor_asyncio.AsyncIOMotorClient:
    """
    Create the process-wide Motor client.

    Raises:
        ValueError: if no MongoDB URI is configured
    """
    uri = settings.effective_mongo_uri
    logger.info(f"MongoDB URI configured: {mask_uri(uri)}")

    return motor.motor_asyncio.AsyncIOMotorClient(
        uri,
        tz_aware=True,
        maxPoolSize=10,              # Limit to 10 connections max (prevents accumulation)
        minPoolSize=0,
        maxIdleTimeMS=30000,         # Close idle connections after 30 seconds
        serverSelectionTimeoutMS=5000,
        connectTimeoutMS=10000,
        socketTimeoutMS=15000,
        waitQueueTimeoutMS=5000      # Pool exhaustion raises instead of blocking
    )


def get_database(client, settings: Settings):
    """Select the database named by MONGODB_DB, the URI path, or the default"""
    if settings.mongodb_db:
        db = client[settings.mongodb_db]
    else:
        db = client.get_default_database(default=DEFAULT_DB_NAME)
    logger.info(f"MongoDB connection established successfully to database: {db.name}")
    return db
