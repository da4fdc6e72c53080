"""
Database initialization for the lead intake backend.
Ensures the submission collections and their indexes exist when the
backend starts. Safe to run on every startup.
"""

import logging
from datetime import datetime, timezone
from pymongo.errors import PyMongoError

from clyra_api.models.submission import SubmissionKind

# Set up logger
logger = logging.getLogger(__name__)

REQUIRED_COLLECTIONS = [
    {
        "name": SubmissionKind.CONTACT.collection,
        "description": "Stores contact form enquiries",
        "indexes": [
            {"keys": [("createdAt", -1)], "unique": False},
            {"keys": [("email", 1)], "unique": False}
        ]
    },
    {
        "name": SubmissionKind.CONSULTATION.collection,
        "description": "Stores consultation requests",
        "indexes": [
            {"keys": [("createdAt", -1)], "unique": False},
            {"keys": [("email", 1)], "unique": False}
        ]
    }
]


async def ensure_collection(db, collection_config):
    """
    Create a collection and its indexes if missing.

    Args:
        db: MongoDB database connection
        collection_config (dict): Collection name, description and indexes

    Returns:
        bool: True if successful, False otherwise
    """
    collection_name = collection_config["name"]
    description = collection_config.get("description", "")

    try:
        existing = await db.list_collection_names()
        if collection_name in existing:
            logger.info(f"✅ Collection '{collection_name}' already exists")
        else:
            logger.info(f"🔄 Creating collection '{collection_name}': {description}")
            await db.create_collection(collection_name)
            logger.info(f"✅ Collection '{collection_name}' created successfully")

        collection = db[collection_name]
        for index_config in collection_config.get("indexes", []):
            keys = index_config["keys"]
            options = {k: v for k, v in index_config.items() if k != "keys"}
            try:
                await collection.create_index(keys, **options)
                logger.debug(f"✅ Index {keys} ensured for '{collection_name}'")
            except PyMongoError as e:
                logger.warning(f"Failed to create index {keys} for '{collection_name}': {str(e)}")

        return True

    except PyMongoError as e:
        logger.error(f"❌ Failed to create collection '{collection_name}': {str(e)}")
        return False


async def initialize_database(db):
    """
    Initialize the database by creating all required collections and indexes.

    Returns:
        bool: True if every collection was ensured, False otherwise
    """
    start_time = datetime.now(timezone.utc)
    logger.info(f"🚀 Starting database initialization for '{db.name}'...")

    success_count = 0
    error_count = 0
    for collection_config in REQUIRED_COLLECTIONS:
        if await ensure_collection(db, collection_config):
            success_count += 1
        else:
            error_count += 1

    duration = (datetime.now(timezone.utc) - start_time).total_seconds()
    if error_count == 0:
        logger.info(f"🎉 Database initialization completed: {success_count} collections in {duration:.2f}s")
        return True

    logger.warning(f"⚠️ Database initialization completed with errors: {success_count} successful, {error_count} errors in {duration:.2f}s")
    return False
