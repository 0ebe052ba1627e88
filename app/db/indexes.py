"""
app/db/indexes.py

Purpose: Database index management

- Fast lookups by email (the key every endpoint queries on)
- Idempotent, run at startup and from scripts/init_db.py
"""

from pymongo import ASCENDING
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes(database):
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.

    Args:
        database: AsyncIOMotorDatabase to create indexes on
    """
    try:
        users = database["users"]

        logger.info("Creating database indexes...")

        # Email is unique in practice only; existing data may hold duplicates
        await users.create_index([("email", ASCENDING)], name="email_idx")
        logger.debug("Created index on users.email")

        await users.create_index([("verified", ASCENDING)], name="verified_idx")
        logger.debug("Created index on users.verified")

        await users.create_index([("createdAt", ASCENDING)], name="created_at_idx", sparse=True)
        logger.debug("Created index on users.createdAt")

        logger.info("✅ Database indexes created")

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise
