"""
Database initialization script

Run once (or after schema changes) to create indexes on the users collection:
    python scripts/init_db.py
"""

import asyncio
import sys
from pathlib import Path
from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parent.parent

# Add project root to path
sys.path.insert(0, str(ROOT_DIR))

# Load .env from the project root regardless of the working directory
load_dotenv(ROOT_DIR / ".env")

from app.core.config import settings  # noqa: E402
from app.core.logging import setup_logging, get_logger  # noqa: E402
from app.db.indexes import create_indexes  # noqa: E402
from app.db.mongo import MongoDatabase, USERS_COLLECTION  # noqa: E402

setup_logging()
logger = get_logger("scripts.init_db")


async def main():
    """Main initialization"""
    logger.info("=" * 60)
    logger.info("  COSCO Database Setup")
    logger.info("=" * 60)

    mongo = MongoDatabase(settings.MONGODB_URL, settings.MONGODB_DB_NAME)
    await mongo.connect()

    try:
        await create_indexes(mongo.database)

        logger.info("🔍 Verifying indexes...")
        indexes = await mongo.users.index_information()
        for idx_name in indexes.keys():
            if idx_name != "_id_":
                logger.info(f"    ✅ {USERS_COLLECTION}.{idx_name}")

        total = await mongo.users.count_documents({})
        verified = await mongo.users.count_documents({"verified": True})
        logger.info(f"📊 Users: {total} ({verified} verified)")

        logger.info("✅ Database initialization complete!")

    finally:
        await mongo.close()


if __name__ == "__main__":
    asyncio.run(main())
