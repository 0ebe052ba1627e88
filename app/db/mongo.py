"""
app/db/mongo.py

Purpose: MongoDB connection setup

- Initializes Motor client with connection pooling
- Single collection: users
- Health checks and retry logic
- Explicit connection lifecycle (connect at startup, close at shutdown)
"""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase, AsyncIOMotorCollection
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError
from typing import Optional
import asyncio
from app.core.logging import get_logger

logger = get_logger(__name__)

USERS_COLLECTION = "users"


class MongoDatabase:
    """
    Owns one Motor client for the lifetime of the process.
    Constructed in the app lifespan and handed to services; never a module global.
    """

    def __init__(
        self,
        url: str,
        db_name: str,
        max_retries: int = 3,
        retry_delay: float = 2,
    ):
        self.url = url
        self.db_name = db_name
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._client: Optional[AsyncIOMotorClient] = None
        self._database: Optional[AsyncIOMotorDatabase] = None

    async def connect(self):
        """
        Establishes connection to MongoDB with retry logic.
        Called during application startup.
        """
        if self._client is not None:
            logger.warning("MongoDB client already initialized")
            return

        retry_delay = self.retry_delay

        for attempt in range(1, self.max_retries + 1):
            client = None
            try:
                logger.info(
                    f"Attempting to connect to MongoDB (attempt {attempt}/{self.max_retries})"
                )

                # Fix URL encoding for special characters
                mongodb_url = self.url.replace("%%", "%25")

                client = AsyncIOMotorClient(
                    mongodb_url,
                    maxPoolSize=50,
                    serverSelectionTimeoutMS=5000,
                    connectTimeoutMS=10000,
                    retryWrites=True,
                    retryReads=True,
                )

                # Verify connection
                await client.admin.command("ping")

                self._client = client
                self._database = client[self.db_name]
                logger.info(f"✅ Successfully connected to MongoDB: {self.db_name}")
                return

            except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                if client is not None:
                    client.close()
                logger.error(
                    f"Failed to connect to MongoDB (attempt {attempt}/{self.max_retries}): {e}"
                )

                if attempt < self.max_retries:
                    logger.info(f"Retrying in {retry_delay} seconds...")
                    await asyncio.sleep(retry_delay)
                    retry_delay *= 2  # Exponential backoff
                else:
                    logger.critical("Failed to connect to MongoDB after all retries")
                    raise ConnectionError("Could not establish MongoDB connection") from e

    async def close(self):
        """
        Closes the MongoDB connection.
        Called during application shutdown.
        """
        if self._client:
            logger.info("Closing MongoDB connection")
            self._client.close()
            self._client = None
            self._database = None
            logger.info("MongoDB connection closed")

    async def check_health(self) -> bool:
        """
        Checks if the database connection is healthy.

        Returns:
            True if connection is healthy, False otherwise
        """
        try:
            if self._client is None:
                logger.error("MongoDB client not initialized")
                return False

            await self._client.admin.command("ping")
            return True

        except Exception as e:
            logger.error(f"Database health check failed: {str(e)}")
            return False

    @property
    def database(self) -> AsyncIOMotorDatabase:
        if self._database is None:
            raise RuntimeError(
                "Database not initialized. Call connect() during startup."
            )
        return self._database

    @property
    def users(self) -> AsyncIOMotorCollection:
        """
        The users collection.

        Fields (camelCase, see app.models.user.User):
        - email, name, phone
        - otp, verified
        - balance, totalIncome, referredUsers
        - purchasedPlans, withdrawHistory, depositHistory
        - createdAt, updatedAt
        """
        return self.database[USERS_COLLECTION]
