"""
MongoDB client module

Owns the MongoDB connection, health check and collection access.
One instance is created by the application lifespan and shared through
app.state; nothing in this module holds global state.
"""

import os
import time
import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


class MongoDBClient:
    """
    MongoDB client

    Reads connection settings from the environment unless given explicitly.
    """

    def __init__(
        self,
        uri: Optional[str] = None,
        db_name: Optional[str] = None,
        collection_name: Optional[str] = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        client: Optional[MongoClient] = None,
    ):
        """
        Args:
            uri: Connection string (env MONGODB_URI)
            db_name: Database name (env MONGODB_DATABASE, default cardwise)
            collection_name: Card collection (env MONGODB_COLLECTION_CARDS, default cards)
            max_retries: Connection attempts
            retry_delay: Base delay between attempts, in seconds
            client: Pre-built MongoClient (tests pass a mongomock client)

        Raises:
            ValueError: No usable connection string
            ConnectionError: Connection failed after all retries
        """
        self.max_retries = max_retries
        self.retry_delay = retry_delay

        self.uri = uri or os.getenv("MONGODB_URI")
        self.db_name = db_name or os.getenv("MONGODB_DATABASE", "cardwise")
        self.collection_name = collection_name or os.getenv("MONGODB_COLLECTION_CARDS", "cards")

        if client is not None:
            self._bind(client)
            return

        if not self.uri or "<username>" in self.uri or "<password>" in self.uri:
            raise ValueError(
                "MONGODB_URI is not set or still contains placeholders. "
                "Put a real MongoDB connection string in .env."
            )

        self._connect_with_retry()

    def _bind(self, client: MongoClient) -> None:
        self.client = client
        self.db: Database = self.client[self.db_name]
        self._cards_collection: Collection = self.db[self.collection_name]

    def _connect_with_retry(self):
        last_error = None

        for attempt in range(self.max_retries):
            try:
                logger.info("MongoDB connection attempt %d/%d...", attempt + 1, self.max_retries)

                client = MongoClient(
                    self.uri,
                    serverSelectionTimeoutMS=10000,
                    connectTimeoutMS=10000,
                    socketTimeoutMS=10000
                )
                client.admin.command("ping")
                self._bind(client)

                logger.info("MongoDB connected: %s", self.db_name)
                return

            except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                last_error = e
                if attempt < self.max_retries - 1:
                    wait_time = self.retry_delay * (2 ** attempt)  # exponential backoff
                    logger.warning("Connection failed, retrying in %ss (error: %s)", wait_time, e)
                    time.sleep(wait_time)
                else:
                    raise ConnectionError(
                        f"MongoDB connection failed after {self.max_retries} attempts: {last_error}"
                    ) from last_error
            except Exception as e:
                raise ConnectionError(f"Unexpected error while connecting to MongoDB: {e}") from e

    def get_collection(self, name: Optional[str] = None) -> Collection:
        """
        Collection access

        Args:
            name: Collection name (default: the card collection)
        """
        if name is None:
            return self._cards_collection
        return self.db[name]

    def health_check(self) -> bool:
        """True when the server answers a ping."""
        try:
            self.client.admin.command("ping")
            return True
        except Exception as e:
            logger.warning("MongoDB health check failed: %s", e)
            return False

    def get_stats(self) -> dict:
        """Database and card collection summary."""
        try:
            collection = self.get_collection()
            return {
                "database": self.db_name,
                "collection": self.collection_name,
                "total_documents": collection.count_documents({}),
                "indexes": [idx["name"] for idx in collection.list_indexes()],
            }
        except Exception as e:
            return {"error": str(e)}

    def close(self):
        if getattr(self, "client", None) is not None:
            self.client.close()
            logger.info("MongoDB connection closed")
