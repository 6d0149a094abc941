"""
Database connection manager for Nexus Match.

Provides MongoDB connection management through a lazily created,
timezone-aware PyMongo client.
"""

from typing import Any, Optional
from urllib.parse import quote_plus

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, PyMongoError, ServerSelectionTimeoutError

from nexus_match.utils.config import get_settings
from nexus_match.utils.logger import get_logger

logger = get_logger(__name__)


class DatabaseManager:
    """
    Manages the MongoDB connection.

    Implements singleton pattern for connection reuse.
    """

    _instance: Optional["DatabaseManager"] = None
    _client: Optional[MongoClient] = None

    def __new__(cls) -> "DatabaseManager":
        """Ensure singleton instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        """Initialize database manager with settings."""
        if getattr(self, "_initialized", False):
            return

        self._settings = get_settings()
        self._db_name = self._settings.database.name
        self._uri = self._build_uri()
        self._initialized = True

    def _build_uri(self) -> str:
        """
        Build MongoDB connection URI from settings.

        Credentials are URL-encoded; hosts containing shell metacharacters
        are rejected.
        """
        db_settings = self._settings.database

        host = db_settings.host.strip()
        if not host or any(c in host for c in [";", "&", "|", "$", "`"]):
            raise ValueError(f"Invalid database host: {host}")

        auth = ""
        if db_settings.username and db_settings.password:
            auth = f"{quote_plus(db_settings.username)}:{quote_plus(db_settings.password)}@"

        return f"mongodb://{auth}{host}:{db_settings.port}"

    # -------------------------------------------------------------------------
    # Client
    # -------------------------------------------------------------------------

    def get_client(self) -> MongoClient:
        """Get or create the MongoDB client."""
        if self._client is None:
            logger.info("Creating MongoDB client")
            try:
                self._client = MongoClient(
                    self._uri,
                    tz_aware=True,
                    serverSelectionTimeoutMS=5000,
                    connectTimeoutMS=5000,
                    maxPoolSize=50,
                )
            except PyMongoError as e:
                self._client = None
                logger.error(f"Failed to create MongoDB client: {e}")
                raise
        return self._client

    def get_database(self) -> Database:
        """Get database instance."""
        return self.get_client()[self._db_name]

    def get_collection(self, collection_name: str) -> Any:
        """Get a collection by name."""
        return self.get_database()[collection_name]

    def check_connection(self) -> bool:
        """Check if the connection is healthy."""
        try:
            self.get_client().admin.command("ping")
            return True
        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error(f"Connection check failed: {e}")
            self._client = None
            return False

    def close(self) -> None:
        """Close the client connection."""
        if self._client:
            logger.info("Closing MongoDB client")
            self._client.close()
            self._client = None

    # -------------------------------------------------------------------------
    # Index Management
    # -------------------------------------------------------------------------

    def ensure_indexes(self) -> None:
        """Create indexes for all collections."""
        logger.info("Ensuring database indexes")

        jobs = self.get_collection("jobs")
        jobs.create_index("status")
        jobs.create_index("company_id")
        jobs.create_index("expires_at")
        jobs.create_index("created_at")

        applications = self.get_collection("applications")
        applications.create_index(
            [("job_id", ASCENDING), ("professional_id", ASCENDING)], unique=True
        )
        applications.create_index("professional_id")
        applications.create_index("status")

        professionals = self.get_collection("professionals")
        professionals.create_index("professional_id", unique=True)
        professionals.create_index("sectors")

        logger.info("Database indexes created successfully")


# Global database manager instance
_db_manager: Optional[DatabaseManager] = None


def get_database_manager() -> DatabaseManager:
    """Get the global database manager instance."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


def get_db() -> Database:
    """Convenience function to get the database."""
    return get_database_manager().get_database()
