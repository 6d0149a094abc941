"""
Base repository class providing common MongoDB operations.

All MongoDB-backed repositories inherit from this base class.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel
from pymongo.collection import Collection
from pymongo.results import InsertOneResult

from nexus_match.data.database import get_database_manager
from nexus_match.data.models.base import BaseDocument
from nexus_match.utils.logger import get_logger

logger = get_logger(__name__)

# Type variable for stored models
T = TypeVar("T", bound=BaseModel)


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository providing common database operations.

    Subclasses must define the collection name and model class. A
    collection may be injected directly, otherwise it is resolved through
    the shared DatabaseManager on first use.
    """

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """Name of the MongoDB collection."""
        pass

    @property
    @abstractmethod
    def model_class(self) -> type[T]:
        """Pydantic model class for this repository."""
        pass

    def __init__(self, collection: Optional[Collection] = None) -> None:
        self._collection = collection

    # -------------------------------------------------------------------------
    # Collection Access
    # -------------------------------------------------------------------------

    def _get_collection(self) -> Collection:
        if self._collection is None:
            self._collection = get_database_manager().get_collection(self.collection_name)
        return self._collection

    # -------------------------------------------------------------------------
    # Document Conversion
    # -------------------------------------------------------------------------

    def _to_model(self, document: Optional[dict[str, Any]]) -> Optional[T]:
        """Convert MongoDB document to Pydantic model."""
        if document is None:
            return None
        return self.model_class.model_validate(document)

    def _to_models(self, documents: list[dict[str, Any]]) -> list[T]:
        """Convert list of MongoDB documents to Pydantic models."""
        return [self._to_model(doc) for doc in documents if doc is not None]

    def _to_document(self, model: T) -> dict[str, Any]:
        """Convert Pydantic model to MongoDB document."""
        if isinstance(model, BaseDocument):
            return model.model_dump_mongo()
        return model.model_dump(mode="json", exclude_none=True)

    @staticmethod
    def _to_object_id(id_value: str | ObjectId) -> Optional[ObjectId]:
        """Convert string to ObjectId; None for strings that cannot be one."""
        if isinstance(id_value, ObjectId):
            return id_value
        try:
            return ObjectId(id_value)
        except (InvalidId, TypeError):
            return None

    # -------------------------------------------------------------------------
    # CRUD Operations
    # -------------------------------------------------------------------------

    def insert(self, model: T) -> T:
        """Insert a new document and return the model with its id set."""
        document = self._to_document(model)
        result: InsertOneResult = self._get_collection().insert_one(document)
        logger.debug(f"Created {self.collection_name} document: {result.inserted_id}")
        if isinstance(model, BaseDocument):
            return model.model_copy(update={"id": result.inserted_id})
        return model

    def get_by_id(self, id_value: str | ObjectId) -> Optional[T]:
        """Get a document by its ID."""
        object_id = self._to_object_id(id_value)
        if object_id is None:
            return None
        return self._to_model(self._get_collection().find_one({"_id": object_id}))

    def find(
        self,
        query: dict[str, Any],
        sort_by: str = "created_at",
        sort_order: int = -1,
        limit: int = 0,
    ) -> list[T]:
        """Find documents matching a query."""
        cursor = self._get_collection().find(query).sort(sort_by, sort_order)
        if limit:
            cursor = cursor.limit(limit)
        return self._to_models(list(cursor))

    def find_one(self, query: dict[str, Any]) -> Optional[T]:
        """Find a single document matching a query."""
        return self._to_model(self._get_collection().find_one(query))

    def count(self, query: Optional[dict[str, Any]] = None) -> int:
        """Count documents matching a query."""
        return self._get_collection().count_documents(query or {})

