"""
Base repository interface for data access layer.
This follows the Repository pattern to separate business logic from data access.
"""

from typing import Any, Dict, Generic, Optional, Type, TypeVar
from abc import ABC

from pydantic import BaseModel
from pymongo.client_session import ClientSession
from pymongo.collection import Collection

ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType], ABC):
    """
    Base repository providing common document operations.
    All repositories should inherit from this class.

    Every method accepts an optional ``session`` so callers can group writes
    inside a MongoDB transaction.
    """

    def __init__(self, collection: Collection, model: Type[ModelType]):
        self.collection = collection
        self.model = model

    def _to_model(self, doc: Optional[Dict[str, Any]]) -> Optional[ModelType]:
        if doc is None:
            return None
        return self.model.model_validate(doc)

    def get_by_id(self, entity_id: str, session: Optional[ClientSession] = None) -> Optional[ModelType]:
        """Get document by ``_id``"""
        return self._to_model(self.collection.find_one({"_id": entity_id}, session=session))

    def find_first(self, filters: Dict[str, Any], session: Optional[ClientSession] = None) -> Optional[ModelType]:
        """First document matching equality filters, or None"""
        return self._to_model(self.collection.find_one(filters, session=session))

    def create(self, entity: ModelType, session: Optional[ClientSession] = None) -> ModelType:
        """Insert a new document"""
        self.collection.insert_one(entity.to_document(), session=session)
        return entity

    def update_fields(self, entity_id: str, fields: Dict[str, Any], session: Optional[ClientSession] = None) -> bool:
        """Set the given fields on an existing document. Returns False if it does not exist."""
        result = self.collection.update_one({"_id": entity_id}, {"$set": fields}, session=session)
        return result.matched_count > 0

    def exists(self, entity_id: str, session: Optional[ClientSession] = None) -> bool:
        """Check if document exists"""
        return self.collection.find_one({"_id": entity_id}, session=session) is not None
