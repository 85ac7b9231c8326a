"""
User Repository - Data access layer for profile documents
"""

from pymongo.collection import Collection

from repositories.base import BaseRepository
from domain.models import UserProfile


class UserRepository(BaseRepository[UserProfile]):
    """Repository for the ``users`` collection, keyed by account id"""

    def __init__(self, collection: Collection):
        super().__init__(collection, UserProfile)
