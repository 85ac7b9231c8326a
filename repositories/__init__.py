"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.user_repository import UserRepository
from repositories.premium_user_repository import PremiumUserRepository
from repositories.premium_grant_writer import (
    PremiumGrantWriter,
    SequentialGrantWriter,
    TransactionalGrantWriter,
)

__all__ = [
    "BaseRepository",
    "UserRepository",
    "PremiumUserRepository",
    "PremiumGrantWriter",
    "SequentialGrantWriter",
    "TransactionalGrantWriter",
]
