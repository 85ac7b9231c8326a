"""
Domain models package - Pydantic models for stored documents.
"""

from domain.models.user import UserPreferences, UserProfile, SubscriptionRecord

__all__ = [
    "UserPreferences",
    "UserProfile",
    "SubscriptionRecord",
]
