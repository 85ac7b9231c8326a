"""
User-related document models.

Documents are stored with camelCase field names (``isPremium``,
``premiumSince``...); the models expose snake_case attributes and dump
``by_alias`` when written back to MongoDB.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.utils import normalize_email, utc_now_iso
from domain.enums import Theme


class UserPreferences(BaseModel):
    """Per-user cooking and UI preferences"""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    dietary_restrictions: List[str] = Field(
        default_factory=list, alias="dietaryRestrictions"
    )
    serving_size: int = Field(default=2, ge=1, alias="servingSize")
    theme: Theme = Theme.LIGHT


class UserProfile(BaseModel):
    """Profile document in the ``users`` collection, keyed by account id."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = Field(default=None, alias="_id")
    username: str = ""
    email: str
    is_premium: bool = Field(default=False, alias="isPremium")
    premium_since: Optional[str] = Field(default=None, alias="premiumSince")
    premium_doc_id: Optional[str] = Field(default=None, alias="premiumDocId")
    stripe_session_id: Optional[str] = Field(default=None, alias="stripeSessionId")
    stripe_subscription_active: Optional[bool] = Field(
        default=None, alias="stripeSubscriptionActive"
    )
    stripe_customer_id: Optional[str] = Field(default=None, alias="stripeCustomerId")
    saved_recipes: List[Any] = Field(default_factory=list, alias="savedRecipes")
    meal_plans: List[Any] = Field(default_factory=list, alias="mealPlans")
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    last_verified: Optional[str] = Field(default=None, alias="lastVerified")
    created_at: str = Field(default_factory=utc_now_iso, alias="createdAt")
    updated_at: str = Field(default_factory=utc_now_iso, alias="updatedAt")

    @classmethod
    def new(cls, account_id: str, username: str, email: str, is_premium: bool) -> "UserProfile":
        """Fresh profile for a just-registered account with default preferences."""
        now = utc_now_iso()
        return cls(
            id=account_id,
            username=username,
            email=normalize_email(email),
            is_premium=is_premium,
            created_at=now,
            updated_at=now,
        )

    def to_document(self) -> dict:
        """Serialize for storage, omitting unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class SubscriptionRecord(BaseModel):
    """Document in the ``premiumUsers`` collection, one or more per email."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(alias="_id")
    email: str
    user_id: Optional[str] = Field(default=None, alias="userId")
    active: bool = False
    stripe_subscription_active: bool = Field(
        default=False, alias="stripeSubscriptionActive"
    )
    created_at: str = Field(default_factory=utc_now_iso, alias="createdAt")
    updated_at: str = Field(default_factory=utc_now_iso, alias="updatedAt")

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
