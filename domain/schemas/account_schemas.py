from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from domain.enums import Theme


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1, max_length=100)


class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    """Authenticated session handed back to the caller after register / sign-in"""

    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    id_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None

    model_config = {"from_attributes": True}


class PreferencesUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    dietary_restrictions: Optional[List[str]] = Field(
        default=None, alias="dietaryRestrictions"
    )
    serving_size: Optional[int] = Field(default=None, ge=1, alias="servingSize")
    theme: Optional[Theme] = None


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; only the fields sent are written."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    username: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    stripe_session_id: Optional[str] = Field(default=None, alias="stripeSessionId")
    stripe_customer_id: Optional[str] = Field(default=None, alias="stripeCustomerId")
    saved_recipes: Optional[List[Any]] = Field(default=None, alias="savedRecipes")
    meal_plans: Optional[List[Any]] = Field(default=None, alias="mealPlans")
    preferences: Optional[PreferencesUpdate] = None

    def to_fields(self) -> dict:
        """Stored (camelCase) field names and values of what the caller sent."""
        fields = self.model_dump(
            by_alias=True, exclude_unset=True, exclude_none=True, mode="json"
        )
        if "preferences" in fields and not fields["preferences"]:
            fields.pop("preferences")
        return fields
