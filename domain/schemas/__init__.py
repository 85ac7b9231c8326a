"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.account_schemas import (
    RegisterRequest,
    SignInRequest,
    SessionResponse,
    PreferencesUpdate,
    ProfileUpdateRequest,
)
from domain.schemas.premium_schemas import (
    GrantPremiumRequest,
    GrantPremiumResponse,
    VerificationResult,
)
from domain.schemas.generation_schemas import (
    IngredientInput,
    RecipeRequest,
    CustomRecipeRequest,
    CustomRecipeResponse,
    ShoppingListRequest,
    GeneratedRecipe,
    DayPlan,
    ShoppingCategory,
    MealPlanResponse,
    ShoppingListResponse,
)

__all__ = [
    # Account schemas
    "RegisterRequest",
    "SignInRequest",
    "SessionResponse",
    "PreferencesUpdate",
    "ProfileUpdateRequest",
    # Premium schemas
    "GrantPremiumRequest",
    "GrantPremiumResponse",
    "VerificationResult",
    # Generation schemas
    "IngredientInput",
    "RecipeRequest",
    "CustomRecipeRequest",
    "CustomRecipeResponse",
    "ShoppingListRequest",
    "GeneratedRecipe",
    "DayPlan",
    "ShoppingCategory",
    "MealPlanResponse",
    "ShoppingListResponse",
]
