"""Pydantic schemas for AI generation requests and the shapes parsed out of completions."""

from typing import List, Union

from pydantic import BaseModel, ConfigDict, Field


class IngredientInput(BaseModel):
    """Ingredient the user has on hand; only the name is sent to the model."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., min_length=1)


class RecipeRequest(BaseModel):
    ingredients: List[IngredientInput] = Field(..., min_length=1)


class CustomRecipeRequest(BaseModel):
    prompt: str = Field(..., min_length=1)


class CustomRecipeResponse(BaseModel):
    content: str


class ShoppingListRequest(BaseModel):
    meals: List[str] = Field(..., min_length=1)


class GeneratedRecipe(BaseModel):
    """Recipe as returned by the model."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    cook_time: Union[int, float] = Field(..., alias="cookTime")
    servings: Union[int, float]
    ingredients: List[str]
    instructions: List[str]


class DayPlan(BaseModel):
    breakfast: str
    lunch: str
    dinner: str


class ShoppingCategory(BaseModel):
    category: str
    items: List[str]


class MealPlanResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    weekly_plan: List[DayPlan] = Field(..., alias="weeklyPlan")


class ShoppingListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    shopping_list: List[ShoppingCategory] = Field(..., alias="shoppingList")
