"""AI generation routes - recipes, meal plans and shopping lists"""

from fastapi import APIRouter, Depends
import logging

from domain.schemas.generation_schemas import (
    CustomRecipeRequest,
    CustomRecipeResponse,
    GeneratedRecipe,
    MealPlanResponse,
    RecipeRequest,
    ShoppingListRequest,
    ShoppingListResponse,
)
from services import GenerationService
from api.dependencies import get_generation_service

router = APIRouter(prefix="/generate", tags=["Generation"])
logger = logging.getLogger("whatcanicook.api.generation")


@router.post("/recipe", response_model=GeneratedRecipe)
def generate_recipe(
    body: RecipeRequest, generation: GenerationService = Depends(get_generation_service)
):
    """Suggest a recipe from the ingredients on hand"""
    return generation.generate_recipe(body.ingredients)


@router.post("/custom-recipe", response_model=CustomRecipeResponse)
def generate_custom_recipe(
    body: CustomRecipeRequest,
    generation: GenerationService = Depends(get_generation_service),
):
    return CustomRecipeResponse(content=generation.generate_custom_recipe(body.prompt))


@router.post("/meal-plan", response_model=MealPlanResponse)
def generate_meal_plan(generation: GenerationService = Depends(get_generation_service)):
    """Seven days of breakfast, lunch and dinner"""
    return MealPlanResponse(weekly_plan=generation.generate_meal_plan())


@router.post("/shopping-list", response_model=ShoppingListResponse)
def generate_shopping_list(
    body: ShoppingListRequest,
    generation: GenerationService = Depends(get_generation_service),
):
    """Categorised shopping list with quantities for the given meals"""
    return ShoppingListResponse(shopping_list=generation.generate_shopping_list(body.meals))
