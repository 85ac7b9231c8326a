"""
Recipe, meal plan and shopping list generation via OpenAI chat completions.

All prompts use high-diversity sampling and embed a millisecond timestamp in
the system message so repeated requests do not come back with the same
suggestions.
"""

from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar
import json
import logging
import time

from openai import OpenAI
from pydantic import BaseModel, ValidationError

from adapters.analytics_adapter import AnalyticsClient
from app.exceptions import GenerationError, MealPlanError, SchemaMismatchError, ShoppingListError
from domain.enums import ChatRole
from domain.schemas.generation_schemas import (
    DayPlan,
    GeneratedRecipe,
    IngredientInput,
    ShoppingCategory,
)

logger = logging.getLogger("whatcanicook.generation")

T = TypeVar("T", bound=BaseModel)

RECIPE_SYSTEM_PROMPT = (
    "You are a helpful chef that suggests recipes based on available ingredients. "
    "Current timestamp: {timestamp}. Always provide unique suggestions. "
    "Respond in JSON format with the following structure: "
    "{{ name: string, cookTime: number, servings: number, ingredients: string[], instructions: string[] }}"
)

CUSTOM_RECIPE_SYSTEM_PROMPT = (
    "You are a professional chef providing detailed cooking instructions. "
    "Current timestamp: {timestamp}. Always provide unique suggestions. "
    "Format your response with clear sections for ingredients (with exact measurements) "
    "and step-by-step instructions."
)

MEAL_PLAN_SYSTEM_PROMPT = """You are a nutritionist creating weekly meal plans. Current timestamp: {timestamp}. Always provide unique suggestions. Respond in JSON format with the following structure:
{{
  "weeklyPlan": [
    {{
      "breakfast": "Meal name",
      "lunch": "Meal name",
      "dinner": "Meal name"
    }}
  ]
}}
Generate {days} days of unique, creative meals."""

SHOPPING_LIST_SYSTEM_PROMPT = """You are a helpful chef creating organized shopping lists. Current timestamp: {timestamp}. Given a list of meals and servings, create a categorized shopping list with exact quantities.
Respond in JSON format with the following structure:
{{
  "shoppingList": [
    {{
      "category": "Category name",
      "items": ["2 lbs chicken breast", "1 gallon milk", etc.]
    }}
  ]
}}
Categories should include: Produce, Meat & Seafood, Dairy & Eggs, Pantry, Grains & Bread, Frozen, Condiments & Spices.
Always specify quantities in common measurements (cups, ounces, pounds, etc.)."""

MEAL_PLAN_DAYS = 7


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


def parse_json_object(content: Optional[str]) -> Dict[str, Any]:
    """Decode a JSON-mode completion; anything but a JSON object is a mismatch."""
    try:
        data = json.loads(content or "")
    except json.JSONDecodeError as e:
        raise SchemaMismatchError("Generated response is not valid JSON", details={"error": str(e)})
    if not isinstance(data, dict):
        raise SchemaMismatchError("Generated response is not a JSON object")
    return data


def validate_as(model: Type[T], data: Any) -> T:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise SchemaMismatchError(
            f"Generated response does not match {model.__name__}",
            details={"errors": e.errors(include_url=False, include_context=False)},
        )


def validate_envelope(data: Dict[str, Any], key: str, model: Type[T]) -> List[T]:
    """Validate ``data[key]`` as a list of ``model`` entries."""
    entries = data.get(key)
    if not isinstance(entries, list):
        raise SchemaMismatchError(f"Generated response has no '{key}' list")
    return [validate_as(model, entry) for entry in entries]


class GenerationService:
    """Prompt templates against a hosted chat model"""

    def __init__(
        self,
        client: Optional[OpenAI],
        analytics: AnalyticsClient,
        model: str = "gpt-3.5-turbo",
        temperature: float = 0.9,
        presence_penalty: float = 0.6,
        frequency_penalty: float = 0.6,
    ):
        self.client = client
        self.analytics = analytics
        self.model = model
        self.temperature = temperature
        self.presence_penalty = presence_penalty
        self.frequency_penalty = frequency_penalty

    def _complete(self, system_prompt: str, user_prompt: str, json_mode: bool = False) -> Optional[str]:
        if self.client is None:
            raise GenerationError("OpenAI API key is not configured")

        params: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": ChatRole.SYSTEM.value, "content": system_prompt},
                {"role": ChatRole.USER.value, "content": user_prompt},
            ],
            "temperature": self.temperature,
            "presence_penalty": self.presence_penalty,
            "frequency_penalty": self.frequency_penalty,
        }
        if json_mode:
            params["response_format"] = {"type": "json_object"}

        completion = self.client.chat.completions.create(**params)
        return completion.choices[0].message.content

    def _log_error(self, event: str, error: Exception):
        self.analytics.log_event(event, {"error": str(error) or "Unknown error"})

    def generate_recipe(self, ingredients: Sequence[IngredientInput]) -> GeneratedRecipe:
        """Suggest a recipe using some or all of the given ingredients."""
        ingredient_list = ", ".join(ing.name for ing in ingredients)
        try:
            content = self._complete(
                RECIPE_SYSTEM_PROMPT.format(timestamp=_timestamp_ms()),
                f"Suggest a unique recipe I can make with some or all of these ingredients: "
                f"{ingredient_list}. Include additional common ingredients if needed.",
                json_mode=True,
            )
            recipe = validate_as(GeneratedRecipe, parse_json_object(content))

            self.analytics.log_event("recipe_generated", {"ingredientCount": len(ingredients)})
            logger.info(f"recipe_generated ingredients={len(ingredients)} name={recipe.name!r}")
            return recipe
        except Exception as e:
            logger.error(f"recipe_generation_failed error={str(e)}")
            self._log_error("recipe_generation_error", e)
            raise

    def generate_custom_recipe(self, prompt: str) -> str:
        """Free-form request; the completion text is returned untouched."""
        try:
            content = self._complete(
                CUSTOM_RECIPE_SYSTEM_PROMPT.format(timestamp=_timestamp_ms()), prompt
            )
            self.analytics.log_event("custom_recipe_generated")
            logger.info("custom_recipe_generated")
            return content or ""
        except Exception as e:
            logger.error(f"custom_recipe_generation_failed error={str(e)}")
            self._log_error("custom_recipe_generation_error", e)
            raise

    def generate_meal_plan(self) -> List[DayPlan]:
        try:
            content = self._complete(
                MEAL_PLAN_SYSTEM_PROMPT.format(timestamp=_timestamp_ms(), days=MEAL_PLAN_DAYS),
                "Generate a balanced weekly meal plan with variety and nutrition in mind.",
                json_mode=True,
            )
            plan = validate_envelope(parse_json_object(content), "weeklyPlan", DayPlan)

            self.analytics.log_event("meal_plan_generated", {"dayCount": len(plan)})
            logger.info(f"meal_plan_generated days={len(plan)}")
            return plan
        except Exception as e:
            logger.error(f"meal_plan_generation_failed error={str(e)}")
            self._log_error("meal_plan_generation_error", e)
            raise MealPlanError() from None

    def generate_shopping_list(self, meals: Sequence[str]) -> List[ShoppingCategory]:
        try:
            content = self._complete(
                SHOPPING_LIST_SYSTEM_PROMPT.format(timestamp=_timestamp_ms()),
                f"Create a detailed shopping list with exact quantities for these meals: {', '.join(meals)}",
                json_mode=True,
            )
            shopping_list = validate_envelope(
                parse_json_object(content), "shoppingList", ShoppingCategory
            )

            self.analytics.log_event("shopping_list_generated", {"mealCount": len(meals)})
            logger.info(
                f"shopping_list_generated meals={len(meals)} categories={len(shopping_list)}"
            )
            return shopping_list
        except Exception as e:
            logger.error(f"shopping_list_generation_failed error={str(e)}")
            self._log_error("shopping_list_generation_error", e)
            raise ShoppingListError() from None
