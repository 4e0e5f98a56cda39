import datetime
from typing import Annotated, Any, List

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .fields import (
    DefaultNumber,
    OptionalNumber,
    OptionalText,
    OptionalTextList,
    RequiredNumber,
    RequiredText,
    RequiredTextList,
    TextList,
    is_record,
    keep_valid,
    require_entries,
)


def _now_iso() -> str:
    return datetime.datetime.now(datetime.UTC).isoformat()


def _record_or_empty(value: Any) -> Any:
    return value if is_record(value) or isinstance(value, BaseModel) else {}


# ---------- macros ----------
class MacroBreakdown(BaseModel):
    calories: DefaultNumber = 0
    protein: DefaultNumber = 0
    carbs: DefaultNumber = 0
    fats: DefaultNumber = 0

    @model_validator(mode="before")
    @classmethod
    def _coerce_record(cls, value: Any) -> Any:
        return _record_or_empty(value)


class PartialMacros(BaseModel):
    calories: OptionalNumber = None
    protein: OptionalNumber = None
    carbs: OptionalNumber = None
    fats: OptionalNumber = None

    @model_validator(mode="before")
    @classmethod
    def _coerce_record(cls, value: Any) -> Any:
        return _record_or_empty(value)


class Macros(BaseModel):
    # grams per day
    protein: int
    carbs: int
    fat: int


# ---------- weekly nutrition plan ----------
class NutritionModel(BaseModel):
    # the nutrition plan travels with camelCase keys
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MealPlanMeal(NutritionModel):
    name: RequiredText
    type: OptionalText = None
    calories: OptionalNumber = None
    macros: PartialMacros = Field(default_factory=PartialMacros)
    ingredients: OptionalTextList = None
    instructions: OptionalTextList = None


class DailyMealPlan(NutritionModel):
    day: RequiredText
    focus: OptionalText = None
    meals: Annotated[List[MealPlanMeal], keep_valid(MealPlanMeal), require_entries]
    snacks: OptionalTextList = None


class RecipeRecommendation(NutritionModel):
    title: RequiredText
    summary: OptionalText = None
    macros: MacroBreakdown = Field(default_factory=MacroBreakdown)
    ingredients: TextList = Field(default_factory=list)
    instructions: TextList = Field(default_factory=list)


class ShoppingListItem(NutritionModel):
    name: RequiredText
    quantity: OptionalText = None
    notes: OptionalText = None


class ShoppingListCategory(NutritionModel):
    category: RequiredText
    items: Annotated[List[ShoppingListItem], keep_valid(ShoppingListItem), require_entries]


class NutritionPlan(NutritionModel):
    generated_at: Annotated[
        str, BeforeValidator(lambda v: v if isinstance(v, str) else _now_iso())
    ] = Field(default_factory=_now_iso)
    daily_calories: DefaultNumber = 0
    diet_type: Annotated[
        str, BeforeValidator(lambda v: v if isinstance(v, str) else "Custom Plan")
    ] = "Custom Plan"
    macros: MacroBreakdown = Field(default_factory=MacroBreakdown)
    weekly_plan: Annotated[List[DailyMealPlan], keep_valid(DailyMealPlan), require_entries]
    snacks: TextList = Field(default_factory=list)
    recipes: Annotated[
        List[RecipeRecommendation], keep_valid(RecipeRecommendation)
    ] = Field(default_factory=list)
    shopping_list: Annotated[
        List[ShoppingListCategory], keep_valid(ShoppingListCategory)
    ] = Field(default_factory=list)
    notes: TextList = Field(default_factory=list)


# ---------- single workout ----------
class WorkoutExercise(BaseModel):
    name: RequiredText
    sets: RequiredNumber
    reps: RequiredNumber
    weight_kg: OptionalNumber = None
    rest_seconds: RequiredNumber
    notes: OptionalText = None


class WorkoutPlan(BaseModel):
    name: RequiredText
    description: OptionalText = None
    exercises: Annotated[List[WorkoutExercise], keep_valid(WorkoutExercise), require_entries]


# ---------- single-day meal plan ----------
class GeneratedMeal(BaseModel):
    name: RequiredText
    calories: RequiredNumber
    ingredients: RequiredTextList
    meal_type: OptionalText = None
    protein_g: OptionalNumber = None
    carbs_g: OptionalNumber = None
    fat_g: OptionalNumber = None
    instructions: OptionalText = None


class MealPlan(BaseModel):
    name: RequiredText
    description: OptionalText = None
    meals: Annotated[List[GeneratedMeal], keep_valid(GeneratedMeal), require_entries]
