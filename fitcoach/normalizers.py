"""
Turn parsed AI output into validated plans.

`normalize` never raises for shape problems: it returns a tagged result that
either carries the plan or the reason it was rejected.
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, Type, TypeVar

import pydantic

from .exceptions import NormalizationError
from .extraction import extract_json
from .fields import is_record
from .logging import get_logger
from .schema import MealPlan, NutritionPlan, WorkoutPlan

logger = get_logger(__name__)

P = TypeVar("P", bound=pydantic.BaseModel)


@dataclass(frozen=True)
class Normalized(Generic[P]):
    plan: Optional[P] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.plan is not None


def _describe(model: Type[pydantic.BaseModel], exc: pydantic.ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or model.__name__
    return f"{model.__name__}.{location}: {first['msg']}"


def normalize(model: Type[P], payload: Any) -> Normalized[P]:
    if not is_record(payload):
        return Normalized(reason=f"expected a JSON object, got {type(payload).__name__}")
    try:
        return Normalized(plan=model.model_validate(payload))
    except pydantic.ValidationError as exc:
        return Normalized(reason=_describe(model, exc))


def normalize_nutrition_plan(payload: Any) -> Optional[NutritionPlan]:
    return normalize(NutritionPlan, payload).plan


def normalize_workout_plan(payload: Any) -> Optional[WorkoutPlan]:
    return normalize(WorkoutPlan, payload).plan


def normalize_meal_plan(payload: Any) -> Optional[MealPlan]:
    return normalize(MealPlan, payload).plan


def plan_from_text(text: str, model: Type[P]) -> P:
    """Extract, parse and normalize; raises a GenerationError subclass on failure."""
    result = normalize(model, extract_json(text))
    if not result.ok:
        logger.warning("rejected AI %s: %s", model.__name__, result.reason)
        raise NormalizationError(f"Unable to parse AI response: {result.reason}")
    return result.plan
