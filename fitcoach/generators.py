"""
Plan generators: build a prompt, ask the model, normalize the answer.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional, Type

from pydantic import BaseModel

from .ai_client import TextGenerator
from .config import AI_TIMEOUT_SECONDS, NUTRITION_AI_TIMEOUT_SECONDS
from .exceptions import GenerationError
from .logging import get_logger
from .macros import get_macros
from .normalizers import plan_from_text
from .prompts import (
    QuizAnswers,
    build_coach_prompt,
    build_meal_plan_prompt,
    build_nutrition_prompt,
    build_workout_prompt,
)
from .schema import MealPlan, NutritionPlan, WorkoutPlan

logger = get_logger(__name__)


class PlanGenerator(ABC):
    """Base class for the AI plan generators"""

    plan_model: Type[BaseModel]
    failure_message = "Failed to generate plan"
    timeout = AI_TIMEOUT_SECONDS
    temperature: Optional[float] = None

    def __init__(self, ai: TextGenerator):
        self.ai = ai

    @abstractmethod
    def build_prompt(self, **request: Any) -> str:
        """Render the prompt for one request"""

    async def generate(self, **request: Any) -> Any:
        name = type(self).__name__
        prompt = self.build_prompt(**request)
        logger.info("%s.generate start", name)
        try:
            text = await self.ai.generate(
                prompt, timeout=self.timeout, temperature=self.temperature
            )
            plan = plan_from_text(text, self.plan_model)
        except GenerationError as e:
            e.public_message = self.failure_message
            logger.warning("%s.generate failed: %s", name, e)
            raise
        logger.info("%s.generate done", name)
        return plan


class WorkoutGenerator(PlanGenerator):
    plan_model = WorkoutPlan
    failure_message = "Failed to generate workout plan"

    def build_prompt(
        self,
        profile: Optional[Mapping[str, Any]] = None,
        goal: Optional[str] = None,
        difficulty: Optional[str] = None,
        duration: Optional[Any] = None,
        equipment: Optional[str] = None,
    ) -> str:
        return build_workout_prompt(profile, goal, difficulty, duration, equipment)


class MealPlanGenerator(PlanGenerator):
    plan_model = MealPlan
    failure_message = "Failed to generate meal plan"
    temperature = 0.7

    def build_prompt(
        self,
        profile: Optional[Mapping[str, Any]] = None,
        target_calories: Optional[float] = None,
        meals_per_day: Optional[int] = None,
        dietary_preferences: Optional[str] = None,
    ) -> str:
        calories = target_calories or 2000
        goal = (profile or {}).get("fitness_goal") or "General Fitness"
        return build_meal_plan_prompt(
            profile,
            calories,
            meals_per_day or 3,
            dietary_preferences,
            get_macros(calories, goal),
        )


class NutritionPlanGenerator(PlanGenerator):
    plan_model = NutritionPlan
    failure_message = "Failed to generate nutrition plan"
    timeout = NUTRITION_AI_TIMEOUT_SECONDS

    def build_prompt(
        self,
        profile: Optional[Mapping[str, Any]] = None,
        quiz_data: Optional[QuizAnswers] = None,
    ) -> str:
        return build_nutrition_prompt(profile, quiz_data)


class FitnessCoach:
    """Free-text coaching replies; the answer is returned as-is."""

    failure_message = "Internal server error"

    def __init__(self, ai: TextGenerator):
        self.ai = ai

    async def reply(
        self, messages: List[Mapping[str, str]], profile: Optional[Mapping[str, Any]] = None
    ) -> str:
        prompt = build_coach_prompt(profile, messages)
        try:
            return await self.ai.generate(prompt, timeout=AI_TIMEOUT_SECONDS)
        except GenerationError as e:
            e.public_message = self.failure_message
            raise
