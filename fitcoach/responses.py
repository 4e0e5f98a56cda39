from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .onboarding import OnboardingState, QuizQuestion


class ErrorResponse(BaseModel):
    error: str


class SaveResult(BaseModel):
    success: bool = True


class CoachReply(BaseModel):
    content: str


class NutritionPlanEnvelope(BaseModel):
    plan: Optional[Dict[str, Any]]


class OnboardingView(BaseModel):
    state: OnboardingState
    current: Optional[QuizQuestion]
    complete: bool
    total: int


class QuizQuestions(BaseModel):
    questions: List[QuizQuestion]


class ProgressView(BaseModel):
    workout_logs: List[Dict[str, Any]] = Field(default_factory=list)
    measurements: List[Dict[str, Any]] = Field(default_factory=list)


class DashboardSummary(BaseModel):
    profile: Optional[Dict[str, Any]]
    workouts: int
    meal_plans: int
    workout_logs: int
