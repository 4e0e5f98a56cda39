"""
FitCoach - fitness tracking API
Onboarding quiz, AI plan generation and the workout / nutrition / progress dashboard
"""

import datetime
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Union

import uvicorn
from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator
from starlette.middleware.sessions import SessionMiddleware
from supabase import Client

from . import supabase_client as db
from .ai_client import TextGenerator
from .config import LOG_LEVEL, SESSION_SECRET
from .deps import get_current_user, get_onboarding_store, get_supabase, get_text_generator
from .exceptions import DownstreamError, FitCoachError, NotFoundError, ValidationError
from .generators import FitnessCoach, MealPlanGenerator, NutritionPlanGenerator, WorkoutGenerator
from .logging import configure_logging, get_logger
from .normalizers import normalize
from .onboarding import QUESTIONS, QUESTIONS_BY_ID, OnboardingStore
from .prompts import QUIZ_FIELDS, extract_quiz_data
from .responses import (
    CoachReply,
    DashboardSummary,
    ErrorResponse,
    NutritionPlanEnvelope,
    OnboardingView,
    ProgressView,
    QuizQuestions,
    SaveResult,
)
from .schema import MealPlan

logger = get_logger(__name__)

# profile columns a quiz submission may write
PROFILE_QUIZ_COLUMNS = set(QUIZ_FIELDS) | set(QUESTIONS_BY_ID) | {"display_name"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(LOG_LEVEL)
    logger.info("startup: fitcoach api ready")
    yield


app = FastAPI(
    title="FitCoach",
    description="Fitness tracking with AI workout, meal and nutrition plans",
    version="1.0.0",
    lifespan=lifespan,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
app.add_middleware(SessionMiddleware, secret_key=SESSION_SECRET)


# ---------- error handling ----------
@app.exception_handler(FitCoachError)
async def fitcoach_error_handler(request: Request, exc: FitCoachError):
    if exc.http_status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.info(
            "%s %s rejected (%s): %s", request.method, request.url.path, exc.http_status, exc
        )
    return JSONResponse(exc.to_dict(), status_code=exc.http_status)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info("%s %s invalid body: %s", request.method, request.url.path, exc.errors()[:1])
    return JSONResponse({"error": "Invalid request body"}, status_code=400)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("%s %s crashed", request.method, request.url.path)
    return JSONResponse({"error": "Internal server error"}, status_code=500)


# ---------- request models ----------
class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class WorkoutRequest(BaseModel):
    goal: Optional[str] = None
    difficulty: Optional[str] = None
    duration: Optional[Union[int, str]] = None
    equipment: Optional[str] = None


class MealPlanRequest(CamelModel):
    target_calories: Optional[float] = Field(None, alias="targetCalories", gt=0)
    dietary_preferences: Optional[str] = Field(None, alias="dietaryPreferences")
    meals_per_day: Optional[int] = Field(None, alias="mealsPerDay", ge=1, le=8)


class NutritionRequest(CamelModel):
    profile: Optional[Dict[str, Any]] = None
    quiz_data: Optional[Dict[str, Any]] = Field(None, alias="quizData")

    @field_validator("profile", "quiz_data", mode="before")
    @classmethod
    def _records_only(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else None


class CoachRequest(CamelModel):
    messages: Any = None
    conversation_id: Optional[str] = Field(None, alias="conversationId")


class AnswerRequest(BaseModel):
    id: str
    value: Union[str, List[str]]


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = None
    height_cm: Optional[int] = Field(None, gt=0)
    weight_kg: Optional[float] = Field(None, gt=0)
    date_of_birth: Optional[datetime.date] = None
    fitness_goal: Optional[str] = None
    activity_level: Optional[str] = None


class ExerciseIn(BaseModel):
    name: str
    sets: int = Field(3, ge=1)
    reps: int = Field(10, ge=1)
    weight_kg: Optional[float] = Field(None, ge=0)
    rest_seconds: int = Field(60, ge=0)
    notes: Optional[str] = None


class WorkoutCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    difficulty: str = "beginner"
    duration_minutes: Optional[int] = Field(None, gt=0)
    exercises: List[ExerciseIn] = Field(default_factory=list)


class MealIn(BaseModel):
    name: str
    meal_type: str = "breakfast"
    calories: Optional[float] = None
    protein_g: Optional[float] = None
    carbs_g: Optional[float] = None
    fat_g: Optional[float] = None
    ingredients: Optional[Union[str, List[str]]] = None
    instructions: Optional[str] = None


class MealPlanCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    target_calories: Optional[float] = None
    target_protein_g: Optional[float] = None
    target_carbs_g: Optional[float] = None
    target_fat_g: Optional[float] = None
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    meals: List[MealIn] = Field(default_factory=list)


class MeasurementCreate(BaseModel):
    measured_at: datetime.date = Field(default_factory=datetime.date.today)
    weight_kg: Optional[float] = Field(None, gt=0)
    body_fat_percentage: Optional[float] = Field(None, ge=0, le=100)
    muscle_mass_kg: Optional[float] = Field(None, gt=0)
    chest_cm: Optional[float] = Field(None, gt=0)
    waist_cm: Optional[float] = Field(None, gt=0)
    hips_cm: Optional[float] = Field(None, gt=0)
    biceps_cm: Optional[float] = Field(None, gt=0)
    thighs_cm: Optional[float] = Field(None, gt=0)


# ---------- helpers ----------
def plan_json(plan: BaseModel) -> Dict[str, Any]:
    return plan.model_dump(mode="json", by_alias=True, exclude_none=True)


def _split_ingredients(value: Union[str, List[str], None]) -> Optional[List[str]]:
    if value is None:
        return None
    items = value.split(",") if isinstance(value, str) else value
    cleaned = [item.strip() for item in items if item.strip()]
    return cleaned or None


def _quiz_fields(answers: Dict[str, Any]) -> Dict[str, Any]:
    fields = {k: v for k, v in answers.items() if k in PROFILE_QUIZ_COLUMNS}
    if not fields:
        raise ValidationError("No quiz answers to save")
    return fields


def _meal_totals(plan: MealPlan) -> Dict[str, float]:
    return {
        "target_calories": sum(m.calories for m in plan.meals),
        "target_protein_g": sum(m.protein_g or 0 for m in plan.meals),
        "target_carbs_g": sum(m.carbs_g or 0 for m in plan.meals),
        "target_fat_g": sum(m.fat_g or 0 for m in plan.meals),
    }


# ---------- AI generation ----------
@app.post("/api/ai/generate-workout")
async def generate_workout(
    body: WorkoutRequest,
    user: Dict = Depends(get_current_user),
    sb: Client = Depends(get_supabase),
    ai: TextGenerator = Depends(get_text_generator),
):
    """Generate a single workout tailored to the user's profile"""
    profile = db.get_profile(sb, user["id"])
    plan = await WorkoutGenerator(ai).generate(
        profile=profile,
        goal=body.goal,
        difficulty=body.difficulty,
        duration=body.duration,
        equipment=body.equipment,
    )
    return plan_json(plan)


@app.post("/api/ai/generate-meal-plan")
async def generate_meal_plan(
    body: MealPlanRequest,
    user: Dict = Depends(get_current_user),
    sb: Client = Depends(get_supabase),
    ai: TextGenerator = Depends(get_text_generator),
):
    """Generate a one-day meal plan around a calorie target"""
    profile = db.get_profile(sb, user["id"])
    plan = await MealPlanGenerator(ai).generate(
        profile=profile,
        target_calories=body.target_calories,
        meals_per_day=body.meals_per_day,
        dietary_preferences=body.dietary_preferences,
    )
    return plan_json(plan)


@app.post("/api/nutrition-plan", response_model=NutritionPlanEnvelope)
async def generate_nutrition_plan(
    body: Optional[NutritionRequest] = None,
    user: Dict = Depends(get_current_user),
    sb: Client = Depends(get_supabase),
    ai: TextGenerator = Depends(get_text_generator),
):
    """Generate and store the user's weekly nutrition plan"""
    profile = body.profile if body and body.profile else db.get_profile(sb, user["id"])
    if not profile:
        raise ValidationError("Profile not found")
    quiz_data = body.quiz_data if body and body.quiz_data else extract_quiz_data(profile)

    generator = NutritionPlanGenerator(ai)
    plan = plan_json(await generator.generate(profile=profile, quiz_data=quiz_data))
    try:
        db.save_nutrition_plan(sb, user["id"], plan)
    except DownstreamError as e:
        e.public_message = generator.failure_message
        raise
    return {"plan": plan}


@app.get("/api/nutrition-plan", response_model=NutritionPlanEnvelope)
async def current_nutrition_plan(
    user: Dict = Depends(get_current_user), sb: Client = Depends(get_supabase)
):
    return {"plan": db.get_nutrition_plan(sb, user["id"])}


@app.post("/api/ai/fitness-coach", response_model=CoachReply)
async def fitness_coach(
    body: CoachRequest,
    user: Dict = Depends(get_current_user),
    sb: Client = Depends(get_supabase),
    ai: TextGenerator = Depends(get_text_generator),
):
    """Answer the latest message of a coaching conversation"""
    messages = body.messages
    if not isinstance(messages, list) or not all(
        isinstance(m, dict)
        and isinstance(m.get("role"), str)
        and isinstance(m.get("content"), str)
        for m in messages
    ):
        raise ValidationError("Invalid message format")

    profile = db.get_profile(sb, user["id"])
    text = await FitnessCoach(ai).reply(messages, profile)

    if body.conversation_id and body.conversation_id != "temp":
        db.save_chat_message(sb, user["id"], body.conversation_id, text)

    return {"content": text}


# ---------- quiz & profile ----------
@app.post("/api/quiz/save-answers", response_model=SaveResult)
async def save_quiz_answers(
    body: Dict[str, Any] = Body(...),
    user: Dict = Depends(get_current_user),
    sb: Client = Depends(get_supabase),
):
    fields = _quiz_fields(body)
    try:
        db.update_profile(sb, user["id"], fields)
    except DownstreamError as e:
        e.public_message = "Failed to save quiz answers"
        raise
    return {"success": True}


@app.get("/api/profile")
async def read_profile(user: Dict = Depends(get_current_user), sb: Client = Depends(get_supabase)):
    profile = db.get_profile(sb, user["id"])
    if profile is None:
        raise NotFoundError("Profile not found")
    return profile


@app.put("/api/profile")
async def update_profile(
    body: ProfileUpdate,
    user: Dict = Depends(get_current_user),
    sb: Client = Depends(get_supabase),
):
    fields = body.model_dump(mode="json", exclude_unset=True)
    if not fields:
        raise ValidationError("Nothing to update")
    db.update_profile(sb, user["id"], fields)
    return db.get_profile(sb, user["id"])


@app.get("/api/dashboard", response_model=DashboardSummary)
async def dashboard(user: Dict = Depends(get_current_user), sb: Client = Depends(get_supabase)):
    uid = user["id"]
    return {
        "profile": db.get_profile(sb, uid),
        "workouts": db.count_rows(sb, "workouts", uid),
        "meal_plans": db.count_rows(sb, "meal_plans", uid),
        "workout_logs": db.count_rows(sb, "workout_logs", uid),
    }


# ---------- onboarding ----------
def _onboarding_view(store: OnboardingStore) -> Dict[str, Any]:
    return {
        "state": store.state(),
        "current": store.current(),
        "complete": store.is_complete,
        "total": len(QUESTIONS),
    }


@app.get("/api/onboarding/questions", response_model=QuizQuestions)
async def onboarding_questions():
    return {"questions": QUESTIONS}


@app.get("/api/onboarding", response_model=OnboardingView)
async def onboarding_state(store: OnboardingStore = Depends(get_onboarding_store)):
    return _onboarding_view(store)


@app.post("/api/onboarding/answers", response_model=OnboardingView)
async def onboarding_answer(
    body: AnswerRequest, store: OnboardingStore = Depends(get_onboarding_store)
):
    store.set_answer(body.id, body.value)
    return _onboarding_view(store)


@app.post("/api/onboarding/next", response_model=OnboardingView)
async def onboarding_next(store: OnboardingStore = Depends(get_onboarding_store)):
    store.next_question()
    return _onboarding_view(store)


@app.post("/api/onboarding/prev", response_model=OnboardingView)
async def onboarding_prev(store: OnboardingStore = Depends(get_onboarding_store)):
    store.prev_question()
    return _onboarding_view(store)


@app.post("/api/onboarding/reset", response_model=OnboardingView)
async def onboarding_reset(store: OnboardingStore = Depends(get_onboarding_store)):
    store.reset()
    return _onboarding_view(store)


@app.post("/api/onboarding/complete", response_model=SaveResult)
async def onboarding_complete(
    store: OnboardingStore = Depends(get_onboarding_store),
    user: Dict = Depends(get_current_user),
    sb: Client = Depends(get_supabase),
):
    """Copy the session's quiz answers onto the signed-in user's profile"""
    fields = _quiz_fields(store.state().answers)
    try:
        db.update_profile(sb, user["id"], fields)
    except DownstreamError as e:
        e.public_message = "Failed to save quiz answers"
        raise
    store.reset()
    return {"success": True}


# ---------- workouts ----------
@app.get("/api/workouts")
async def list_workouts(user: Dict = Depends(get_current_user), sb: Client = Depends(get_supabase)):
    return db.list_workouts(sb, user["id"])


@app.post("/api/workouts", status_code=201)
async def create_workout(
    body: WorkoutCreate,
    user: Dict = Depends(get_current_user),
    sb: Client = Depends(get_supabase),
):
    """Save a workout, either built by hand or accepted from the AI generator"""
    workout = body.model_dump(exclude={"exercises"})
    exercises = [
        {**ex.model_dump(), "notes": ex.notes or None}
        for ex in body.exercises
        if ex.name.strip()
    ]
    return db.create_workout(sb, user["id"], workout, exercises)


@app.get("/api/workouts/{workout_id}")
async def read_workout(
    workout_id: str, user: Dict = Depends(get_current_user), sb: Client = Depends(get_supabase)
):
    workout = db.get_workout(sb, user["id"], workout_id)
    if workout is None:
        raise NotFoundError("Workout not found")
    return workout


@app.delete("/api/workouts/{workout_id}", response_model=SaveResult)
async def delete_workout(
    workout_id: str, user: Dict = Depends(get_current_user), sb: Client = Depends(get_supabase)
):
    if not db.delete_workout(sb, user["id"], workout_id):
        raise NotFoundError("Workout not found")
    return {"success": True}


@app.post("/api/workouts/{workout_id}/log", status_code=201)
async def log_workout(
    workout_id: str, user: Dict = Depends(get_current_user), sb: Client = Depends(get_supabase)
):
    """Record that the user completed a workout session"""
    if db.get_workout(sb, user["id"], workout_id) is None:
        raise NotFoundError("Workout not found")
    return db.log_workout(sb, user["id"], workout_id)


# ---------- meal plans ----------
@app.get("/api/meal-plans")
async def list_meal_plans(
    user: Dict = Depends(get_current_user), sb: Client = Depends(get_supabase)
):
    return db.list_meal_plans(sb, user["id"])


@app.post("/api/meal-plans", status_code=201)
async def create_meal_plan(
    body: MealPlanCreate,
    user: Dict = Depends(get_current_user),
    sb: Client = Depends(get_supabase),
):
    plan = body.model_dump(mode="json", exclude={"meals"})
    meals = [
        {
            **meal.model_dump(exclude={"ingredients", "instructions"}),
            "ingredients": _split_ingredients(meal.ingredients),
            "instructions": meal.instructions or None,
        }
        for meal in body.meals
        if meal.name.strip()
    ]
    return db.create_meal_plan(sb, user["id"], plan, meals)


@app.post("/api/meal-plans/generated", status_code=201)
async def save_generated_meal_plan(
    body: Dict[str, Any] = Body(...),
    user: Dict = Depends(get_current_user),
    sb: Client = Depends(get_supabase),
):
    """Store an AI meal plan; its targets are the sum of its meals"""
    result = normalize(MealPlan, body)
    if not result.ok:
        raise ValidationError(f"Invalid meal plan: {result.reason}")
    plan = result.plan
    record = {"name": plan.name, "description": plan.description, **_meal_totals(plan)}
    meals = [meal.model_dump() for meal in plan.meals]
    return db.create_meal_plan(sb, user["id"], record, meals)


@app.get("/api/meal-plans/{meal_plan_id}")
async def read_meal_plan(
    meal_plan_id: str, user: Dict = Depends(get_current_user), sb: Client = Depends(get_supabase)
):
    plan = db.get_meal_plan(sb, user["id"], meal_plan_id)
    if plan is None:
        raise NotFoundError("Meal plan not found")
    return plan


@app.delete("/api/meal-plans/{meal_plan_id}", response_model=SaveResult)
async def delete_meal_plan(
    meal_plan_id: str, user: Dict = Depends(get_current_user), sb: Client = Depends(get_supabase)
):
    if not db.delete_meal_plan(sb, user["id"], meal_plan_id):
        raise NotFoundError("Meal plan not found")
    return {"success": True}


# ---------- progress ----------
@app.get("/api/progress", response_model=ProgressView)
async def progress(user: Dict = Depends(get_current_user), sb: Client = Depends(get_supabase)):
    return {
        "workout_logs": db.list_workout_logs(sb, user["id"]),
        "measurements": db.list_measurements(sb, user["id"]),
    }


@app.get("/api/progress/measurements")
async def list_measurements(
    user: Dict = Depends(get_current_user), sb: Client = Depends(get_supabase)
):
    return db.list_measurements(sb, user["id"])


@app.post("/api/progress/measurements", status_code=201)
async def add_measurement(
    body: MeasurementCreate,
    user: Dict = Depends(get_current_user),
    sb: Client = Depends(get_supabase),
):
    measurement = body.model_dump(mode="json")
    measurement["measured_at"] = datetime.datetime.combine(
        body.measured_at, datetime.time(), tzinfo=datetime.UTC
    ).isoformat()
    return db.add_measurement(sb, user["id"], measurement)


@app.get("/api/health")
async def health():
    return {"status": "ok"}


# Development server
if __name__ == "__main__":
    uvicorn.run("fitcoach.main:app", host="0.0.0.0", port=8000, reload=True)
