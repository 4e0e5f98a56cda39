import datetime
from functools import lru_cache
from typing import Any, Dict, List, Optional

from supabase import AuthError, Client, PostgrestAPIError, create_client

from .config import SUPABASE_KEY, SUPABASE_URL
from .exceptions import AuthenticationError, DownstreamError
from .logging import get_logger

logger = get_logger(__name__)

Row = Dict[str, Any]


@lru_cache(maxsize=1)
def get_client() -> Client:
    if not SUPABASE_URL or not SUPABASE_KEY:
        raise ValueError(
            "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY (or SUPABASE_ANON_KEY) must be set"
        )
    return create_client(SUPABASE_URL, SUPABASE_KEY)


def _now() -> str:
    return datetime.datetime.now(datetime.UTC).isoformat()


def _execute(query: Any, action: str):
    try:
        return query.execute()
    except PostgrestAPIError as e:
        logger.error("supabase.%s failed: %s", action, e)
        raise DownstreamError(f"{action} failed: {e}") from e


def _first(rows: Optional[List[Row]]) -> Optional[Row]:
    return rows[0] if rows else None


# ---------- auth ----------
def verify_access_token(sb: Client, token: str) -> Row:
    try:
        resp = sb.auth.get_user(token)
    except AuthError as e:
        raise AuthenticationError(f"token rejected: {e}") from e
    user = resp.user if resp else None
    if user is None:
        raise AuthenticationError("token did not resolve to a user")
    return {"id": user.id, "email": user.email}


# ---------- profiles ----------
def get_profile(sb: Client, user_id: str) -> Optional[Row]:
    res = _execute(
        sb.table("profiles").select("*").eq("id", user_id).limit(1), "get_profile"
    )
    return _first(res.data)


def update_profile(sb: Client, user_id: str, fields: Row) -> None:
    fields = {**fields, "updated_at": _now()}
    _execute(sb.table("profiles").update(fields).eq("id", user_id), "update_profile")


# ---------- nutrition plans ----------
def get_nutrition_plan(sb: Client, user_id: str) -> Optional[Row]:
    res = _execute(
        sb.table("nutrition_plans").select("plan").eq("user_id", user_id).limit(1),
        "get_nutrition_plan",
    )
    row = _first(res.data)
    return row["plan"] if row else None


def save_nutrition_plan(sb: Client, user_id: str, plan: Row) -> None:
    # one plan per user; the latest generation replaces the previous one
    existing = _execute(
        sb.table("nutrition_plans").select("id").eq("user_id", user_id).limit(1),
        "find_nutrition_plan",
    ).data
    if existing:
        _execute(
            sb.table("nutrition_plans")
            .update({"plan": plan, "updated_at": _now()})
            .eq("user_id", user_id),
            "update_nutrition_plan",
        )
    else:
        _execute(
            sb.table("nutrition_plans").insert({"user_id": user_id, "plan": plan}),
            "insert_nutrition_plan",
        )


# ---------- workouts ----------
def create_workout(
    sb: Client, user_id: str, workout: Row, exercises: List[Row]
) -> Row:
    row = _execute(
        sb.table("workouts").insert({**workout, "user_id": user_id}), "insert_workout"
    ).data[0]
    exercise_rows = [
        {**exercise, "workout_id": row["id"], "order_index": index}
        for index, exercise in enumerate(exercises)
    ]
    if exercise_rows:
        row["exercises"] = _execute(
            sb.table("exercises").insert(exercise_rows), "insert_exercises"
        ).data
    else:
        row["exercises"] = []
    return row


def list_workouts(sb: Client, user_id: str) -> List[Row]:
    res = _execute(
        sb.table("workouts")
        .select("*")
        .eq("user_id", user_id)
        .order("created_at", desc=True),
        "list_workouts",
    )
    return res.data


def get_workout(sb: Client, user_id: str, workout_id: str) -> Optional[Row]:
    workout = _first(
        _execute(
            sb.table("workouts")
            .select("*")
            .eq("id", workout_id)
            .eq("user_id", user_id)
            .limit(1),
            "get_workout",
        ).data
    )
    if workout is None:
        return None
    workout["exercises"] = _execute(
        sb.table("exercises")
        .select("*")
        .eq("workout_id", workout_id)
        .order("order_index"),
        "list_exercises",
    ).data
    return workout


def delete_workout(sb: Client, user_id: str, workout_id: str) -> bool:
    res = _execute(
        sb.table("workouts").delete().eq("id", workout_id).eq("user_id", user_id),
        "delete_workout",
    )
    return bool(res.data)


def log_workout(sb: Client, user_id: str, workout_id: str) -> Row:
    return _execute(
        sb.table("workout_logs").insert(
            {"user_id": user_id, "workout_id": workout_id, "completed_at": _now()}
        ),
        "insert_workout_log",
    ).data[0]


def list_workout_logs(sb: Client, user_id: str) -> List[Row]:
    return _execute(
        sb.table("workout_logs")
        .select("*, workouts(name)")
        .eq("user_id", user_id)
        .order("completed_at", desc=True),
        "list_workout_logs",
    ).data


# ---------- meal plans ----------
def create_meal_plan(sb: Client, user_id: str, plan: Row, meals: List[Row]) -> Row:
    row = _execute(
        sb.table("meal_plans").insert({**plan, "user_id": user_id}), "insert_meal_plan"
    ).data[0]
    meal_rows = [{**meal, "meal_plan_id": row["id"]} for meal in meals]
    if meal_rows:
        row["meals"] = _execute(sb.table("meals").insert(meal_rows), "insert_meals").data
    else:
        row["meals"] = []
    return row


def list_meal_plans(sb: Client, user_id: str) -> List[Row]:
    return _execute(
        sb.table("meal_plans")
        .select("*")
        .eq("user_id", user_id)
        .order("created_at", desc=True),
        "list_meal_plans",
    ).data


def get_meal_plan(sb: Client, user_id: str, meal_plan_id: str) -> Optional[Row]:
    plan = _first(
        _execute(
            sb.table("meal_plans")
            .select("*")
            .eq("id", meal_plan_id)
            .eq("user_id", user_id)
            .limit(1),
            "get_meal_plan",
        ).data
    )
    if plan is None:
        return None
    plan["meals"] = _execute(
        sb.table("meals").select("*").eq("meal_plan_id", meal_plan_id),
        "list_meals",
    ).data
    return plan


def delete_meal_plan(sb: Client, user_id: str, meal_plan_id: str) -> bool:
    res = _execute(
        sb.table("meal_plans").delete().eq("id", meal_plan_id).eq("user_id", user_id),
        "delete_meal_plan",
    )
    return bool(res.data)


# ---------- progress ----------
def add_measurement(sb: Client, user_id: str, measurement: Row) -> Row:
    return _execute(
        sb.table("body_measurements").insert({**measurement, "user_id": user_id}),
        "insert_measurement",
    ).data[0]


def list_measurements(sb: Client, user_id: str) -> List[Row]:
    return _execute(
        sb.table("body_measurements")
        .select("*")
        .eq("user_id", user_id)
        .order("measured_at", desc=True),
        "list_measurements",
    ).data


def count_rows(sb: Client, table: str, user_id: str) -> int:
    res = _execute(
        sb.table(table).select("id", count="exact").eq("user_id", user_id),
        f"count_{table}",
    )
    return res.count or 0


# ---------- coach chat ----------
def save_chat_message(
    sb: Client, user_id: str, conversation_id: str, content: str, role: str = "assistant"
) -> None:
    _execute(
        sb.table("chat_messages").insert(
            {
                "conversation_id": conversation_id,
                "role": role,
                "content": content,
                "user_id": user_id,
            }
        ),
        "insert_chat_message",
    )
