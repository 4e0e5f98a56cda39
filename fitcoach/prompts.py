"""
Prompt builders for the AI generation endpoints.
"""

from typing import Any, Dict, List, Mapping, Optional

from .schema import Macros

QuizAnswers = Dict[str, Any]

# profile columns that hold onboarding quiz answers
QUIZ_FIELDS = [
    "fitness_goal",
    "body_type",
    "dream_body",
    "sports_experience",
    "best_condition",
    "workout_frequency",
    "popular_cuisines",
    "nutrition_habits",
    "cooking_time",
    "diet_preference",
    "daily_routine",
    "energy_level",
    "water_intake",
    "bad_habits",
    "height",
    "weight",
    "target_weight",
    "age",
]


def extract_quiz_data(profile: Optional[Mapping[str, Any]]) -> QuizAnswers:
    if not profile:
        return {}
    return {key: profile[key] for key in QUIZ_FIELDS if key in profile}


def _join(value: Any) -> str:
    # profile and quiz data can come straight from the client; lists may hold any JSON value
    return ", ".join(str(v) for v in value) if isinstance(value, list) else str(value)


def build_profile_summary(
    profile: Optional[Mapping[str, Any]], quiz_data: Optional[QuizAnswers]
) -> str:
    if not profile:
        return "No profile data was provided."

    height = f"{profile['height_cm']} cm" if profile.get("height_cm") else profile.get("height")
    weight = f"{profile['weight_kg']} kg" if profile.get("weight_kg") else profile.get("weight")
    cuisines = profile.get("popular_cuisines")

    lines = [
        f"Name: {profile.get('display_name') or 'not specified'}",
        f"Goal/Focus: {profile.get('fitness_goal') or 'not specified'}",
        f"Diet Preference: {profile.get('diet_preference') or 'not specified'}",
        "Activity Level: "
        f"{profile.get('activity_level') or profile.get('daily_routine') or 'not specified'}",
        f"Height: {height or 'not specified'}",
        f"Weight: {weight or 'not specified'}",
        f"Target Weight: {profile.get('target_weight') or 'not specified'}",
        f"Cuisines enjoyed: {_join(cuisines) if cuisines else 'not specified'}",
        f"Nutrition habits: {profile.get('nutrition_habits') or 'not specified'}",
    ]

    for key, value in (quiz_data or {}).items():
        if value and not any(key in line.lower() for line in lines):
            lines.append(f"{key}: {_join(value)}")

    return "\n".join(lines)


# ---------- workout ----------
def build_workout_prompt(
    profile: Optional[Mapping[str, Any]],
    goal: Optional[str] = None,
    difficulty: Optional[str] = None,
    duration: Optional[Any] = None,
    equipment: Optional[str] = None,
) -> str:
    p = profile or {}
    return f"""Generate a detailed workout plan based on the following requirements:

User Profile:
- Fitness Goal: {p.get("fitness_goal") or "general fitness"}
- Current Level: {p.get("current_fitness_level") or "intermediate"}
- Activity Level: {p.get("activity_level") or "moderate"}
- Preference: {p.get("workout_preference") or "strength training"}
- Duration Available: {p.get("workout_duration") or "45 minutes"}
- Health Conditions: {p.get("health_conditions") or "none"}
- Stress Level: {p.get("stress_level") or "moderate"}
- Sleep Quality: {p.get("sleep_hours") or "6-7 hours"}

Workout Requirements:
- Goal: {goal or "strength training"}
- Difficulty: {difficulty or "intermediate"}
- Duration: {duration or 45} minutes
- Available Equipment: {equipment or "full gym"}

Provide a workout name, a brief description and 5-7 exercises, each with
sets, reps, a recommended weight where it applies, rest time in seconds and
short form cues.

Format your response as JSON with this structure:
{{
  "name": "workout name",
  "description": "workout description",
  "exercises": [
    {{
      "name": "exercise name",
      "sets": 3,
      "reps": 10,
      "weight_kg": 20,
      "rest_seconds": 60,
      "notes": "form cues"
    }}
  ]
}}"""


# ---------- single-day meal plan ----------
def build_meal_plan_prompt(
    profile: Optional[Mapping[str, Any]],
    target_calories: float,
    meals_per_day: int,
    dietary_preferences: Optional[str],
    macros: Macros,
) -> str:
    p = profile or {}
    return f"""Generate a daily meal plan based on the following requirements:

User Profile:
- Fitness Goal: {p.get("fitness_goal") or "maintain"}
- Diet Preference: {p.get("diet_preference") or "balanced"}
- Activity Level: {p.get("activity_level") or "moderate"}

Requirements:
- Target Calories: {target_calories:g}
- Meals: {meals_per_day}
- Preferences: {dietary_preferences or "none"}
- Macro Targets: {macros.protein}g protein, {macros.carbs}g carbs, {macros.fat}g fat

Provide JSON response only:
{{
  "name": "meal plan name",
  "description": "brief description",
  "meals": [
    {{
      "name": "meal name",
      "meal_type": "breakfast",
      "calories": 500,
      "protein_g": 30,
      "carbs_g": 50,
      "fat_g": 15,
      "ingredients": ["ingredient1"],
      "instructions": "how to prepare"
    }}
  ]
}}"""


# ---------- weekly nutrition plan ----------
NUTRITION_PLAN_SHAPE = """{
  "generatedAt": "ISO timestamp",
  "dailyCalories": 2200,
  "dietType": "Mediterranean",
  "macros": { "calories": 2200, "protein": 150, "carbs": 230, "fats": 70 },
  "weeklyPlan": [
    {
      "day": "Monday",
      "focus": "High protein day",
      "meals": [
        {
          "name": "Greek yogurt parfait",
          "type": "breakfast",
          "calories": 400,
          "macros": { "protein": 30, "carbs": 40, "fats": 10 },
          "ingredients": ["Greek yogurt", "berries", "granola"],
          "instructions": ["Assemble ingredients in a bowl"]
        }
      ],
      "snacks": ["Almonds", "Protein shake"]
    }
  ],
  "snacks": ["Fresh fruit with nut butter", "Protein shake with greens blend"],
  "recipes": [
    {
      "title": "Sheet pan salmon and veggies",
      "summary": "Easy dinner rich in omega-3s",
      "macros": { "calories": 520, "protein": 40, "carbs": 35, "fats": 24 },
      "ingredients": ["salmon fillets", "broccoli", "olive oil", "lemon"],
      "instructions": ["Preheat oven ...", "Bake ..."]
    }
  ],
  "shoppingList": [
    {
      "category": "Produce",
      "items": [
        { "name": "Spinach", "quantity": "3 bags" },
        { "name": "Blueberries", "quantity": "4 cups" }
      ]
    }
  ],
  "notes": [
    "Drink at least 3L of water daily",
    "Prep grains and proteins on Sunday night"
  ]
}"""


def build_nutrition_prompt(
    profile: Optional[Mapping[str, Any]], quiz_data: Optional[QuizAnswers]
) -> str:
    summary = build_profile_summary(profile, quiz_data)
    return f"""You are an elite nutrition coach creating a comprehensive weekly nutrition plan.
Use the following profile data:
{summary}

Return ONLY valid JSON with this structure:
{NUTRITION_PLAN_SHAPE}

Rules:
- Provide 7 days in weeklyPlan with 3-4 meals per day.
- Macros must align with dailyCalories totals (approximate is fine).
- Snacks list should include versatile, quick ideas.
- Recipes should include instructions and macros.
- Shopping list must be grouped by category with meaningful quantities.
- Respond with JSON only, no markdown fencing."""


# ---------- coach chat ----------
def build_coach_prompt(
    profile: Optional[Mapping[str, Any]], messages: List[Mapping[str, str]]
) -> str:
    context = ""
    if profile:
        weight = f"{profile['weight_kg']} kg" if profile.get("weight_kg") else "Not specified"
        height = f"{profile['height_cm']} cm" if profile.get("height_cm") else "Not specified"
        context = f"""User Profile:
- Name: {profile.get("display_name") or "User"}
- Goal: {profile.get("fitness_goal") or "Not set"}
- Level: {profile.get("current_fitness_level") or "Not specified"}
- Weight: {weight}
- Height: {height}"""

    system_prompt = f"""You are a friendly and expert AI Fitness Coach.
You give workout, nutrition, and motivation advice tailored to the user's fitness profile.

{context}

Respond helpfully, clearly, and concisely."""

    conversation = "\n".join(f"{m['role'].upper()}: {m['content']}" for m in messages)
    return f"{system_prompt}\n\n{conversation}\nAI:"
