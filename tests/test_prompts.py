from fitcoach.macros import get_macros
from fitcoach.prompts import (
    build_coach_prompt,
    build_meal_plan_prompt,
    build_nutrition_prompt,
    build_profile_summary,
    build_workout_prompt,
    extract_quiz_data,
)

PROFILE = {
    "display_name": "Sam",
    "fitness_goal": "Weight Loss",
    "diet_preference": "Vegetarian",
    "height_cm": 178,
    "weight_kg": 72,
    "popular_cuisines": ["Italian", "Thai"],
    "water_intake": "2–3L",
    "email": "sam@example.com",
}


def test_extract_quiz_data_keeps_quiz_columns():
    assert extract_quiz_data(PROFILE) == {
        "fitness_goal": "Weight Loss",
        "popular_cuisines": ["Italian", "Thai"],
        "diet_preference": "Vegetarian",
        "water_intake": "2–3L",
    }
    assert extract_quiz_data(None) == {}


def test_profile_summary():
    summary = build_profile_summary(PROFILE, {"water_intake": "2–3L", "age": ""})
    assert "Name: Sam" in summary
    assert "Height: 178 cm" in summary
    assert "Cuisines enjoyed: Italian, Thai" in summary
    assert "water_intake: 2–3L" in summary
    assert "age:" not in summary


def test_profile_summary_without_profile():
    assert build_profile_summary(None, None) == "No profile data was provided."


def test_workout_prompt_defaults():
    prompt = build_workout_prompt(None)
    assert "Goal: strength training" in prompt
    assert "Duration: 45 minutes" in prompt
    assert '"rest_seconds": 60' in prompt


def test_workout_prompt_uses_request():
    prompt = build_workout_prompt(PROFILE, "hypertrophy", "advanced", 60, "dumbbells")
    assert "Fitness Goal: Weight Loss" in prompt
    assert "Difficulty: advanced" in prompt
    assert "Available Equipment: dumbbells" in prompt


def test_meal_plan_prompt_includes_macro_targets():
    prompt = build_meal_plan_prompt(PROFILE, 2000, 4, "no nuts", get_macros(2000, "Weight Loss"))
    assert "Target Calories: 2000" in prompt
    assert "Meals: 4" in prompt
    assert "175g protein, 150g carbs, 78g fat" in prompt


def test_nutrition_prompt_embeds_profile_and_shape():
    prompt = build_nutrition_prompt(PROFILE, extract_quiz_data(PROFILE))
    assert "Diet Preference: Vegetarian" in prompt
    assert '"weeklyPlan"' in prompt
    assert "Provide 7 days" in prompt


def test_coach_prompt_transcript():
    prompt = build_coach_prompt(
        PROFILE,
        [
            {"role": "user", "content": "How many rest days?"},
            {"role": "assistant", "content": "Two."},
            {"role": "user", "content": "Thanks"},
        ],
    )
    assert "- Name: Sam" in prompt
    assert "USER: How many rest days?\nASSISTANT: Two.\nUSER: Thanks\nAI:" in prompt
    assert prompt.endswith("\nAI:")


def test_coach_prompt_without_profile():
    prompt = build_coach_prompt(None, [{"role": "user", "content": "Hi"}])
    assert "User Profile" not in prompt
    assert prompt.endswith("USER: Hi\nAI:")


def test_profile_summary_joins_mixed_lists():
    summary = build_profile_summary(
        {"display_name": "A", "popular_cuisines": ["Thai", 3]}, {"bad_habits": [1, 2]}
    )
    assert "Cuisines enjoyed: Thai, 3" in summary
    assert "bad_habits: 1, 2" in summary
