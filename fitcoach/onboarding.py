"""
Onboarding quiz state.

One store owns the quiz progress: the current step index and the answer map.
It works over any mutable mapping; the HTTP layer hands it the session.
"""

from typing import Any, Dict, List, Literal, MutableMapping, Optional, Union

from pydantic import BaseModel, Field

from .exceptions import ValidationError

AnswerValue = Union[str, List[str]]


class QuizQuestion(BaseModel):
    id: str
    category: Literal["Fitness", "Nutrition", "Lifestyle", "Health"]
    question: str
    options: List[str] = Field(default_factory=list)
    type: Literal["radio", "checkbox", "input"] = "radio"
    allow_select_all: bool = False
    placeholder: Optional[str] = None
    has_other_option: bool = False


class OnboardingState(BaseModel):
    current_question: int = 0
    answers: Dict[str, AnswerValue] = Field(default_factory=dict)


QUESTIONS: List[QuizQuestion] = [
    # fitness
    QuizQuestion(
        id="fitness_goal",
        category="Fitness",
        question="What is your main goal?",
        options=["Lose Weight", "Get Healthier", "Gain Muscle"],
    ),
    QuizQuestion(
        id="body_type",
        category="Fitness",
        question="How would you describe your body type?",
        options=["Slim", "Mid-sized", "Overweight"],
    ),
    QuizQuestion(
        id="dream_body",
        category="Fitness",
        question="What is your dream body?",
        options=["Slim", "Toned", "Curvy"],
    ),
    QuizQuestion(
        id="target_zones",
        category="Fitness",
        question="What are your target zones?",
        type="checkbox",
        options=["Belly", "Butt", "Chest", "Legs", "Arms", "Back", "Shoulders", "Full Body"],
    ),
    QuizQuestion(
        id="sports_experience",
        category="Fitness",
        question="Describe your experience with sports.",
        options=["None", "Beginner", "Intermediate", "Advanced", "Athlete"],
    ),
    QuizQuestion(
        id="best_condition",
        category="Fitness",
        question="When were you in your best physical condition?",
        options=[
            "Currently",
            "1–2 years ago",
            "3–5 years ago",
            "More than 5 years ago",
            "Never sure",
        ],
    ),
    QuizQuestion(
        id="workout_frequency",
        category="Fitness",
        question="How frequently do you work out?",
        options=["Never", "1–2 days/week", "3–4 days/week", "5+ days/week"],
    ),
    # nutrition
    QuizQuestion(
        id="nutrition_habits",
        category="Nutrition",
        question="Describe your nutrition habits.",
        options=["Healthy", "Unhealthy", "Mixed"],
    ),
    QuizQuestion(
        id="cooking_time",
        category="Nutrition",
        question="How much time do you spend cooking daily?",
        options=["<15 min", "15–30 min", "30–60 min", "More than 1 hour"],
    ),
    QuizQuestion(
        id="include_veggies",
        category="Nutrition",
        question="Mark the veggies you want to include.",
        type="checkbox",
        options=[
            "Broccoli",
            "Spinach",
            "Carrots",
            "Tomatoes",
            "Bell Peppers",
            "Cucumber",
            "Cauliflower",
            "Mushrooms",
            "Other",
        ],
        has_other_option=True,
    ),
    QuizQuestion(
        id="include_products",
        category="Nutrition",
        question="Select other products you want to include.",
        type="checkbox",
        allow_select_all=True,
        options=["Chicken", "Fish", "Eggs", "Milk", "Rice", "Oats", "Beans", "Nuts", "Fruits"],
    ),
    QuizQuestion(
        id="diet_preference",
        category="Nutrition",
        question="What type of diet do you prefer?",
        options=[
            "Not Specific",
            "Vegetarian",
            "Vegan",
            "Non-Veg",
            "Keto",
            "Pescatarian",
            "No Sugar",
            "Paleo",
            "Halal",
            "Kosher",
        ],
    ),
    # lifestyle
    QuizQuestion(
        id="daily_routine",
        category="Lifestyle",
        question="What is your daily routine?",
        options=["Mostly Sitting", "Moderately Active", "On Feet Often", "Highly Active"],
    ),
    QuizQuestion(
        id="energy_level",
        category="Lifestyle",
        question="Describe your energy level during the day.",
        options=["Low", "Moderate", "High", "Varies Throughout the Day"],
    ),
    QuizQuestion(
        id="water_intake",
        category="Lifestyle",
        question="How much water do you drink daily?",
        options=["<1L", "1–2L", "2–3L", "3L+", "I don’t track"],
    ),
    QuizQuestion(
        id="bad_habits",
        category="Lifestyle",
        question="Do you have any of these bad habits?",
        type="checkbox",
        options=[
            "Eat Late",
            "Can’t Quit Sugar",
            "Eat Processed Food",
            "Too Much Soda",
            "Eat Too Much Salt",
            "None of These",
        ],
    ),
    QuizQuestion(
        id="life_event",
        category="Lifestyle",
        question="Do you have any important life event coming soon?",
        options=["Wedding", "Vacation", "Sports Event", "Photoshoot", "None"],
    ),
    # health
    QuizQuestion(
        id="height",
        category="Health",
        question="What is your height?",
        type="input",
        placeholder="Enter your height in centimeters (e.g., 175)",
    ),
    QuizQuestion(
        id="weight",
        category="Health",
        question="What is your weight?",
        type="input",
        placeholder="Enter your weight in kilograms (e.g., 70)",
    ),
    QuizQuestion(
        id="target_weight",
        category="Health",
        question="What is your target weight?",
        options=["Lose 5 kg", "Lose 10 kg", "Maintain", "Gain 5 kg", "Gain 10 kg+"],
    ),
    QuizQuestion(
        id="age",
        category="Health",
        question="How old are you?",
        options=["<18", "18–25", "26–35", "36–45", "46+"],
    ),
]

QUESTIONS_BY_ID = {q.id: q for q in QUESTIONS}

STORAGE_KEY = "onboarding"


def validate_answer(question_id: str, value: Any) -> AnswerValue:
    question = QUESTIONS_BY_ID.get(question_id)
    if question is None:
        raise ValidationError(f"Unknown question: {question_id}")

    if question.type == "input":
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"{question_id} expects a text answer")
        return value.strip()

    if question.type == "checkbox":
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ValidationError(f"{question_id} expects a list of options")
        if not question.has_other_option:
            unknown = [v for v in value if v not in question.options]
            if unknown:
                raise ValidationError(f"{question_id} has unknown options: {', '.join(unknown)}")
        return value

    if not isinstance(value, str) or (
        value not in question.options and not question.has_other_option
    ):
        raise ValidationError(f"{question_id} expects one of its options")
    return value


class OnboardingStore:
    def __init__(self, storage: MutableMapping[str, Any], key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key

    def state(self) -> OnboardingState:
        return OnboardingState.model_validate(self.storage.get(self.key) or {})

    def _save(self, state: OnboardingState) -> OnboardingState:
        if state.current_question == 0 and not state.answers:
            self.storage.pop(self.key, None)
        else:
            self.storage[self.key] = state.model_dump()
        return state

    @property
    def is_complete(self) -> bool:
        return self.state().current_question >= len(QUESTIONS)

    def current(self) -> Optional[QuizQuestion]:
        index = self.state().current_question
        return QUESTIONS[index] if index < len(QUESTIONS) else None

    def set_answer(self, question_id: str, value: Any) -> OnboardingState:
        state = self.state()
        answers = {**state.answers, question_id: validate_answer(question_id, value)}
        return self._save(state.model_copy(update={"answers": answers}))

    def next_question(self) -> OnboardingState:
        state = self.state()
        step = min(state.current_question + 1, len(QUESTIONS))
        return self._save(state.model_copy(update={"current_question": step}))

    def prev_question(self) -> OnboardingState:
        state = self.state()
        step = max(0, state.current_question - 1)
        return self._save(state.model_copy(update={"current_question": step}))

    def reset(self) -> OnboardingState:
        return self._save(OnboardingState())
