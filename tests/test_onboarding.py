import pytest

from fitcoach.exceptions import ValidationError
from fitcoach.onboarding import QUESTIONS, STORAGE_KEY, OnboardingStore, validate_answer


@pytest.fixture(name="store")
def store_fixture():
    return OnboardingStore({})


def test_fresh_store_starts_at_first_question(store):
    state = store.state()
    assert state.current_question == 0
    assert state.answers == {}
    assert store.current().id == "fitness_goal"
    assert not store.is_complete


def test_answers_are_kept_in_storage(store):
    store.set_answer("fitness_goal", "Gain Muscle")
    store.set_answer("target_zones", ["Chest", "Arms"])
    assert store.storage[STORAGE_KEY]["answers"] == {
        "fitness_goal": "Gain Muscle",
        "target_zones": ["Chest", "Arms"],
    }
    assert OnboardingStore(store.storage).state().answers["fitness_goal"] == "Gain Muscle"


def test_answering_again_overwrites(store):
    store.set_answer("fitness_goal", "Lose Weight")
    store.set_answer("fitness_goal", "Get Healthier")
    assert store.state().answers == {"fitness_goal": "Get Healthier"}


def test_prev_at_first_question_stays_put(store):
    store.prev_question()
    assert store.state().current_question == 0


def test_next_stops_after_last_question(store):
    for _ in range(len(QUESTIONS) + 3):
        store.next_question()
    assert store.state().current_question == len(QUESTIONS)
    assert store.is_complete
    assert store.current() is None


def test_next_then_prev(store):
    store.next_question()
    store.next_question()
    store.prev_question()
    assert store.current().id == QUESTIONS[1].id


def test_reset_clears_storage(store):
    store.set_answer("height", "180")
    store.next_question()
    store.reset()
    assert STORAGE_KEY not in store.storage
    assert store.state().current_question == 0


def test_input_answers_are_trimmed():
    assert validate_answer("weight", " 70 ") == "70"


def test_other_option_accepts_free_text():
    assert validate_answer("include_veggies", ["Broccoli", "Kohlrabi"]) == [
        "Broccoli",
        "Kohlrabi",
    ]


@pytest.mark.parametrize(
    "question_id,value",
    [
        ("favourite_colour", "blue"),
        ("fitness_goal", "Fly"),
        ("fitness_goal", ["Gain Muscle"]),
        ("target_zones", "Chest"),
        ("target_zones", ["Chest", "Tail"]),
        ("height", "   "),
        ("height", 180),
    ],
)
def test_invalid_answers(question_id, value):
    with pytest.raises(ValidationError):
        validate_answer(question_id, value)
