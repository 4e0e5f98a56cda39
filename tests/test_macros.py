import pytest

from fitcoach.macros import get_macros


@pytest.mark.parametrize(
    "calories,goal,expected",
    [
        (2000, "Weight Loss", (175, 150, 78)),
        (2000, "Muscle Gain", (150, 225, 56)),
        (2000, "General Fitness", (150, 200, 67)),
        (2500, "Muscle Gain", (188, 281, 69)),
    ],
)
def test_get_macros(calories, goal, expected):
    macros = get_macros(calories, goal)
    assert (macros.protein, macros.carbs, macros.fat) == expected


def test_unknown_goal_uses_default_split():
    assert get_macros(1800, "Something else") == get_macros(1800, "General Fitness")


def test_zero_calories():
    macros = get_macros(0, "Weight Loss")
    assert (macros.protein, macros.carbs, macros.fat) == (0, 0, 0)


def test_halves_round_up():
    # 15 kcal * 0.30 / 9 = 0.5 g fat
    assert get_macros(15, "General Fitness").fat == 1
    # 2500 kcal * 0.30 / 4 = 187.5 g protein
    assert get_macros(2500, "Muscle Gain").protein == 188
