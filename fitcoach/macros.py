import math
from typing import Dict, Tuple

from .schema import Macros

# share of daily energy: protein, carbs, fat
MACRO_RATIOS: Dict[str, Tuple[float, float, float]] = {
    "Weight Loss": (0.35, 0.30, 0.35),
    "Muscle Gain": (0.30, 0.45, 0.25),
}
DEFAULT_RATIOS = (0.30, 0.40, 0.30)

KCAL_PER_GRAM_PROTEIN = 4
KCAL_PER_GRAM_CARBS = 4
KCAL_PER_GRAM_FAT = 9


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def get_macros(calories: float, goal: str) -> Macros:
    """Gram targets for a calorie budget; unknown goals use the general split."""
    protein, carbs, fat = MACRO_RATIOS.get(goal, DEFAULT_RATIOS)
    return Macros(
        protein=_round_half_up(calories * protein / KCAL_PER_GRAM_PROTEIN),
        carbs=_round_half_up(calories * carbs / KCAL_PER_GRAM_CARBS),
        fat=_round_half_up(calories * fat / KCAL_PER_GRAM_FAT),
    )
