"""
Volume to weight conversion for common pizza dough ingredients.

Values are grams per US cup, with teaspoon/tablespoon densities where the
ingredient is usually measured with spoons.
"""

import re
from typing import Optional

from ..core.numbers import round_half_up

TBSP_PER_CUP = 16
TSP_PER_CUP = 48


class VolumeIngredient:
    def __init__(
        self,
        id: str,
        name: str,
        grams_per_cup: Optional[float] = None,
        grams_per_tbsp: Optional[float] = None,
        grams_per_tsp: Optional[float] = None,
        common_measures: Optional[dict[str, float]] = None,
    ):
        self.id = id
        self.name = name
        self.grams_per_cup = grams_per_cup
        self.grams_per_tbsp = grams_per_tbsp
        self.grams_per_tsp = grams_per_tsp
        self.common_measures = common_measures or {}

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "grams_per_cup": self.grams_per_cup,
            "grams_per_tbsp": self.grams_per_tbsp,
            "grams_per_tsp": self.grams_per_tsp,
            "common_measures": dict(self.common_measures),
        }


# --- Data Tables ---

_INGREDIENTS = [
    VolumeIngredient(
        "allPurposeFlour", "All-Purpose Flour", grams_per_cup=125,
        common_measures={"1/4": 31, "1/3": 42, "1/2": 63, "2/3": 83, "3/4": 94, "1": 125},
    ),
    VolumeIngredient(
        "breadFlour", "Bread Flour", grams_per_cup=127,
        common_measures={"1/4": 32, "1/3": 42, "1/2": 64, "2/3": 85, "3/4": 95, "1": 127},
    ),
    VolumeIngredient(
        "00Flour", "00 Flour", grams_per_cup=115,
        common_measures={"1/4": 29, "1/3": 38, "1/2": 58, "2/3": 77, "3/4": 86, "1": 115},
    ),
    VolumeIngredient(
        "wholeWheatFlour", "Whole Wheat Flour", grams_per_cup=120,
        common_measures={"1/4": 30, "1/3": 40, "1/2": 60, "2/3": 80, "3/4": 90, "1": 120},
    ),
    VolumeIngredient(
        "semolinaFlour", "Semolina Flour", grams_per_cup=167,
        common_measures={"1/4": 42, "1/3": 56, "1/2": 84, "2/3": 111, "3/4": 125, "1": 167},
    ),
    VolumeIngredient(
        "water", "Water", grams_per_cup=237,
        common_measures={"1/4": 59, "1/3": 79, "1/2": 119, "2/3": 158, "3/4": 178, "1": 237},
    ),
    VolumeIngredient(
        "sugar", "Granulated Sugar", grams_per_cup=200,
        common_measures={"1/4": 50, "1/3": 67, "1/2": 100, "2/3": 133, "3/4": 150, "1": 200},
    ),
    VolumeIngredient(
        "tableSalt", "Table Salt", grams_per_cup=273, grams_per_tbsp=18, grams_per_tsp=6,
        common_measures={"1 tsp": 6, "2 tsp": 12, "1 tbsp": 18, "2 tbsp": 36},
    ),
    VolumeIngredient(
        "kosherSalt", "Kosher Salt (Diamond Crystal)", grams_per_cup=160, grams_per_tbsp=9, grams_per_tsp=3,
        common_measures={"1 tsp": 3, "2 tsp": 6, "1 tbsp": 9, "2 tbsp": 18},
    ),
    VolumeIngredient(
        "oliveOil", "Olive Oil", grams_per_cup=216, grams_per_tbsp=14,
        common_measures={"1 tbsp": 14, "2 tbsp": 28, "1/4": 54, "1/2": 108},
    ),
    # Yeast is only ever spooned, so there is no cup ratio
    VolumeIngredient(
        "instantYeast", "Instant Yeast", grams_per_tsp=3,
        common_measures={"1/4 tsp": 0.75, "1/2 tsp": 1.5, "1 tsp": 3, "2 tsp": 6},
    ),
    VolumeIngredient(
        "activeYeast", "Active Dry Yeast", grams_per_tsp=4,
        common_measures={"1/4 tsp": 1, "1/2 tsp": 2, "1 tsp": 4, "2 tsp": 8},
    ),
]

VOLUME_CONVERSIONS: dict[str, VolumeIngredient] = {i.id: i for i in _INGREDIENTS}

FRACTIONS: dict[str, float] = {
    "1/4": 0.25,
    "1/3": 0.333,
    "1/2": 0.5,
    "2/3": 0.667,
    "3/4": 0.75,
    "1": 1,
    "1 1/4": 1.25,
    "1 1/2": 1.5,
    "2": 2,
    "3": 3,
}

# "1 1/2", "3/4", "2", "0.5"
FRACTION_REGEX = re.compile(r"^\s*(?:(\d+)\s+)?(\d+)\s*/\s*(\d+)\s*$|^\s*(\d+(?:\.\d+)?)\s*$")


# --- Core Functions ---

def parse_fraction(text: str) -> Optional[float]:
    """Parse a cooking amount like "1 1/2" or "3/4". Returns None if unparseable."""
    if text in FRACTIONS:
        return FRACTIONS[text]

    match = FRACTION_REGEX.match(text)
    if not match:
        return None

    whole, num, den, decimal = match.groups()
    if decimal is not None:
        return float(decimal)
    if int(den) == 0:
        return None
    return int(whole or 0) + int(num) / int(den)


def cups_to_grams(cups: float, ingredient_id: str) -> Optional[float]:
    ingredient = VOLUME_CONVERSIONS.get(ingredient_id)
    if ingredient is None or not ingredient.grams_per_cup:
        return None
    return round_half_up(cups * ingredient.grams_per_cup)


def tbsp_to_grams(tbsp: float, ingredient_id: str) -> Optional[float]:
    """Tablespoons to grams (0.1 g). Falls back to the cup ratio (16 tbsp = 1 cup)."""
    ingredient = VOLUME_CONVERSIONS.get(ingredient_id)
    if ingredient is None:
        return None

    if ingredient.grams_per_tbsp:
        return round_half_up(tbsp * ingredient.grams_per_tbsp, 1)
    if ingredient.grams_per_cup:
        return round_half_up((tbsp / TBSP_PER_CUP) * ingredient.grams_per_cup, 1)
    return None


def tsp_to_grams(tsp: float, ingredient_id: str) -> Optional[float]:
    """Teaspoons to grams (0.1 g). Falls back to the cup ratio (48 tsp = 1 cup)."""
    ingredient = VOLUME_CONVERSIONS.get(ingredient_id)
    if ingredient is None:
        return None

    if ingredient.grams_per_tsp:
        return round_half_up(tsp * ingredient.grams_per_tsp, 1)
    if ingredient.grams_per_cup:
        return round_half_up((tsp / TSP_PER_CUP) * ingredient.grams_per_cup, 1)
    return None


def volume_to_grams(amount: float, measure: str, ingredient_id: str) -> Optional[float]:
    if measure == "cup":
        return cups_to_grams(amount, ingredient_id)
    if measure == "tbsp":
        return tbsp_to_grams(amount, ingredient_id)
    if measure == "tsp":
        return tsp_to_grams(amount, ingredient_id)
    return None


def get_all_ingredients() -> list[VolumeIngredient]:
    return list(VOLUME_CONVERSIONS.values())


def get_ingredient_by_id(ingredient_id: str) -> Optional[VolumeIngredient]:
    return VOLUME_CONVERSIONS.get(ingredient_id)
