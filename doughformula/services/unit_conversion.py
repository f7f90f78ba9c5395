"""
Weight unit conversion.

Recipes are calculated in grams; the UI can show ounces instead. The chosen
unit is remembered in the session key-value store.
"""

import logging
from typing import Callable

from ..core.numbers import round_half_up
from ..errors import StorageUnavailable
from ..infra.kv_store import KeyValueStore
from ..schemas import WeightUnit

logger = logging.getLogger("doughformula.units")

GRAMS_PER_OUNCE = 28.3495

# Amounts below this many grams (salt, yeast) keep a decimal place
PRECISE_THRESHOLD_GRAMS = 10

UNIT_STORAGE_KEY = "preferredUnit"
DEFAULT_UNIT: WeightUnit = "grams"


class UnitDef:
    def __init__(self, id: str, name: str, abbrev: str, convert: Callable[[float], float]):
        self.id = id
        self.name = name
        self.abbrev = abbrev
        self.convert = convert

    def to_dict(self):
        return {"id": self.id, "name": self.name, "abbrev": self.abbrev}


UNITS: dict[str, UnitDef] = {
    "grams": UnitDef("grams", "Grams", "g", lambda grams: grams),
    "ounces": UnitDef("ounces", "Ounces", "oz", lambda grams: grams / GRAMS_PER_OUNCE),
}


def convert_weight(grams: float, unit: str = "grams") -> float:
    """Convert grams to ``unit``. Ounces keep one decimal, grams are whole.

    Unknown units return the grams unchanged.
    """
    unit_def = UNITS.get(unit)
    if unit_def is None:
        return grams

    converted = unit_def.convert(grams)
    if unit == "ounces":
        return round_half_up(converted, 1)
    return round_half_up(converted)


def _display(value: float) -> str:
    # 12.0 -> "12", 0.4 -> "0.4"
    return f"{value:g}"


def format_weight(grams: float, unit: str = "grams") -> str:
    unit_def = UNITS.get(unit, UNITS["grams"])
    return f"{_display(convert_weight(grams, unit_def.id))}{unit_def.abbrev}"


def format_weight_precise(grams: float, unit: str = "grams") -> str:
    """Like format_weight, but small doses (< 10 g) get one decimal in any unit."""
    unit_def = UNITS.get(unit, UNITS["grams"])
    converted = unit_def.convert(grams)

    if grams < PRECISE_THRESHOLD_GRAMS:
        converted = round_half_up(converted, 1)
    else:
        converted = round_half_up(converted)

    return f"{_display(converted)}{unit_def.abbrev}"


def toggle_unit(current_unit: str) -> WeightUnit:
    return "ounces" if current_unit == "grams" else "grams"


def get_stored_unit(store: KeyValueStore) -> WeightUnit:
    """Read the saved unit preference. Missing, invalid or unreadable -> grams."""
    try:
        stored = store.get(UNIT_STORAGE_KEY)
    except StorageUnavailable as e:
        logger.warning(f"Unit preference unavailable, using {DEFAULT_UNIT}: {e}")
        return DEFAULT_UNIT

    if stored in UNITS:
        return stored  # type: ignore[return-value]
    return DEFAULT_UNIT


def set_stored_unit(store: KeyValueStore, unit: WeightUnit) -> bool:
    """Save the unit preference. Returns False if the store is unavailable."""
    if unit not in UNITS:
        raise ValueError(f"Unknown unit: {unit}")
    try:
        store.set(UNIT_STORAGE_KEY, unit)
    except StorageUnavailable as e:
        logger.warning(f"Could not save unit preference: {e}")
        return False
    return True
