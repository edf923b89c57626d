"""Known dining hall locations and meal types."""

from enum import Enum
from types import MappingProxyType
from typing import Mapping

DEFAULT_BASE_URL = "https://rdeapps.stanford.edu/dininghallmenu/"

# (display name, form value) pairs, in the order they are offered to callers.
_HALLS: tuple[tuple[str, str], ...] = (
    ("Arrillaga Family Dining Commons", "Arrillaga"),
    ("Branner Dining", "Branner"),
    ("EVGR Dining", "EVGR"),
    ("Florence Moore Dining", "FlorenceMoore"),
    ("Gerhard Casper Dining", "GerhardCasper"),
    ("Lakeside Dining", "Lakeside"),
    ("Ricker Dining", "Ricker"),
    ("Stern Dining", "Stern"),
    ("Wilbur Dining", "Wilbur"),
)


class MealType(str, Enum):
    """Meal types the menu site serves."""

    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    BRUNCH = "Brunch"


LOCATION_MAP: Mapping[str, str] = MappingProxyType(dict(_HALLS))
VALID_LOCATIONS: tuple[str, ...] = tuple(name for name, _ in _HALLS)
VALID_MEAL_TYPES: tuple[str, ...] = tuple(meal.value for meal in MealType)


def is_valid_location(location: str) -> bool:
    """Return True if ``location`` is a known dining hall display name."""
    return location in LOCATION_MAP


def get_location_value(display_name: str) -> str:
    """Return the form value for a display name, or an empty string if unknown."""
    return LOCATION_MAP.get(display_name, "")


def is_valid_meal_type(meal_type: str) -> bool:
    """Return True if ``meal_type`` is one of the supported meal types."""
    return meal_type in VALID_MEAL_TYPES