from __future__ import annotations

import re
from typing import NewType
from uuid import uuid4

UserId = NewType("UserId", str)
RestaurantId = NewType("RestaurantId", str)
MealId = NewType("MealId", str)

USER_ID_PREFIX = "usr"
RESTAURANT_ID_PREFIX = "rst"
MEAL_ID_PREFIX = "mea"

_ID_PATTERN = re.compile(r"(?P<prefix>[a-z]{3})_[0-9a-f]{12}")


def new_user_id() -> UserId:
    return UserId(f"{USER_ID_PREFIX}_{uuid4().hex[:12]}")


def new_restaurant_id() -> RestaurantId:
    return RestaurantId(f"{RESTAURANT_ID_PREFIX}_{uuid4().hex[:12]}")


def new_meal_id() -> MealId:
    return MealId(f"{MEAL_ID_PREFIX}_{uuid4().hex[:12]}")


def is_well_formed_id(value: str | None, prefix: str) -> bool:
    if not value:
        return False
    match = _ID_PATTERN.fullmatch(value)
    return match is not None and match.group("prefix") == prefix
