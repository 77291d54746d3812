from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from rmp.domain.common.ids import MealId, RestaurantId, UserId


class MealCategory(str, Enum):
    SOUPS = "Soups"
    SALADS = "Salads"
    SANDWICHES = "Sandwiches"
    PASTA = "Pasta"
    MAIN_COURSE = "Main Course"
    DESSERTS = "Desserts"
    BEVERAGES = "Beverages"


def normalize_meal_name(name: str) -> str:
    return name.strip().lower()


@dataclass(frozen=True)
class MealPatch:
    name: str | None = None
    description: str | None = None
    price: float | None = None
    category: MealCategory | None = None


@dataclass(frozen=True)
class Meal:
    meal_id: MealId
    restaurant_id: RestaurantId
    owner_id: UserId
    name: str
    description: str
    price: float
    category: MealCategory
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("name must be non-empty")
        if self.name != normalize_meal_name(self.name):
            raise ValueError("name must be normalized (trimmed, lowercase)")
        if self.price < 0:
            raise ValueError("price must be >= 0")

    def overwrite(
        self,
        *,
        description: str,
        price: float,
        category: MealCategory,
        owner_id: UserId,
        now: datetime,
    ) -> Meal:
        return replace(
            self,
            description=description,
            price=price,
            category=category,
            owner_id=owner_id,
            updated_at=now,
        )

    def apply_patch(self, patch: MealPatch, owner_id: UserId, now: datetime) -> Meal:
        changes: dict[str, object] = {}
        if patch.name is not None:
            changes["name"] = normalize_meal_name(patch.name)
        if patch.description is not None:
            changes["description"] = patch.description
        if patch.price is not None:
            changes["price"] = patch.price
        if patch.category is not None:
            changes["category"] = patch.category
        return replace(self, **changes, owner_id=owner_id, updated_at=now)


def create_meal(
    meal_id: MealId,
    restaurant_id: RestaurantId,
    owner_id: UserId,
    name: str,
    description: str,
    price: float,
    category: MealCategory,
    now: datetime,
) -> Meal:
    return Meal(
        meal_id=meal_id,
        restaurant_id=restaurant_id,
        owner_id=owner_id,
        name=normalize_meal_name(name),
        description=description,
        price=price,
        category=category,
        created_at=now,
        updated_at=now,
    )
