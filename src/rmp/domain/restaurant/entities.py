from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from rmp.domain.common.ids import MealId, RestaurantId, UserId


class RestaurantCategory(str, Enum):
    FAST_FOOD = "Fast Food"
    CAFE = "Cafe"
    FINE_DINING = "Fine Dining"


@dataclass(frozen=True)
class RestaurantPatch:
    name: str | None = None
    description: str | None = None
    email: str | None = None
    phone_no: str | None = None
    address: str | None = None
    category: RestaurantCategory | None = None


@dataclass(frozen=True)
class Restaurant:
    restaurant_id: RestaurantId
    owner_id: UserId
    name: str
    description: str
    email: str
    phone_no: str
    address: str
    category: RestaurantCategory
    created_at: datetime
    updated_at: datetime
    meal_ids: tuple[MealId, ...] = field(default_factory=tuple)
    updated_by: UserId | None = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if len(set(self.meal_ids)) != len(self.meal_ids):
            raise ValueError("meal_ids must not contain duplicates")

    @property
    def is_fine_dining(self) -> bool:
        return self.category is RestaurantCategory.FINE_DINING

    def is_owned_by(self, user_id: UserId) -> bool:
        return self.owner_id == user_id

    def with_meal(self, meal_id: MealId) -> Restaurant:
        if meal_id in self.meal_ids:
            return self
        return replace(self, meal_ids=(*self.meal_ids, meal_id))

    def without_meal(self, meal_id: MealId) -> Restaurant:
        if meal_id not in self.meal_ids:
            return self
        return replace(self, meal_ids=tuple(item for item in self.meal_ids if item != meal_id))

    def apply_patch(self, patch: RestaurantPatch, updated_by: UserId, now: datetime) -> Restaurant:
        changes = {
            key: value
            for key, value in (
                ("name", patch.name),
                ("description", patch.description),
                ("email", patch.email),
                ("phone_no", patch.phone_no),
                ("address", patch.address),
                ("category", patch.category),
            )
            if value is not None
        }
        return replace(self, **changes, updated_by=updated_by, updated_at=now)
