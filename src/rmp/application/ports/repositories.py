from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from rmp.domain.common.ids import MealId, RestaurantId, UserId
from rmp.domain.meal.entities import Meal
from rmp.domain.restaurant.entities import Restaurant
from rmp.domain.user.entities import User


@dataclass(frozen=True)
class RestaurantListQuery:
    keyword: str | None
    limit: int
    skip: int
    visible_to: UserId | None = None


class UserRepository(Protocol):
    def get(self, user_id: UserId) -> User | None: ...

    def get_by_email(self, email: str) -> User | None: ...

    def get_many(self, user_ids: list[UserId]) -> list[User]: ...

    def list_all(self) -> list[User]: ...

    def add(self, user: User) -> None: ...


class RestaurantRepository(Protocol):
    def get(self, restaurant_id: RestaurantId) -> Restaurant | None: ...

    def get_many(self, restaurant_ids: list[RestaurantId]) -> list[Restaurant]: ...

    def list(self, query: RestaurantListQuery) -> list[Restaurant]: ...

    def list_ids_visible_to(self, user_id: UserId) -> list[RestaurantId]: ...

    def add(self, restaurant: Restaurant) -> None: ...

    def update(self, restaurant: Restaurant) -> None: ...

    def delete(self, restaurant_id: RestaurantId) -> bool: ...


class MealRepository(Protocol):
    def get(self, meal_id: MealId) -> Meal | None: ...

    def get_by_name(self, restaurant_id: RestaurantId, name: str) -> Meal | None: ...

    def get_many(self, meal_ids: list[MealId]) -> list[Meal]: ...

    def list_all(self) -> list[Meal]: ...

    def list_for_restaurants(self, restaurant_ids: list[RestaurantId]) -> list[Meal]: ...

    def update(self, meal: Meal) -> None: ...

    def add_linked(self, meal: Meal, restaurant: Restaurant) -> None:
        """Insert the meal and persist the restaurant's meal refs in one transaction."""
        ...

    def remove_linked(self, meal_id: MealId, restaurant: Restaurant) -> None:
        """Delete the meal and persist the restaurant's meal refs in one transaction."""
        ...


class MealNameTakenError(Exception):
    pass


class DuplicateEmailError(Exception):
    pass
