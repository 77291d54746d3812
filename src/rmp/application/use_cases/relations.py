from __future__ import annotations

from rmp.application.dto.responses import MealResponse, RestaurantResponse
from rmp.application.mappers.meal_mapper import to_meal_response
from rmp.application.mappers.restaurant_mapper import to_restaurant_response
from rmp.application.ports.repositories import (
    MealRepository,
    RestaurantRepository,
    UserRepository,
)
from rmp.domain.common.ids import MealId, RestaurantId, UserId
from rmp.domain.meal.entities import Meal
from rmp.domain.restaurant.entities import Restaurant


def _unique(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


class RestaurantPopulator:
    """Resolves owner, last editor and meal references of restaurants."""

    def __init__(self, user_repository: UserRepository, meal_repository: MealRepository) -> None:
        self._user_repository = user_repository
        self._meal_repository = meal_repository

    def populate(self, restaurants: list[Restaurant]) -> list[RestaurantResponse]:
        if not restaurants:
            return []

        user_ids: list[str] = []
        meal_ids: list[str] = []
        for restaurant in restaurants:
            user_ids.append(restaurant.owner_id)
            if restaurant.updated_by:
                user_ids.append(restaurant.updated_by)
            meal_ids.extend(restaurant.meal_ids)

        users = {
            user.user_id: user
            for user in self._user_repository.get_many([UserId(item) for item in _unique(user_ids)])
        }
        meals = {
            meal.meal_id: meal
            for meal in self._meal_repository.get_many([MealId(item) for item in _unique(meal_ids)])
        }
        return [to_restaurant_response(restaurant, users, meals) for restaurant in restaurants]

    def populate_one(self, restaurant: Restaurant) -> RestaurantResponse:
        return self.populate([restaurant])[0]


class MealPopulator:
    """Resolves the parent restaurant and owning user of meals."""

    def __init__(
        self,
        restaurant_repository: RestaurantRepository,
        user_repository: UserRepository,
    ) -> None:
        self._restaurant_repository = restaurant_repository
        self._user_repository = user_repository

    def populate(
        self,
        meals: list[Meal],
        known_restaurants: list[Restaurant] | None = None,
    ) -> list[MealResponse]:
        if not meals:
            return []

        restaurants = {item.restaurant_id: item for item in known_restaurants or []}
        missing = _unique(
            [meal.restaurant_id for meal in meals if meal.restaurant_id not in restaurants]
        )
        if missing:
            for restaurant in self._restaurant_repository.get_many(
                [RestaurantId(item) for item in missing]
            ):
                restaurants[restaurant.restaurant_id] = restaurant

        users = {
            user.user_id: user
            for user in self._user_repository.get_many(
                [UserId(item) for item in _unique([meal.owner_id for meal in meals])]
            )
        }
        return [to_meal_response(meal, restaurants, users) for meal in meals]

    def populate_one(self, meal: Meal, restaurant: Restaurant | None = None) -> MealResponse:
        return self.populate([meal], [restaurant] if restaurant else None)[0]
