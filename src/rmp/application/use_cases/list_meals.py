from __future__ import annotations

from rmp.application.dto.responses import MealListResponse, MealResponse
from rmp.application.ports.repositories import MealRepository, RestaurantRepository
from rmp.application.use_cases.guard import enforce
from rmp.application.use_cases.list_restaurants import find_restaurant
from rmp.application.use_cases.relations import MealPopulator
from rmp.domain.access.policy import ReadScope, can_read_all_meals, can_read_meals_by_restaurant
from rmp.domain.user.entities import Actor


class ListMeals:
    def __init__(
        self,
        restaurant_repository: RestaurantRepository,
        meal_repository: MealRepository,
        populator: MealPopulator,
    ) -> None:
        self._restaurant_repository = restaurant_repository
        self._meal_repository = meal_repository
        self._populator = populator

    def execute(self, actor: Actor) -> MealListResponse:
        decision = enforce(can_read_all_meals(actor), actor=actor, resource="meal", operation="list")

        if decision.scope is ReadScope.ALL:
            meals = self._meal_repository.list_all()
        else:
            restaurant_ids = self._restaurant_repository.list_ids_visible_to(actor.actor_id)
            meals = self._meal_repository.list_for_restaurants(restaurant_ids)

        role = actor.role.value if actor.role else ""
        return MealListResponse(role=role, meals=self._populator.populate(meals))


class ListRestaurantMeals:
    def __init__(
        self,
        restaurant_repository: RestaurantRepository,
        meal_repository: MealRepository,
        populator: MealPopulator,
    ) -> None:
        self._restaurant_repository = restaurant_repository
        self._meal_repository = meal_repository
        self._populator = populator

    def execute(self, actor: Actor, restaurant_id: str) -> list[MealResponse]:
        restaurant = find_restaurant(self._restaurant_repository, restaurant_id)
        enforce(
            can_read_meals_by_restaurant(actor, restaurant_id, restaurant),
            actor=actor,
            resource="meal",
            operation="list_by_restaurant",
        )
        meals = self._meal_repository.list_for_restaurants([restaurant.restaurant_id])
        return self._populator.populate(meals, [restaurant])
