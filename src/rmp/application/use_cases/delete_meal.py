from __future__ import annotations

from rmp.application.dto.responses import MessageResponse
from rmp.application.metrics.access_control import record_meal_write
from rmp.application.ports.repositories import MealRepository, RestaurantRepository
from rmp.application.use_cases.guard import enforce
from rmp.domain.access.policy import can_delete_meal
from rmp.domain.common.ids import MEAL_ID_PREFIX, MealId, is_well_formed_id
from rmp.domain.user.entities import Actor

ADMIN_DELETE_MESSAGE = "Meal deleted successfully by admin"
USER_DELETE_MESSAGE = "Meal deleted successfully"


class DeleteMeal:
    def __init__(
        self,
        restaurant_repository: RestaurantRepository,
        meal_repository: MealRepository,
    ) -> None:
        self._restaurant_repository = restaurant_repository
        self._meal_repository = meal_repository

    def execute(self, actor: Actor, meal_id: str, restaurant_id: str) -> MessageResponse:
        meal = None
        if is_well_formed_id(meal_id, MEAL_ID_PREFIX):
            meal = self._meal_repository.get(MealId(meal_id))
        restaurant = self._restaurant_repository.get(meal.restaurant_id) if meal else None

        enforce(
            can_delete_meal(actor, restaurant_id, meal, restaurant),
            actor=actor,
            resource="meal",
            operation="delete",
        )

        self._meal_repository.remove_linked(meal.meal_id, restaurant.without_meal(meal.meal_id))
        record_meal_write(outcome="deleted")

        if actor.is_admin:
            return MessageResponse(message=ADMIN_DELETE_MESSAGE)
        return MessageResponse(message=USER_DELETE_MESSAGE)
