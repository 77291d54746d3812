from __future__ import annotations

from datetime import datetime, timezone

from rmp.application.dto.requests import UpdateMealRequest
from rmp.application.dto.responses import MealResponse
from rmp.application.errors import InternalError, MealNameConflictError
from rmp.application.metrics.access_control import record_meal_write
from rmp.application.ports.repositories import (
    MealNameTakenError,
    MealRepository,
    RestaurantRepository,
)
from rmp.application.use_cases.guard import enforce
from rmp.application.use_cases.list_restaurants import find_restaurant
from rmp.application.use_cases.relations import MealPopulator
from rmp.domain.access.policy import can_update_meal
from rmp.domain.common.ids import MEAL_ID_PREFIX, MealId, is_well_formed_id
from rmp.domain.meal.entities import MealPatch
from rmp.domain.user.entities import Actor

_NAME_TAKEN = "A meal with this name already exists for this restaurant"


class UpdateMeal:
    def __init__(
        self,
        restaurant_repository: RestaurantRepository,
        meal_repository: MealRepository,
        populator: MealPopulator,
    ) -> None:
        self._restaurant_repository = restaurant_repository
        self._meal_repository = meal_repository
        self._populator = populator

    def execute(
        self,
        actor: Actor,
        meal_id: str,
        restaurant_id: str,
        request_dto: UpdateMealRequest,
    ) -> MealResponse:
        restaurant = find_restaurant(self._restaurant_repository, restaurant_id)
        meal = None
        if restaurant is not None and is_well_formed_id(meal_id, MEAL_ID_PREFIX):
            meal = self._meal_repository.get(MealId(meal_id))

        enforce(
            can_update_meal(actor, meal_id, restaurant_id, restaurant, meal),
            actor=actor,
            resource="meal",
            operation="update",
        )

        patch = MealPatch(
            name=request_dto.name,
            description=request_dto.description,
            price=request_dto.price,
            category=request_dto.category,
        )
        updated = meal.apply_patch(patch, owner_id=actor.actor_id, now=datetime.now(timezone.utc))

        if updated.name != meal.name:
            clash = self._meal_repository.get_by_name(updated.restaurant_id, updated.name)
            if clash is not None and clash.meal_id != updated.meal_id:
                raise MealNameConflictError(_NAME_TAKEN)

        try:
            self._meal_repository.update(updated)
        except MealNameTakenError as exc:
            raise MealNameConflictError(_NAME_TAKEN) from exc
        record_meal_write(outcome="updated")

        reloaded = self._meal_repository.get(updated.meal_id)
        if reloaded is None:
            raise InternalError(f"Failed to retrieve meal with id {updated.meal_id} after update.")
        return self._populator.populate_one(reloaded, restaurant)
