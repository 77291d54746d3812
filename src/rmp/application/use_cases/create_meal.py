from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from rmp.application.dto.requests import CreateMealRequest
from rmp.application.dto.responses import RestaurantResponse
from rmp.application.errors import BadRequestError, InternalError, NotFoundError
from rmp.application.metrics.access_control import record_meal_write
from rmp.application.ports.repositories import (
    MealNameTakenError,
    MealRepository,
    RestaurantRepository,
)
from rmp.application.use_cases.guard import enforce
from rmp.application.use_cases.list_restaurants import find_restaurant
from rmp.application.use_cases.relations import RestaurantPopulator
from rmp.domain.access.policy import INVALID_RESTAURANT_ID, can_create_meal
from rmp.domain.common.ids import RESTAURANT_ID_PREFIX, is_well_formed_id, new_meal_id
from rmp.domain.meal.entities import Meal, create_meal, normalize_meal_name
from rmp.domain.restaurant.entities import Restaurant
from rmp.domain.user.entities import Actor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MealCreated:
    meal: Meal
    restaurant: RestaurantResponse


@dataclass(frozen=True)
class MealUpdated:
    meal: Meal
    restaurant: RestaurantResponse


MealCreateResult = MealCreated | MealUpdated


class CreateMeal:
    """Create a meal, or overwrite the restaurant's meal that already has the same name."""

    def __init__(
        self,
        restaurant_repository: RestaurantRepository,
        meal_repository: MealRepository,
        populator: RestaurantPopulator,
    ) -> None:
        self._restaurant_repository = restaurant_repository
        self._meal_repository = meal_repository
        self._populator = populator

    def execute(self, actor: Actor, request_dto: CreateMealRequest) -> MealCreateResult:
        if not is_well_formed_id(request_dto.restaurant, RESTAURANT_ID_PREFIX):
            raise BadRequestError(INVALID_RESTAURANT_ID)
        restaurant = find_restaurant(self._restaurant_repository, request_dto.restaurant)
        if restaurant is None:
            raise NotFoundError("Restaurant not found")

        enforce(can_create_meal(actor, restaurant), actor=actor, resource="meal", operation="create")

        now = datetime.now(timezone.utc)
        name = normalize_meal_name(request_dto.name)
        existing = self._meal_repository.get_by_name(restaurant.restaurant_id, name)

        created = existing is None
        if existing is None:
            meal = create_meal(
                meal_id=new_meal_id(),
                restaurant_id=restaurant.restaurant_id,
                owner_id=actor.actor_id,
                name=name,
                description=request_dto.description,
                price=request_dto.price,
                category=request_dto.category,
                now=now,
            )
            try:
                self._meal_repository.add_linked(meal, restaurant.with_meal(meal.meal_id))
            except MealNameTakenError:
                # A concurrent create won the insert; apply this request on top of it.
                logger.info(
                    "meal_create_race_resolved_as_update",
                    extra={"actor_id": str(actor.actor_id), "resource": "meal"},
                )
                meal = self._overwrite_existing(actor, restaurant, request_dto, name, now)
                created = False
        else:
            meal = existing.overwrite(
                description=request_dto.description,
                price=request_dto.price,
                category=request_dto.category,
                owner_id=actor.actor_id,
                now=now,
            )
            self._meal_repository.update(meal)

        record_meal_write(outcome="created" if created else "updated")

        reloaded = self._restaurant_repository.get(restaurant.restaurant_id)
        if reloaded is None:
            raise InternalError(
                f"Failed to retrieve restaurant with id {restaurant.restaurant_id} after meal write."
            )
        payload = self._populator.populate_one(reloaded)
        if created:
            return MealCreated(meal=meal, restaurant=payload)
        return MealUpdated(meal=meal, restaurant=payload)

    def _overwrite_existing(
        self,
        actor: Actor,
        restaurant: Restaurant,
        request_dto: CreateMealRequest,
        name: str,
        now: datetime,
    ) -> Meal:
        existing = self._meal_repository.get_by_name(restaurant.restaurant_id, name)
        if existing is None:
            raise InternalError(f"meal {name!r} vanished during concurrent create")
        meal = existing.overwrite(
            description=request_dto.description,
            price=request_dto.price,
            category=request_dto.category,
            owner_id=actor.actor_id,
            now=now,
        )
        self._meal_repository.update(meal)
        return meal
