from __future__ import annotations

from datetime import datetime, timezone

from rmp.application.dto.requests import UpdateRestaurantRequest
from rmp.application.dto.responses import RestaurantResponse
from rmp.application.errors import InternalError
from rmp.application.metrics.access_control import record_restaurant_write
from rmp.application.ports.repositories import RestaurantRepository
from rmp.application.use_cases.guard import enforce
from rmp.application.use_cases.list_restaurants import find_restaurant
from rmp.application.use_cases.relations import RestaurantPopulator
from rmp.domain.access.policy import can_read_restaurant, can_update_restaurant
from rmp.domain.restaurant.entities import RestaurantPatch
from rmp.domain.user.entities import Actor


class UpdateRestaurant:
    def __init__(
        self,
        restaurant_repository: RestaurantRepository,
        populator: RestaurantPopulator,
    ) -> None:
        self._restaurant_repository = restaurant_repository
        self._populator = populator

    def execute(
        self,
        actor: Actor,
        restaurant_id: str,
        request_dto: UpdateRestaurantRequest,
    ) -> RestaurantResponse:
        restaurant = find_restaurant(self._restaurant_repository, restaurant_id)
        enforce(
            can_read_restaurant(actor, restaurant_id, restaurant),
            actor=actor,
            resource="restaurant",
            operation="read",
        )
        enforce(
            can_update_restaurant(actor, restaurant),
            actor=actor,
            resource="restaurant",
            operation="update",
        )

        patch = RestaurantPatch(
            name=request_dto.name,
            description=request_dto.description,
            email=str(request_dto.email) if request_dto.email is not None else None,
            phone_no=request_dto.phone_no,
            address=request_dto.address,
            category=request_dto.category,
        )
        updated = restaurant.apply_patch(
            patch,
            updated_by=actor.actor_id,
            now=datetime.now(timezone.utc),
        )
        self._restaurant_repository.update(updated)
        record_restaurant_write(action="updated")

        reloaded = self._restaurant_repository.get(updated.restaurant_id)
        if reloaded is None:
            raise InternalError(
                f"Failed to retrieve restaurant with id {updated.restaurant_id} after update."
            )
        return self._populator.populate_one(reloaded)
