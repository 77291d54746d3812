from __future__ import annotations

from datetime import datetime, timezone

from rmp.application.dto.requests import CreateRestaurantRequest
from rmp.application.dto.responses import RestaurantResponse
from rmp.application.metrics.access_control import record_restaurant_write
from rmp.application.ports.repositories import RestaurantRepository
from rmp.application.use_cases.guard import enforce
from rmp.application.use_cases.relations import RestaurantPopulator
from rmp.domain.access.policy import can_create_restaurant
from rmp.domain.common.ids import new_restaurant_id
from rmp.domain.restaurant.entities import Restaurant
from rmp.domain.user.entities import Actor


class CreateRestaurant:
    def __init__(
        self,
        restaurant_repository: RestaurantRepository,
        populator: RestaurantPopulator,
    ) -> None:
        self._restaurant_repository = restaurant_repository
        self._populator = populator

    def execute(self, actor: Actor, request_dto: CreateRestaurantRequest) -> RestaurantResponse:
        enforce(can_create_restaurant(actor), actor=actor, resource="restaurant", operation="create")

        now = datetime.now(timezone.utc)
        restaurant = Restaurant(
            restaurant_id=new_restaurant_id(),
            owner_id=actor.actor_id,
            name=request_dto.name,
            description=request_dto.description,
            email=str(request_dto.email),
            phone_no=request_dto.phone_no,
            address=request_dto.address,
            category=request_dto.category,
            created_at=now,
            updated_at=now,
        )
        self._restaurant_repository.add(restaurant)
        record_restaurant_write(action="created")
        return self._populator.populate_one(restaurant)
