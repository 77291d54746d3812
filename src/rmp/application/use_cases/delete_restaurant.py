from __future__ import annotations

from rmp.application.dto.responses import RestaurantDeleteResponse
from rmp.application.errors import BadRequestError
from rmp.application.metrics.access_control import record_restaurant_write
from rmp.application.ports.repositories import RestaurantRepository
from rmp.application.use_cases.guard import enforce
from rmp.domain.access.policy import INVALID_RESTAURANT_ID, can_delete_restaurant
from rmp.domain.common.ids import RESTAURANT_ID_PREFIX, RestaurantId, is_well_formed_id
from rmp.domain.user.entities import Actor

_ALREADY_GONE = RestaurantDeleteResponse(
    deleted=False,
    message="Already deleted or does not exist",
)


class DeleteRestaurant:
    def __init__(self, restaurant_repository: RestaurantRepository) -> None:
        self._restaurant_repository = restaurant_repository

    def execute(self, actor: Actor, restaurant_id: str) -> RestaurantDeleteResponse:
        if not is_well_formed_id(restaurant_id, RESTAURANT_ID_PREFIX):
            raise BadRequestError(INVALID_RESTAURANT_ID)

        restaurant = self._restaurant_repository.get(RestaurantId(restaurant_id))
        if restaurant is None:
            return _ALREADY_GONE

        enforce(
            can_delete_restaurant(actor, restaurant),
            actor=actor,
            resource="restaurant",
            operation="delete",
        )
        # The repository removes the restaurant's meals in the same transaction.
        if not self._restaurant_repository.delete(restaurant.restaurant_id):
            return _ALREADY_GONE

        record_restaurant_write(action="deleted")
        return RestaurantDeleteResponse(deleted=True, message="Restaurant deleted successfully")
