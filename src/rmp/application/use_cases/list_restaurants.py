from __future__ import annotations

from rmp.application.dto.responses import RestaurantResponse
from rmp.application.errors import BadRequestError
from rmp.application.ports.repositories import RestaurantListQuery, RestaurantRepository
from rmp.application.use_cases.guard import enforce
from rmp.application.use_cases.relations import RestaurantPopulator
from rmp.domain.access.policy import ReadScope, can_read_all_restaurants, can_read_restaurant
from rmp.domain.common.ids import RESTAURANT_ID_PREFIX, RestaurantId, is_well_formed_id
from rmp.domain.restaurant.entities import Restaurant
from rmp.domain.user.entities import Actor

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


class ListRestaurants:
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
        *,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
        keyword: str | None = None,
    ) -> list[RestaurantResponse]:
        if page < 1:
            raise BadRequestError("page must be >= 1")
        if limit < 1 or limit > MAX_LIMIT:
            raise BadRequestError(f"limit must be between 1 and {MAX_LIMIT}")

        decision = enforce(
            can_read_all_restaurants(actor),
            actor=actor,
            resource="restaurant",
            operation="list",
        )
        query = RestaurantListQuery(
            keyword=keyword.strip() if keyword and keyword.strip() else None,
            limit=limit,
            skip=limit * (page - 1),
            visible_to=None if decision.scope is ReadScope.ALL else actor.actor_id,
        )
        return self._populator.populate(self._restaurant_repository.list(query))


def find_restaurant(repository: RestaurantRepository, restaurant_id: str) -> Restaurant | None:
    if not is_well_formed_id(restaurant_id, RESTAURANT_ID_PREFIX):
        return None
    return repository.get(RestaurantId(restaurant_id))


class GetRestaurant:
    def __init__(
        self,
        restaurant_repository: RestaurantRepository,
        populator: RestaurantPopulator,
    ) -> None:
        self._restaurant_repository = restaurant_repository
        self._populator = populator

    def execute(self, actor: Actor, restaurant_id: str) -> RestaurantResponse:
        restaurant = find_restaurant(self._restaurant_repository, restaurant_id)
        enforce(
            can_read_restaurant(actor, restaurant_id, restaurant),
            actor=actor,
            resource="restaurant",
            operation="read",
        )
        return self._populator.populate_one(restaurant)
