from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from rmp.api.dependencies import get_current_actor
from rmp.application.dto.requests import CreateRestaurantRequest, UpdateRestaurantRequest
from rmp.application.dto.responses import RestaurantDeleteResponse, RestaurantResponse
from rmp.application.use_cases.create_restaurant import CreateRestaurant
from rmp.application.use_cases.delete_restaurant import DeleteRestaurant
from rmp.application.use_cases.list_restaurants import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    GetRestaurant,
    ListRestaurants,
)
from rmp.application.use_cases.relations import RestaurantPopulator
from rmp.application.use_cases.update_restaurant import UpdateRestaurant
from rmp.domain.user.entities import Actor
from rmp.infrastructure.db.repositories.meal_repo import SqlAlchemyMealRepository
from rmp.infrastructure.db.repositories.restaurant_repo import SqlAlchemyRestaurantRepository
from rmp.infrastructure.db.repositories.user_repo import SqlAlchemyUserRepository

router = APIRouter(prefix="/restaurants", tags=["restaurants"])


def _populator() -> RestaurantPopulator:
    return RestaurantPopulator(
        user_repository=SqlAlchemyUserRepository(),
        meal_repository=SqlAlchemyMealRepository(),
    )


@router.post("", response_model=RestaurantResponse, status_code=status.HTTP_201_CREATED)
def create_restaurant(
    payload: CreateRestaurantRequest,
    actor: Actor = Depends(get_current_actor),
) -> RestaurantResponse:
    use_case = CreateRestaurant(
        restaurant_repository=SqlAlchemyRestaurantRepository(),
        populator=_populator(),
    )
    return use_case.execute(actor, payload)


@router.get("", response_model=list[RestaurantResponse])
def list_restaurants(
    page: int = Query(default=DEFAULT_PAGE),
    limit: int = Query(default=DEFAULT_LIMIT),
    keyword: str | None = Query(default=None),
    actor: Actor = Depends(get_current_actor),
) -> list[RestaurantResponse]:
    use_case = ListRestaurants(
        restaurant_repository=SqlAlchemyRestaurantRepository(),
        populator=_populator(),
    )
    return use_case.execute(actor, page=page, limit=limit, keyword=keyword)


@router.get("/{restaurant_id}", response_model=RestaurantResponse)
def get_restaurant(
    restaurant_id: str,
    actor: Actor = Depends(get_current_actor),
) -> RestaurantResponse:
    use_case = GetRestaurant(
        restaurant_repository=SqlAlchemyRestaurantRepository(),
        populator=_populator(),
    )
    return use_case.execute(actor, restaurant_id)


@router.put("/{restaurant_id}", response_model=RestaurantResponse)
def update_restaurant(
    restaurant_id: str,
    payload: UpdateRestaurantRequest,
    actor: Actor = Depends(get_current_actor),
) -> RestaurantResponse:
    use_case = UpdateRestaurant(
        restaurant_repository=SqlAlchemyRestaurantRepository(),
        populator=_populator(),
    )
    return use_case.execute(actor, restaurant_id, payload)


@router.delete("/{restaurant_id}", response_model=RestaurantDeleteResponse)
def delete_restaurant(
    restaurant_id: str,
    actor: Actor = Depends(get_current_actor),
) -> RestaurantDeleteResponse:
    use_case = DeleteRestaurant(restaurant_repository=SqlAlchemyRestaurantRepository())
    return use_case.execute(actor, restaurant_id)
