from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from rmp.api.dependencies import get_current_actor
from rmp.application.dto.requests import CreateMealRequest, UpdateMealRequest
from rmp.application.dto.responses import (
    CreateMealResponse,
    MealListResponse,
    MealResponse,
    MessageResponse,
)
from rmp.application.use_cases.create_meal import CreateMeal, MealCreated
from rmp.application.use_cases.delete_meal import DeleteMeal
from rmp.application.use_cases.list_meals import ListMeals, ListRestaurantMeals
from rmp.application.use_cases.relations import MealPopulator, RestaurantPopulator
from rmp.application.use_cases.update_meal import UpdateMeal
from rmp.domain.user.entities import Actor
from rmp.infrastructure.db.repositories.meal_repo import SqlAlchemyMealRepository
from rmp.infrastructure.db.repositories.restaurant_repo import SqlAlchemyRestaurantRepository
from rmp.infrastructure.db.repositories.user_repo import SqlAlchemyUserRepository

router = APIRouter(prefix="/meals", tags=["meals"])


def _meal_populator(restaurants: SqlAlchemyRestaurantRepository) -> MealPopulator:
    return MealPopulator(
        restaurant_repository=restaurants,
        user_repository=SqlAlchemyUserRepository(),
    )


def _get_create_meal_use_case() -> CreateMeal:
    meals = SqlAlchemyMealRepository()
    return CreateMeal(
        restaurant_repository=SqlAlchemyRestaurantRepository(),
        meal_repository=meals,
        populator=RestaurantPopulator(
            user_repository=SqlAlchemyUserRepository(),
            meal_repository=meals,
        ),
    )


@router.post("", response_model=CreateMealResponse, status_code=status.HTTP_201_CREATED)
def create_meal(
    payload: CreateMealRequest,
    response: Response,
    actor: Actor = Depends(get_current_actor),
) -> CreateMealResponse:
    result = _get_create_meal_use_case().execute(actor, payload)
    if isinstance(result, MealCreated):
        outcome = "created"
    else:
        outcome = "updated"
        response.status_code = status.HTTP_200_OK
    return CreateMealResponse(
        outcome=outcome,
        mealId=str(result.meal.meal_id),
        restaurant=result.restaurant,
    )


@router.get("", response_model=MealListResponse)
def list_meals(actor: Actor = Depends(get_current_actor)) -> MealListResponse:
    restaurants = SqlAlchemyRestaurantRepository()
    use_case = ListMeals(
        restaurant_repository=restaurants,
        meal_repository=SqlAlchemyMealRepository(),
        populator=_meal_populator(restaurants),
    )
    return use_case.execute(actor)


@router.get("/restaurant/{restaurant_id}", response_model=list[MealResponse])
def list_restaurant_meals(
    restaurant_id: str,
    actor: Actor = Depends(get_current_actor),
) -> list[MealResponse]:
    restaurants = SqlAlchemyRestaurantRepository()
    use_case = ListRestaurantMeals(
        restaurant_repository=restaurants,
        meal_repository=SqlAlchemyMealRepository(),
        populator=_meal_populator(restaurants),
    )
    return use_case.execute(actor, restaurant_id)


@router.put("/{meal_id}/restaurant/{restaurant_id}", response_model=MealResponse)
def update_meal(
    meal_id: str,
    restaurant_id: str,
    payload: UpdateMealRequest,
    actor: Actor = Depends(get_current_actor),
) -> MealResponse:
    restaurants = SqlAlchemyRestaurantRepository()
    use_case = UpdateMeal(
        restaurant_repository=restaurants,
        meal_repository=SqlAlchemyMealRepository(),
        populator=_meal_populator(restaurants),
    )
    return use_case.execute(actor, meal_id, restaurant_id, payload)


@router.delete("/{meal_id}/restaurant/{restaurant_id}", response_model=MessageResponse)
def delete_meal(
    meal_id: str,
    restaurant_id: str,
    actor: Actor = Depends(get_current_actor),
) -> MessageResponse:
    use_case = DeleteMeal(
        restaurant_repository=SqlAlchemyRestaurantRepository(),
        meal_repository=SqlAlchemyMealRepository(),
    )
    return use_case.execute(actor, meal_id, restaurant_id)
