from __future__ import annotations

from collections.abc import Mapping

from rmp.application.dto.responses import (
    MealSummaryResponse,
    RestaurantResponse,
    RestaurantSummaryResponse,
)
from rmp.application.mappers.user_mapper import to_user_summary
from rmp.domain.common.ids import MealId, UserId
from rmp.domain.meal.entities import Meal
from rmp.domain.restaurant.entities import Restaurant
from rmp.domain.user.entities import User


def to_meal_summary(meal: Meal) -> MealSummaryResponse:
    return MealSummaryResponse(
        id=str(meal.meal_id),
        name=meal.name,
        description=meal.description,
        price=meal.price,
        category=meal.category.value,
        ownerId=str(meal.owner_id),
    )


def to_restaurant_response(
    restaurant: Restaurant,
    users: Mapping[UserId, User],
    meals: Mapping[MealId, Meal],
) -> RestaurantResponse:
    updated_by = users.get(restaurant.updated_by) if restaurant.updated_by else None
    return RestaurantResponse(
        id=str(restaurant.restaurant_id),
        name=restaurant.name,
        description=restaurant.description,
        email=restaurant.email,
        phoneNo=restaurant.phone_no,
        address=restaurant.address,
        category=restaurant.category.value,
        owner=to_user_summary(users.get(restaurant.owner_id)),
        updatedBy=to_user_summary(updated_by),
        mealIds=[str(meal_id) for meal_id in restaurant.meal_ids],
        meals=[to_meal_summary(meals[meal_id]) for meal_id in restaurant.meal_ids if meal_id in meals],
        createdAt=restaurant.created_at,
        updatedAt=restaurant.updated_at,
    )


def to_restaurant_summary(restaurant: Restaurant | None) -> RestaurantSummaryResponse | None:
    if restaurant is None:
        return None
    return RestaurantSummaryResponse(
        id=str(restaurant.restaurant_id),
        name=restaurant.name,
        category=restaurant.category.value,
        ownerId=str(restaurant.owner_id),
    )
