from __future__ import annotations

from collections.abc import Mapping

from rmp.application.dto.responses import MealResponse
from rmp.application.mappers.restaurant_mapper import to_restaurant_summary
from rmp.application.mappers.user_mapper import to_user_summary
from rmp.domain.common.ids import RestaurantId, UserId
from rmp.domain.meal.entities import Meal
from rmp.domain.restaurant.entities import Restaurant
from rmp.domain.user.entities import User


def to_meal_response(
    meal: Meal,
    restaurants: Mapping[RestaurantId, Restaurant],
    users: Mapping[UserId, User],
) -> MealResponse:
    return MealResponse(
        id=str(meal.meal_id),
        name=meal.name,
        description=meal.description,
        price=meal.price,
        category=meal.category.value,
        restaurant=to_restaurant_summary(restaurants.get(meal.restaurant_id)),
        owner=to_user_summary(users.get(meal.owner_id)),
        createdAt=meal.created_at,
        updatedAt=meal.updated_at,
    )
