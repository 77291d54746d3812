from __future__ import annotations

from datetime import datetime, timezone

import pytest

from rmp.domain.access.policy import (
    ACCESS_DENIED_FOR_ROLE,
    INVALID_MEAL_ID,
    INVALID_RESTAURANT_ID,
    INVALID_ROLE,
    INVALID_ROLE_FOR_MEALS,
    DenialKind,
    ReadScope,
    can_create_meal,
    can_create_restaurant,
    can_delete_meal,
    can_delete_restaurant,
    can_list_users,
    can_read_all_meals,
    can_read_all_restaurants,
    can_read_meals_by_restaurant,
    can_read_restaurant,
    can_update_meal,
    can_update_restaurant,
)
from rmp.domain.common.ids import UserId, new_meal_id, new_restaurant_id, new_user_id
from rmp.domain.meal.entities import Meal, MealCategory, create_meal
from rmp.domain.restaurant.entities import Restaurant, RestaurantCategory
from rmp.domain.user.entities import Actor, Role

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)

ADMIN = Actor(actor_id=new_user_id(), role=Role.ADMIN)
OWNER = Actor(actor_id=new_user_id(), role=Role.USER)
STRANGER = Actor(actor_id=new_user_id(), role=Role.USER)
GUEST = Actor(actor_id=new_user_id(), role=None)


def _restaurant(category: RestaurantCategory, owner: UserId = OWNER.actor_id) -> Restaurant:
    return Restaurant(
        restaurant_id=new_restaurant_id(),
        owner_id=owner,
        name="Blue Door",
        description="bistro",
        email="blue@example.com",
        phone_no="5555550100",
        address="2 Side Street",
        category=category,
        created_at=NOW,
        updated_at=NOW,
    )


def _meal(restaurant: Restaurant, owner: UserId = OWNER.actor_id) -> Meal:
    return create_meal(
        meal_id=new_meal_id(),
        restaurant_id=restaurant.restaurant_id,
        owner_id=owner,
        name="Soup",
        description="hot",
        price=4.5,
        category=MealCategory.SOUPS,
        now=NOW,
    )


@pytest.mark.parametrize("actor", [ADMIN, OWNER, STRANGER])
def test_fine_dining_restaurant_is_writable_by_any_role_holder(actor: Actor) -> None:
    restaurant = _restaurant(RestaurantCategory.FINE_DINING)

    assert can_update_restaurant(actor, restaurant).allowed
    assert can_delete_restaurant(actor, restaurant).allowed
    assert can_create_meal(actor, restaurant).allowed


@pytest.mark.parametrize("category", [RestaurantCategory.CAFE, RestaurantCategory.FAST_FOOD])
def test_other_categories_are_writable_only_by_admin_or_owner(
    category: RestaurantCategory,
) -> None:
    restaurant = _restaurant(category)

    assert can_update_restaurant(ADMIN, restaurant).allowed
    assert can_update_restaurant(OWNER, restaurant).allowed
    assert can_delete_restaurant(OWNER, restaurant).allowed

    update = can_update_restaurant(STRANGER, restaurant)
    delete = can_delete_restaurant(STRANGER, restaurant)
    create = can_create_meal(STRANGER, restaurant)
    assert update.kind is DenialKind.UNAUTHORIZED
    assert update.reason == "You can only update Fine Dining restaurants or restaurants that you own."
    assert delete.kind is DenialKind.UNAUTHORIZED
    assert delete.reason == "You can only delete Fine Dining restaurants or restaurants that you own."
    assert create.kind is DenialKind.FORBIDDEN
    assert create.reason == "You do not own this restaurant or lack permissions"


def test_unrecognized_role_is_rejected_for_restaurant_rules() -> None:
    restaurant = _restaurant(RestaurantCategory.FINE_DINING)

    for decision in (
        can_create_restaurant(GUEST),
        can_read_restaurant(GUEST, restaurant.restaurant_id, restaurant),
        can_update_restaurant(GUEST, restaurant),
        can_delete_restaurant(GUEST, restaurant),
    ):
        assert not decision.allowed
        assert decision.kind is DenialKind.UNAUTHORIZED
        assert decision.reason == INVALID_ROLE


def test_listing_scope_depends_on_role() -> None:
    assert can_read_all_restaurants(ADMIN).scope is ReadScope.ALL
    assert can_read_all_restaurants(OWNER).scope is ReadScope.FINE_DINING_OR_OWNED
    assert can_read_all_meals(ADMIN).scope is ReadScope.ALL
    assert can_read_all_meals(OWNER).scope is ReadScope.FINE_DINING_OR_OWNED


def test_guest_role_cannot_list_restaurants_or_meals() -> None:
    restaurants = can_read_all_restaurants(GUEST)
    meals = can_read_all_meals(GUEST)

    assert restaurants.kind is DenialKind.UNAUTHORIZED
    assert restaurants.reason == INVALID_ROLE
    assert meals.kind is DenialKind.UNAUTHORIZED
    assert meals.reason == INVALID_ROLE_FOR_MEALS


def test_read_one_checks_id_shape_then_existence_but_not_ownership() -> None:
    restaurant = _restaurant(RestaurantCategory.CAFE)

    malformed = can_read_restaurant(STRANGER, "not-an-id", None)
    missing = can_read_restaurant(STRANGER, new_restaurant_id(), None)

    assert malformed.kind is DenialKind.BAD_REQUEST
    assert malformed.reason == INVALID_RESTAURANT_ID
    assert missing.kind is DenialKind.NOT_FOUND
    assert can_read_restaurant(STRANGER, restaurant.restaurant_id, restaurant).allowed


def test_read_meals_by_restaurant_rules() -> None:
    cafe = _restaurant(RestaurantCategory.CAFE)
    fine = _restaurant(RestaurantCategory.FINE_DINING)

    assert can_read_meals_by_restaurant(STRANGER, "rst_xyz", None).kind is DenialKind.BAD_REQUEST
    assert (
        can_read_meals_by_restaurant(STRANGER, new_restaurant_id(), None).kind
        is DenialKind.NOT_FOUND
    )
    assert can_read_meals_by_restaurant(ADMIN, cafe.restaurant_id, cafe).allowed
    assert can_read_meals_by_restaurant(OWNER, cafe.restaurant_id, cafe).allowed
    assert can_read_meals_by_restaurant(STRANGER, fine.restaurant_id, fine).allowed

    denied = can_read_meals_by_restaurant(STRANGER, cafe.restaurant_id, cafe)
    assert denied.kind is DenialKind.UNAUTHORIZED
    guest = can_read_meals_by_restaurant(GUEST, fine.restaurant_id, fine)
    assert guest.kind is DenialKind.UNAUTHORIZED
    assert guest.reason == ACCESS_DENIED_FOR_ROLE


def test_update_meal_checks_run_in_order() -> None:
    cafe = _restaurant(RestaurantCategory.CAFE)
    other = _restaurant(RestaurantCategory.CAFE)
    meal = _meal(other)

    assert can_update_meal(OWNER, "bad", "bad", None, None).reason == INVALID_MEAL_ID
    assert (
        can_update_meal(OWNER, meal.meal_id, "bad", None, None).reason == INVALID_RESTAURANT_ID
    )
    assert (
        can_update_meal(OWNER, meal.meal_id, cafe.restaurant_id, None, None).kind
        is DenialKind.NOT_FOUND
    )
    assert (
        can_update_meal(STRANGER, meal.meal_id, cafe.restaurant_id, cafe, meal).kind
        is DenialKind.FORBIDDEN
    )
    assert (
        can_update_meal(OWNER, meal.meal_id, cafe.restaurant_id, cafe, None).reason
        == "Meal not found"
    )
    mismatch = can_update_meal(OWNER, meal.meal_id, cafe.restaurant_id, cafe, meal)
    assert mismatch.kind is DenialKind.BAD_REQUEST
    assert mismatch.reason == "Meal does not belong to the specified restaurant"


def test_update_meal_in_fine_dining_is_allowed_for_non_owner() -> None:
    fine = _restaurant(RestaurantCategory.FINE_DINING)
    meal = _meal(fine)

    assert can_update_meal(STRANGER, meal.meal_id, fine.restaurant_id, fine, meal).allowed


def test_delete_meal_not_found_precedes_role_checks() -> None:
    fine = _restaurant(RestaurantCategory.FINE_DINING)
    meal = _meal(fine)

    assert can_delete_meal(GUEST, fine.restaurant_id, None, None).kind is DenialKind.NOT_FOUND
    wrong_path = can_delete_meal(ADMIN, new_restaurant_id(), meal, fine)
    assert wrong_path.kind is DenialKind.NOT_FOUND
    assert wrong_path.reason == "Meal not found or already deleted"


def test_admin_deletes_any_meal() -> None:
    cafe = _restaurant(RestaurantCategory.CAFE, owner=STRANGER.actor_id)
    meal = _meal(cafe, owner=STRANGER.actor_id)

    assert can_delete_meal(ADMIN, cafe.restaurant_id, meal, cafe).allowed


def test_non_admin_delete_has_a_distinct_reason_per_failed_check() -> None:
    fine_not_owned = _restaurant(RestaurantCategory.FINE_DINING, owner=STRANGER.actor_id)
    cafe_owned = _restaurant(RestaurantCategory.CAFE)
    fine_owned = _restaurant(RestaurantCategory.FINE_DINING)

    reasons = {
        can_delete_meal(
            OWNER, fine_not_owned.restaurant_id, _meal(fine_not_owned), fine_not_owned
        ).reason,
        can_delete_meal(OWNER, cafe_owned.restaurant_id, _meal(cafe_owned), cafe_owned).reason,
        can_delete_meal(
            OWNER,
            fine_owned.restaurant_id,
            _meal(fine_owned, owner=STRANGER.actor_id),
            fine_owned,
        ).reason,
    }

    assert reasons == {
        "You are not the owner of this restaurant",
        "Only meals under Fine Dining can be deleted by you",
        "You are not authorized to delete this meal",
    }
    assert can_delete_meal(
        OWNER, fine_owned.restaurant_id, _meal(fine_owned), fine_owned
    ).allowed


def test_delete_meal_with_unrecognized_role_is_denied() -> None:
    fine = _restaurant(RestaurantCategory.FINE_DINING, owner=GUEST.actor_id)
    meal = _meal(fine, owner=GUEST.actor_id)

    decision = can_delete_meal(GUEST, fine.restaurant_id, meal, fine)

    assert decision.kind is DenialKind.UNAUTHORIZED
    assert decision.reason == ACCESS_DENIED_FOR_ROLE


def test_only_admin_lists_users() -> None:
    assert can_list_users(ADMIN).allowed
    denied = can_list_users(OWNER)
    assert denied.kind is DenialKind.FORBIDDEN
    assert denied.reason == "Admin role required to list users"
