"""Access rules for restaurants, meals and user administration.

Every rule is a pure function of the acting identity and the already-fetched
resources. Rules never raise and never touch storage: they return a
``Decision`` and the caller decides how to surface a denial.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from rmp.domain.common.ids import MEAL_ID_PREFIX, RESTAURANT_ID_PREFIX, is_well_formed_id
from rmp.domain.meal.entities import Meal
from rmp.domain.restaurant.entities import Restaurant
from rmp.domain.user.entities import Actor


class DenialKind(str, Enum):
    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"


class ReadScope(str, Enum):
    ALL = "ALL"
    FINE_DINING_OR_OWNED = "FINE_DINING_OR_OWNED"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    kind: DenialKind | None = None
    reason: str = ""
    scope: ReadScope | None = None

    @classmethod
    def allow(cls, scope: ReadScope | None = None) -> Decision:
        return cls(allowed=True, scope=scope)

    @classmethod
    def deny(cls, kind: DenialKind, reason: str) -> Decision:
        return cls(allowed=False, kind=kind, reason=reason)


INVALID_ROLE = "Invalid role"
INVALID_ROLE_FOR_MEALS = "Invalid role for accessing meals."
ACCESS_DENIED_FOR_ROLE = "Access denied for this role."
INVALID_RESTAURANT_ID = "Invalid restaurant ID provided."
INVALID_MEAL_ID = "Invalid meal ID provided."


def _invalid_role(actor: Actor, reason: str = INVALID_ROLE) -> Decision | None:
    if actor.role is None:
        return Decision.deny(DenialKind.UNAUTHORIZED, reason)
    return None


def _has_write_access(actor: Actor, restaurant: Restaurant) -> bool:
    return actor.is_admin or restaurant.is_owned_by(actor.actor_id) or restaurant.is_fine_dining


def _listing_scope(actor: Actor, reason: str) -> Decision:
    if actor.is_admin:
        return Decision.allow(ReadScope.ALL)
    if actor.is_user:
        return Decision.allow(ReadScope.FINE_DINING_OR_OWNED)
    return Decision.deny(DenialKind.UNAUTHORIZED, reason)


# restaurants


def can_create_restaurant(actor: Actor) -> Decision:
    return _invalid_role(actor) or Decision.allow()


def can_read_all_restaurants(actor: Actor) -> Decision:
    return _listing_scope(actor, INVALID_ROLE)


def can_read_restaurant(
    actor: Actor,
    restaurant_id: str,
    restaurant: Restaurant | None,
) -> Decision:
    # Single-resource reads are open to any role holder; ownership is not checked.
    denied = _invalid_role(actor)
    if denied:
        return denied
    if not is_well_formed_id(restaurant_id, RESTAURANT_ID_PREFIX):
        return Decision.deny(DenialKind.BAD_REQUEST, INVALID_RESTAURANT_ID)
    if restaurant is None:
        return Decision.deny(DenialKind.NOT_FOUND, "Restaurant Not Found")
    return Decision.allow()


def can_update_restaurant(actor: Actor, restaurant: Restaurant) -> Decision:
    denied = _invalid_role(actor)
    if denied:
        return denied
    if _has_write_access(actor, restaurant):
        return Decision.allow()
    return Decision.deny(
        DenialKind.UNAUTHORIZED,
        "You can only update Fine Dining restaurants or restaurants that you own.",
    )


def can_delete_restaurant(actor: Actor, restaurant: Restaurant) -> Decision:
    # Same predicate as update: a Fine Dining restaurant is deletable by any role holder.
    denied = _invalid_role(actor)
    if denied:
        return denied
    if _has_write_access(actor, restaurant):
        return Decision.allow()
    return Decision.deny(
        DenialKind.UNAUTHORIZED,
        "You can only delete Fine Dining restaurants or restaurants that you own.",
    )


# meals


def can_create_meal(actor: Actor, restaurant: Restaurant) -> Decision:
    denied = _invalid_role(actor)
    if denied:
        return denied
    if _has_write_access(actor, restaurant):
        return Decision.allow()
    return Decision.deny(
        DenialKind.FORBIDDEN,
        "You do not own this restaurant or lack permissions",
    )


def can_read_all_meals(actor: Actor) -> Decision:
    return _listing_scope(actor, INVALID_ROLE_FOR_MEALS)


def can_read_meals_by_restaurant(
    actor: Actor,
    restaurant_id: str,
    restaurant: Restaurant | None,
) -> Decision:
    if not is_well_formed_id(restaurant_id, RESTAURANT_ID_PREFIX):
        return Decision.deny(DenialKind.BAD_REQUEST, INVALID_RESTAURANT_ID)
    if restaurant is None:
        return Decision.deny(DenialKind.NOT_FOUND, "Restaurant not found.")
    if actor.is_admin:
        return Decision.allow()
    if actor.is_user:
        if restaurant.is_fine_dining or restaurant.is_owned_by(actor.actor_id):
            return Decision.allow()
        return Decision.deny(
            DenialKind.UNAUTHORIZED,
            "You can only view meals from Fine Dining restaurants or restaurants you own.",
        )
    return Decision.deny(DenialKind.UNAUTHORIZED, ACCESS_DENIED_FOR_ROLE)


def can_update_meal(
    actor: Actor,
    meal_id: str,
    restaurant_id: str,
    restaurant: Restaurant | None,
    meal: Meal | None,
) -> Decision:
    """Decide a meal update addressed as ``/meals/{meal_id}/restaurant/{restaurant_id}``.

    Checks run in a fixed order and the first failure wins: id shape, restaurant
    existence, write access on the restaurant, meal existence, and finally that
    the meal actually belongs to the addressed restaurant.
    """
    if not is_well_formed_id(meal_id, MEAL_ID_PREFIX):
        return Decision.deny(DenialKind.BAD_REQUEST, INVALID_MEAL_ID)
    if not is_well_formed_id(restaurant_id, RESTAURANT_ID_PREFIX):
        return Decision.deny(DenialKind.BAD_REQUEST, INVALID_RESTAURANT_ID)
    if restaurant is None:
        return Decision.deny(DenialKind.NOT_FOUND, "Restaurant not found")
    if actor.role is None or not _has_write_access(actor, restaurant):
        return Decision.deny(
            DenialKind.FORBIDDEN,
            "You are not allowed to update meals for this restaurant",
        )
    if meal is None:
        return Decision.deny(DenialKind.NOT_FOUND, "Meal not found")
    if meal.restaurant_id != restaurant.restaurant_id:
        return Decision.deny(
            DenialKind.BAD_REQUEST,
            "Meal does not belong to the specified restaurant",
        )
    return Decision.allow()


def can_delete_meal(
    actor: Actor,
    restaurant_id: str,
    meal: Meal | None,
    restaurant: Restaurant | None,
) -> Decision:
    """Decide a meal deletion.

    ``restaurant`` is the meal's own parent. Admins may delete anything. A user
    must own the restaurant, the restaurant must be Fine Dining, and the user
    must be the meal's stored owner; each failure has its own reason.
    """
    if meal is None or restaurant is None or meal.restaurant_id != restaurant_id:
        return Decision.deny(DenialKind.NOT_FOUND, "Meal not found or already deleted")
    if actor.is_admin:
        return Decision.allow()
    if not actor.is_user:
        return Decision.deny(DenialKind.UNAUTHORIZED, ACCESS_DENIED_FOR_ROLE)
    if not restaurant.is_owned_by(actor.actor_id):
        return Decision.deny(DenialKind.UNAUTHORIZED, "You are not the owner of this restaurant")
    if not restaurant.is_fine_dining:
        return Decision.deny(
            DenialKind.UNAUTHORIZED,
            "Only meals under Fine Dining can be deleted by you",
        )
    if meal.owner_id != actor.actor_id:
        return Decision.deny(DenialKind.UNAUTHORIZED, "You are not authorized to delete this meal")
    return Decision.allow()


# users


def can_list_users(actor: Actor) -> Decision:
    if actor.is_admin:
        return Decision.allow()
    return Decision.deny(DenialKind.FORBIDDEN, "Admin role required to list users")
