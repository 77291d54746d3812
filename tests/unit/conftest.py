from __future__ import annotations

import sys
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from rmp.application.ports.repositories import (
    DuplicateEmailError,
    MealNameTakenError,
    RestaurantListQuery,
)
from rmp.application.ports.security import InvalidTokenError, TokenClaims
from rmp.domain.common.ids import (
    MealId,
    RestaurantId,
    UserId,
    new_restaurant_id,
    new_user_id,
)
from rmp.domain.meal.entities import Meal
from rmp.domain.restaurant.entities import Restaurant, RestaurantCategory
from rmp.domain.user.entities import Actor, Role, User


class InMemoryStore:
    def __init__(self) -> None:
        self.users: dict[UserId, User] = {}
        self.restaurants: dict[RestaurantId, Restaurant] = {}
        self.meals: dict[MealId, Meal] = {}


class InMemoryUserRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def get(self, user_id: UserId) -> User | None:
        return self._store.users.get(user_id)

    def get_by_email(self, email: str) -> User | None:
        return next((user for user in self._store.users.values() if user.email == email), None)

    def get_many(self, user_ids: list[UserId]) -> list[User]:
        return [self._store.users[item] for item in user_ids if item in self._store.users]

    def list_all(self) -> list[User]:
        return sorted(self._store.users.values(), key=lambda user: (user.created_at, user.user_id))

    def add(self, user: User) -> None:
        if self.get_by_email(user.email) is not None:
            raise DuplicateEmailError(user.email)
        self._store.users[user.user_id] = user


class InMemoryRestaurantRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self.deleted: list[RestaurantId] = []

    def get(self, restaurant_id: RestaurantId) -> Restaurant | None:
        return self._store.restaurants.get(restaurant_id)

    def get_many(self, restaurant_ids: list[RestaurantId]) -> list[Restaurant]:
        return [
            self._store.restaurants[item]
            for item in restaurant_ids
            if item in self._store.restaurants
        ]

    def list(self, query: RestaurantListQuery) -> list[Restaurant]:
        items = sorted(
            self._store.restaurants.values(),
            key=lambda restaurant: (restaurant.created_at, restaurant.restaurant_id),
        )
        if query.keyword:
            items = [item for item in items if query.keyword.lower() in item.name.lower()]
        if query.visible_to is not None:
            items = [
                item
                for item in items
                if item.is_fine_dining or item.is_owned_by(query.visible_to)
            ]
        return items[query.skip : query.skip + query.limit]

    def list_ids_visible_to(self, user_id: UserId) -> list[RestaurantId]:
        return [
            item.restaurant_id
            for item in self._store.restaurants.values()
            if item.is_fine_dining or item.is_owned_by(user_id)
        ]

    def add(self, restaurant: Restaurant) -> None:
        self._store.restaurants[restaurant.restaurant_id] = restaurant

    def update(self, restaurant: Restaurant) -> None:
        stored = self._store.restaurants[restaurant.restaurant_id]
        self._store.restaurants[restaurant.restaurant_id] = replace(
            restaurant, meal_ids=stored.meal_ids
        )

    def delete(self, restaurant_id: RestaurantId) -> bool:
        if self._store.restaurants.pop(restaurant_id, None) is None:
            return False
        for meal_id in [
            meal.meal_id
            for meal in self._store.meals.values()
            if meal.restaurant_id == restaurant_id
        ]:
            del self._store.meals[meal_id]
        self.deleted.append(restaurant_id)
        return True


class InMemoryMealRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self.concurrent_winner: Meal | None = None

    def get(self, meal_id: MealId) -> Meal | None:
        return self._store.meals.get(meal_id)

    def get_by_name(self, restaurant_id: RestaurantId, name: str) -> Meal | None:
        return next(
            (
                meal
                for meal in self._store.meals.values()
                if meal.restaurant_id == restaurant_id and meal.name == name
            ),
            None,
        )

    def get_many(self, meal_ids: list[MealId]) -> list[Meal]:
        return [self._store.meals[item] for item in meal_ids if item in self._store.meals]

    def list_all(self) -> list[Meal]:
        return list(self._store.meals.values())

    def list_for_restaurants(self, restaurant_ids: list[RestaurantId]) -> list[Meal]:
        wanted = set(restaurant_ids)
        return [meal for meal in self._store.meals.values() if meal.restaurant_id in wanted]

    def update(self, meal: Meal) -> None:
        clash = self.get_by_name(meal.restaurant_id, meal.name)
        if clash is not None and clash.meal_id != meal.meal_id:
            raise MealNameTakenError(meal.name)
        self._store.meals[meal.meal_id] = meal

    def add_linked(self, meal: Meal, restaurant: Restaurant) -> None:
        if self.concurrent_winner is not None:
            # Simulates another request inserting the same name first.
            winner, self.concurrent_winner = self.concurrent_winner, None
            self._store.meals[winner.meal_id] = winner
            stored = self._store.restaurants[winner.restaurant_id]
            self._store.restaurants[winner.restaurant_id] = stored.with_meal(winner.meal_id)
        if self.get_by_name(meal.restaurant_id, meal.name) is not None:
            raise MealNameTakenError(meal.name)
        self._store.meals[meal.meal_id] = meal
        stored = self._store.restaurants[restaurant.restaurant_id]
        self._store.restaurants[restaurant.restaurant_id] = stored.with_meal(meal.meal_id)

    def remove_linked(self, meal_id: MealId, restaurant: Restaurant) -> None:
        self._store.meals.pop(meal_id, None)
        stored = self._store.restaurants[restaurant.restaurant_id]
        self._store.restaurants[restaurant.restaurant_id] = stored.without_meal(meal_id)


class FakePasswordHasher:
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, password_hash: str) -> bool:
        return password_hash == f"hashed:{password}"


class FakeTokenService:
    def issue(self, user: User) -> str:
        return f"token:{user.user_id}:{user.role.value}"

    def verify(self, token: str) -> TokenClaims:
        parts = token.split(":")
        if len(parts) != 3 or parts[0] != "token":
            raise InvalidTokenError("malformed token")
        return TokenClaims(subject=parts[1], role=parts[2])


_CLOCK = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def user_repo(store: InMemoryStore) -> InMemoryUserRepository:
    return InMemoryUserRepository(store)


@pytest.fixture
def restaurant_repo(store: InMemoryStore) -> InMemoryRestaurantRepository:
    return InMemoryRestaurantRepository(store)


@pytest.fixture
def meal_repo(store: InMemoryStore) -> InMemoryMealRepository:
    return InMemoryMealRepository(store)


@pytest.fixture
def add_user(store: InMemoryStore) -> Callable[..., Actor]:
    def factory(role: Role = Role.USER, name: str = "someone") -> Actor:
        user_id = new_user_id()
        store.users[user_id] = User(
            user_id=user_id,
            name=name,
            email=f"{user_id}@example.com",
            password_hash="hashed:password123",
            role=role,
            created_at=_CLOCK,
        )
        return Actor(actor_id=user_id, role=role)

    return factory


@pytest.fixture
def add_restaurant(store: InMemoryStore) -> Callable[..., Restaurant]:
    counter = {"value": 0}

    def factory(
        owner: Actor,
        category: RestaurantCategory = RestaurantCategory.CAFE,
        name: str = "corner place",
    ) -> Restaurant:
        counter["value"] += 1
        created_at = _CLOCK + timedelta(minutes=counter["value"])
        restaurant = Restaurant(
            restaurant_id=new_restaurant_id(),
            owner_id=owner.actor_id,
            name=name,
            description="a place to eat",
            email="hello@example.com",
            phone_no="+15555550100",
            address="1 Main Street",
            category=category,
            created_at=created_at,
            updated_at=created_at,
        )
        store.restaurants[restaurant.restaurant_id] = restaurant
        return restaurant

    return factory


@pytest.fixture
def password_hasher() -> FakePasswordHasher:
    return FakePasswordHasher()


@pytest.fixture
def token_service() -> FakeTokenService:
    return FakeTokenService()
