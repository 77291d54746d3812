from __future__ import annotations

from datetime import timezone

from sqlalchemy import Engine, delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rmp.application.ports.repositories import MealNameTakenError, MealRepository
from rmp.domain.common.ids import MealId, RestaurantId, UserId
from rmp.domain.meal.entities import Meal, MealCategory
from rmp.domain.restaurant.entities import Restaurant
from rmp.infrastructure.db.models.meal import MealModel
from rmp.infrastructure.db.models.restaurant import RestaurantMealModel
from rmp.infrastructure.db.session import get_engine


class SqlAlchemyMealRepository(MealRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def get(self, meal_id: MealId) -> Meal | None:
        statement = select(MealModel).where(MealModel.id == str(meal_id)).limit(1)
        with Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()
        return self._to_domain(model) if model else None

    def get_by_name(self, restaurant_id: RestaurantId, name: str) -> Meal | None:
        statement = (
            select(MealModel)
            .where(
                MealModel.restaurant_id == str(restaurant_id),
                MealModel.name == name,
            )
            .limit(1)
        )
        with Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()
        return self._to_domain(model) if model else None

    def get_many(self, meal_ids: list[MealId]) -> list[Meal]:
        if not meal_ids:
            return []
        statement = select(MealModel).where(MealModel.id.in_([str(item) for item in meal_ids]))
        return self._fetch(statement)

    def list_all(self) -> list[Meal]:
        return self._fetch(select(MealModel).order_by(MealModel.created_at, MealModel.id))

    def list_for_restaurants(self, restaurant_ids: list[RestaurantId]) -> list[Meal]:
        if not restaurant_ids:
            return []
        statement = (
            select(MealModel)
            .where(MealModel.restaurant_id.in_([str(item) for item in restaurant_ids]))
            .order_by(MealModel.created_at, MealModel.id)
        )
        return self._fetch(statement)

    def update(self, meal: Meal) -> None:
        statement = (
            update(MealModel)
            .where(MealModel.id == str(meal.meal_id))
            .values(
                name=meal.name,
                description=meal.description,
                price=meal.price,
                category=meal.category.value,
                owner_id=str(meal.owner_id),
                updated_at=meal.updated_at,
            )
        )
        with Session(self._engine) as session:
            session.execute(statement)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise MealNameTakenError(
                    f"meal name {meal.name!r} already used in restaurant {meal.restaurant_id}"
                ) from exc

    def add_linked(self, meal: Meal, restaurant: Restaurant) -> None:
        if meal.meal_id not in restaurant.meal_ids:
            raise ValueError(f"restaurant {restaurant.restaurant_id} does not reference {meal.meal_id}")

        with Session(self._engine) as session:
            session.add(self._to_model(meal))
            try:
                session.flush()
            except IntegrityError as exc:
                session.rollback()
                if self.get_by_name(meal.restaurant_id, meal.name) is None:
                    raise
                raise MealNameTakenError(
                    f"meal name {meal.name!r} already used in restaurant {meal.restaurant_id}"
                ) from exc

            # Append after whatever is stored so refs written concurrently are kept.
            next_position = session.execute(
                select(func.coalesce(func.max(RestaurantMealModel.position), -1) + 1).where(
                    RestaurantMealModel.restaurant_id == str(restaurant.restaurant_id)
                )
            ).scalar_one()
            session.add(
                RestaurantMealModel(
                    restaurant_id=str(restaurant.restaurant_id),
                    meal_id=str(meal.meal_id),
                    position=next_position,
                )
            )
            session.commit()

    def remove_linked(self, meal_id: MealId, restaurant: Restaurant) -> None:
        if meal_id in restaurant.meal_ids:
            raise ValueError(f"restaurant {restaurant.restaurant_id} still references {meal_id}")

        with Session(self._engine) as session:
            session.execute(
                delete(RestaurantMealModel).where(
                    RestaurantMealModel.restaurant_id == str(restaurant.restaurant_id),
                    RestaurantMealModel.meal_id == str(meal_id),
                )
            )
            session.execute(delete(MealModel).where(MealModel.id == str(meal_id)))
            session.commit()

    def _fetch(self, statement) -> list[Meal]:
        with Session(self._engine) as session:
            models = list(session.execute(statement).scalars().all())
        return [self._to_domain(model) for model in models]

    def _to_model(self, meal: Meal) -> MealModel:
        return MealModel(
            id=str(meal.meal_id),
            restaurant_id=str(meal.restaurant_id),
            owner_id=str(meal.owner_id),
            name=meal.name,
            description=meal.description,
            price=meal.price,
            category=meal.category.value,
            created_at=meal.created_at,
            updated_at=meal.updated_at,
        )

    def _to_domain(self, model: MealModel) -> Meal:
        created_at = model.created_at
        updated_at = model.updated_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        if updated_at.tzinfo is None:
            updated_at = updated_at.replace(tzinfo=timezone.utc)
        return Meal(
            meal_id=MealId(model.id),
            restaurant_id=RestaurantId(model.restaurant_id),
            owner_id=UserId(model.owner_id),
            name=model.name,
            description=model.description,
            price=model.price,
            category=MealCategory(model.category),
            created_at=created_at,
            updated_at=updated_at,
        )
