from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Engine, delete, or_, select, update
from sqlalchemy.orm import Session, selectinload

from rmp.application.ports.repositories import RestaurantListQuery, RestaurantRepository
from rmp.domain.common.ids import MealId, RestaurantId, UserId
from rmp.domain.restaurant.entities import Restaurant, RestaurantCategory
from rmp.infrastructure.db.models.meal import MealModel
from rmp.infrastructure.db.models.restaurant import RestaurantMealModel, RestaurantModel
from rmp.infrastructure.db.session import get_engine


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlAlchemyRestaurantRepository(RestaurantRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def _select(self):
        return select(RestaurantModel).options(selectinload(RestaurantModel.meal_refs))

    def get(self, restaurant_id: RestaurantId) -> Restaurant | None:
        statement = self._select().where(RestaurantModel.id == str(restaurant_id)).limit(1)
        with Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()
            return self._to_domain(model) if model else None

    def get_many(self, restaurant_ids: list[RestaurantId]) -> list[Restaurant]:
        if not restaurant_ids:
            return []
        statement = self._select().where(
            RestaurantModel.id.in_([str(item) for item in restaurant_ids])
        )
        with Session(self._engine) as session:
            models = list(session.execute(statement).scalars().all())
            return [self._to_domain(model) for model in models]

    def list(self, query: RestaurantListQuery) -> list[Restaurant]:
        statement = self._select()
        if query.keyword:
            statement = statement.where(
                RestaurantModel.name.ilike(f"%{_escape_like(query.keyword)}%", escape="\\")
            )
        if query.visible_to is not None:
            statement = statement.where(self._visible_to(query.visible_to))

        statement = (
            statement.order_by(RestaurantModel.created_at, RestaurantModel.id)
            .offset(query.skip)
            .limit(query.limit)
        )
        with Session(self._engine) as session:
            models = list(session.execute(statement).scalars().all())
            return [self._to_domain(model) for model in models]

    def list_ids_visible_to(self, user_id: UserId) -> list[RestaurantId]:
        statement = (
            select(RestaurantModel.id)
            .where(self._visible_to(user_id))
            .order_by(RestaurantModel.created_at, RestaurantModel.id)
        )
        with Session(self._engine) as session:
            rows = list(session.execute(statement).scalars().all())
        return [RestaurantId(row) for row in rows]

    def add(self, restaurant: Restaurant) -> None:
        model = RestaurantModel(
            id=str(restaurant.restaurant_id),
            owner_id=str(restaurant.owner_id),
            name=restaurant.name,
            description=restaurant.description,
            email=restaurant.email,
            phone_no=restaurant.phone_no,
            address=restaurant.address,
            category=restaurant.category.value,
            updated_by=str(restaurant.updated_by) if restaurant.updated_by else None,
            created_at=restaurant.created_at,
            updated_at=restaurant.updated_at,
        )
        model.meal_refs = [
            RestaurantMealModel(meal_id=str(meal_id), position=position)
            for position, meal_id in enumerate(restaurant.meal_ids)
        ]
        with Session(self._engine) as session:
            session.add(model)
            session.commit()

    def update(self, restaurant: Restaurant) -> None:
        # Meal refs are owned by the meal repository's linked writes.
        statement = (
            update(RestaurantModel)
            .where(RestaurantModel.id == str(restaurant.restaurant_id))
            .values(
                name=restaurant.name,
                description=restaurant.description,
                email=restaurant.email,
                phone_no=restaurant.phone_no,
                address=restaurant.address,
                category=restaurant.category.value,
                updated_by=str(restaurant.updated_by) if restaurant.updated_by else None,
                updated_at=restaurant.updated_at,
            )
        )
        with Session(self._engine) as session:
            session.execute(statement)
            session.commit()

    def delete(self, restaurant_id: RestaurantId) -> bool:
        with Session(self._engine) as session:
            session.execute(
                delete(RestaurantMealModel).where(
                    RestaurantMealModel.restaurant_id == str(restaurant_id)
                )
            )
            session.execute(delete(MealModel).where(MealModel.restaurant_id == str(restaurant_id)))
            result = session.execute(
                delete(RestaurantModel).where(RestaurantModel.id == str(restaurant_id))
            )
            deleted = result.rowcount == 1
            session.commit()
        return deleted

    def _visible_to(self, user_id: UserId):
        return or_(
            RestaurantModel.category == RestaurantCategory.FINE_DINING.value,
            RestaurantModel.owner_id == str(user_id),
        )

    def _to_domain(self, model: RestaurantModel) -> Restaurant:
        return Restaurant(
            restaurant_id=RestaurantId(model.id),
            owner_id=UserId(model.owner_id),
            name=model.name,
            description=model.description,
            email=model.email,
            phone_no=model.phone_no,
            address=model.address,
            category=RestaurantCategory(model.category),
            created_at=_as_utc(model.created_at),
            updated_at=_as_utc(model.updated_at),
            meal_ids=tuple(MealId(ref.meal_id) for ref in model.meal_refs),
            updated_by=UserId(model.updated_by) if model.updated_by else None,
        )
