from __future__ import annotations

from datetime import timezone

from sqlalchemy import Engine, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rmp.application.ports.repositories import DuplicateEmailError, UserRepository
from rmp.domain.common.ids import UserId
from rmp.domain.user.entities import Role, User
from rmp.infrastructure.db.models.user import UserModel
from rmp.infrastructure.db.session import get_engine


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def get(self, user_id: UserId) -> User | None:
        statement = select(UserModel).where(UserModel.id == str(user_id)).limit(1)
        with Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()
        return self._to_domain(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        statement = select(UserModel).where(UserModel.email == email).limit(1)
        with Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()
        return self._to_domain(model) if model else None

    def get_many(self, user_ids: list[UserId]) -> list[User]:
        if not user_ids:
            return []
        statement = select(UserModel).where(UserModel.id.in_([str(item) for item in user_ids]))
        with Session(self._engine) as session:
            models = list(session.execute(statement).scalars().all())
        return [self._to_domain(model) for model in models]

    def list_all(self) -> list[User]:
        statement = select(UserModel).order_by(UserModel.created_at, UserModel.id)
        with Session(self._engine) as session:
            models = list(session.execute(statement).scalars().all())
        return [self._to_domain(model) for model in models]

    def add(self, user: User) -> None:
        model = UserModel(
            id=str(user.user_id),
            name=user.name,
            email=user.email,
            password_hash=user.password_hash,
            role=user.role.value,
            created_at=user.created_at,
        )
        with Session(self._engine) as session:
            session.add(model)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateEmailError(f"email already registered: {user.email}") from exc

    def _to_domain(self, model: UserModel) -> User:
        created_at = model.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return User(
            user_id=UserId(model.id),
            name=model.name,
            email=model.email,
            password_hash=model.password_hash,
            role=Role.parse(model.role) or Role.USER,
            created_at=created_at,
        )
