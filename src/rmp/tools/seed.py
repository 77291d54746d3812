from __future__ import annotations

import os
from datetime import datetime, timezone

from sqlalchemy import inspect

from rmp.domain.common.ids import new_user_id
from rmp.domain.user.entities import Role, User, normalize_email
from rmp.infrastructure.config import load_env_file
from rmp.infrastructure.db.repositories.user_repo import SqlAlchemyUserRepository
from rmp.infrastructure.db.session import get_engine
from rmp.infrastructure.security.passwords import BcryptPasswordHasher


def main() -> None:
    load_env_file()
    email = os.getenv("SEED_ADMIN_EMAIL")
    password = os.getenv("SEED_ADMIN_PASSWORD")
    if not email or not password:
        print("SEED_ADMIN_EMAIL and SEED_ADMIN_PASSWORD are not set, nothing to seed")
        return

    engine = get_engine(timeout_seconds=2.0)
    if "users" not in set(inspect(engine).get_table_names()):
        print("no schema yet")
        return

    repository = SqlAlchemyUserRepository(engine)
    normalized = normalize_email(email)
    if repository.get_by_email(normalized) is not None:
        print(f"admin {normalized} already exists")
        return

    repository.add(
        User(
            user_id=new_user_id(),
            name=os.getenv("SEED_ADMIN_NAME", "Administrator"),
            email=normalized,
            password_hash=BcryptPasswordHasher().hash(password),
            role=Role.ADMIN,
            created_at=datetime.now(timezone.utc),
        )
    )
    print("seed complete")


if __name__ == "__main__":
    main()
