from __future__ import annotations

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from rmp.application.use_cases.login import Authenticate
from rmp.domain.user.entities import Actor
from rmp.infrastructure.db.repositories.user_repo import SqlAlchemyUserRepository
from rmp.infrastructure.security.tokens import JoseTokenService

bearer_scheme = HTTPBearer(auto_error=False)


def _get_authenticate_use_case() -> Authenticate:
    return Authenticate(
        user_repository=SqlAlchemyUserRepository(),
        token_service=JoseTokenService(),
    )


def get_current_actor(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Actor:
    token = credentials.credentials if credentials else None
    return _get_authenticate_use_case().execute(token)
