from __future__ import annotations

from fastapi import APIRouter, Depends, status

from rmp.api.dependencies import get_current_actor
from rmp.application.dto.requests import LoginRequest, SignUpRequest
from rmp.application.dto.responses import LoginResponse, UserResponse
from rmp.application.use_cases.login import ListUsers, Login
from rmp.application.use_cases.sign_up import SignUp
from rmp.domain.user.entities import Actor
from rmp.infrastructure.db.repositories.user_repo import SqlAlchemyUserRepository
from rmp.infrastructure.security.passwords import BcryptPasswordHasher
from rmp.infrastructure.security.tokens import JoseTokenService

router = APIRouter(prefix="/auth", tags=["auth"])


def _get_sign_up_use_case() -> SignUp:
    return SignUp(
        user_repository=SqlAlchemyUserRepository(),
        password_hasher=BcryptPasswordHasher(),
    )


def _get_login_use_case() -> Login:
    return Login(
        user_repository=SqlAlchemyUserRepository(),
        password_hasher=BcryptPasswordHasher(),
        token_service=JoseTokenService(),
    )


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def sign_up(payload: SignUpRequest) -> UserResponse:
    return _get_sign_up_use_case().execute(payload)


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest) -> LoginResponse:
    return _get_login_use_case().execute(payload)


@router.get("/users", response_model=list[UserResponse])
def list_users(actor: Actor = Depends(get_current_actor)) -> list[UserResponse]:
    return ListUsers(user_repository=SqlAlchemyUserRepository()).execute(actor)
