from __future__ import annotations

from rmp.application.dto.requests import LoginRequest
from rmp.application.dto.responses import LoginResponse, UserResponse
from rmp.application.errors import (
    AuthenticationRequiredError,
    InvalidCredentialsError,
    UnauthorizedError,
)
from rmp.application.mappers.user_mapper import to_login_user, to_user_response
from rmp.application.metrics.access_control import record_login_attempt
from rmp.application.ports.repositories import UserRepository
from rmp.application.ports.security import InvalidTokenError, PasswordHasher, TokenService
from rmp.application.use_cases.guard import enforce
from rmp.domain.access.policy import can_list_users
from rmp.domain.common.ids import USER_ID_PREFIX, UserId, is_well_formed_id
from rmp.domain.user.entities import Actor, Role, normalize_email


class Login:
    def __init__(
        self,
        user_repository: UserRepository,
        password_hasher: PasswordHasher,
        token_service: TokenService,
    ) -> None:
        self._user_repository = user_repository
        self._password_hasher = password_hasher
        self._token_service = token_service

    def execute(self, request_dto: LoginRequest) -> LoginResponse:
        user = self._user_repository.get_by_email(normalize_email(request_dto.email))
        # Unknown email and wrong password are indistinguishable to the caller.
        if user is None or not self._password_hasher.verify(
            request_dto.password, user.password_hash
        ):
            record_login_attempt(outcome="rejected")
            raise InvalidCredentialsError("Invalid credentials")

        record_login_attempt(outcome="accepted")
        return LoginResponse(
            message="Login successful",
            token=self._token_service.issue(user),
            user=to_login_user(user),
        )


class Authenticate:
    """Turns a bearer token into the acting identity for one request."""

    def __init__(self, user_repository: UserRepository, token_service: TokenService) -> None:
        self._user_repository = user_repository
        self._token_service = token_service

    def execute(self, token: str | None) -> Actor:
        if not token:
            raise AuthenticationRequiredError("Login first to access this resource")

        try:
            claims = self._token_service.verify(token)
        except InvalidTokenError as exc:
            raise UnauthorizedError("Invalid token") from exc

        if not is_well_formed_id(claims.subject, USER_ID_PREFIX):
            raise UnauthorizedError("Invalid token")

        user = self._user_repository.get(UserId(claims.subject))
        if user is None:
            raise AuthenticationRequiredError("Login first to access this resource")

        return Actor(actor_id=user.user_id, role=Role.parse(claims.role))


class ListUsers:
    def __init__(self, user_repository: UserRepository) -> None:
        self._user_repository = user_repository

    def execute(self, actor: Actor) -> list[UserResponse]:
        enforce(can_list_users(actor), actor=actor, resource="user", operation="list")
        return [to_user_response(user) for user in self._user_repository.list_all()]
