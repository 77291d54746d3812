from __future__ import annotations

import logging
from datetime import datetime, timezone

from rmp.application.dto.requests import SignUpRequest
from rmp.application.dto.responses import UserResponse
from rmp.application.errors import EmailAlreadyExistsError
from rmp.application.mappers.user_mapper import to_user_response
from rmp.application.metrics.access_control import record_signup
from rmp.application.ports.repositories import DuplicateEmailError, UserRepository
from rmp.application.ports.security import PasswordHasher
from rmp.domain.common.ids import new_user_id
from rmp.domain.user.entities import User, normalize_email

logger = logging.getLogger(__name__)


class SignUp:
    def __init__(self, user_repository: UserRepository, password_hasher: PasswordHasher) -> None:
        self._user_repository = user_repository
        self._password_hasher = password_hasher

    def execute(self, request_dto: SignUpRequest) -> UserResponse:
        email = normalize_email(request_dto.email)
        if self._user_repository.get_by_email(email) is not None:
            raise EmailAlreadyExistsError("Email already exists")

        user = User(
            user_id=new_user_id(),
            name=request_dto.name.strip(),
            email=email,
            password_hash=self._password_hasher.hash(request_dto.password),
            role=request_dto.role,
            created_at=datetime.now(timezone.utc),
        )
        try:
            self._user_repository.add(user)
        except DuplicateEmailError as exc:
            raise EmailAlreadyExistsError("Email already exists") from exc

        record_signup(role=user.role.value)
        logger.info("user_signed_up", extra={"actor_id": str(user.user_id)})
        return to_user_response(user)
