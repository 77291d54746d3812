from __future__ import annotations

from rmp.application.dto.responses import LoginUserResponse, UserResponse, UserSummaryResponse
from rmp.domain.user.entities import User


def to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=str(user.user_id),
        name=user.name,
        email=user.email,
        role=user.role.value,
        createdAt=user.created_at,
    )


def to_user_summary(user: User | None) -> UserSummaryResponse | None:
    if user is None:
        return None
    return UserSummaryResponse(
        id=str(user.user_id),
        name=user.name,
        email=user.email,
        role=user.role.value,
    )


def to_login_user(user: User) -> LoginUserResponse:
    return LoginUserResponse(name=user.name, email=user.email, role=user.role.value)
