from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from rmp.domain.common.ids import UserId


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"

    @classmethod
    def parse(cls, value: str | None) -> Role | None:
        """Map a stored or token-carried role string onto the enum.

        Matching is case-insensitive and happens once, at the boundary.
        Anything unrecognized yields ``None`` and is treated as an invalid role
        by every access rule.
        """
        if value is None:
            return None
        normalized = value.strip().lower()
        for role in cls:
            if role.value == normalized:
                return role
        return None


@dataclass(frozen=True)
class User:
    user_id: UserId
    name: str
    email: str
    password_hash: str
    role: Role
    created_at: datetime

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if self.email != normalize_email(self.email):
            raise ValueError("email must be trimmed and lowercase")


@dataclass(frozen=True)
class Actor:
    actor_id: UserId
    role: Role | None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def is_user(self) -> bool:
        return self.role is Role.USER


def normalize_email(email: str) -> str:
    return email.strip().lower()
