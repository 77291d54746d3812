from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from rmp.domain.user.entities import User


@dataclass(frozen=True)
class TokenClaims:
    subject: str
    role: str | None
    email: str | None = None


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...

    def verify(self, password: str, password_hash: str) -> bool: ...


class TokenService(Protocol):
    def issue(self, user: User) -> str: ...

    def verify(self, token: str) -> TokenClaims: ...


class InvalidTokenError(Exception):
    pass
