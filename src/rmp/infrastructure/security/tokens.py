from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from rmp.application.ports.security import InvalidTokenError, TokenClaims, TokenService
from rmp.domain.user.entities import User

ALGORITHM = "HS256"
DEFAULT_EXPIRES_MINUTES = 3 * 24 * 60


def _secret() -> str:
    secret = os.getenv("JWT_SECRET")
    if not secret:
        raise RuntimeError("JWT_SECRET is not set")
    return secret


def _expires_minutes() -> int:
    return int(os.getenv("JWT_EXPIRES_MINUTES", str(DEFAULT_EXPIRES_MINUTES)))


class JoseTokenService(TokenService):
    def __init__(self, secret: str | None = None, expires_minutes: int | None = None) -> None:
        self._secret = secret or _secret()
        self._expires = timedelta(minutes=expires_minutes or _expires_minutes())

    def issue(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user.user_id),
            "email": user.email,
            "role": user.role.value,
            "iat": int(now.timestamp()),
            "exp": int((now + self._expires).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except JWTError as exc:
            raise InvalidTokenError(str(exc)) from exc

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise InvalidTokenError("token has no subject")
        role = payload.get("role")
        return TokenClaims(
            subject=subject,
            role=role if isinstance(role, str) else None,
            email=payload.get("email"),
        )
