from __future__ import annotations

import os

import bcrypt

from rmp.application.ports.security import PasswordHasher

DEFAULT_ROUNDS = 10


def _rounds() -> int:
    return int(os.getenv("BCRYPT_ROUNDS", str(DEFAULT_ROUNDS)))


class BcryptPasswordHasher(PasswordHasher):
    def __init__(self, rounds: int | None = None) -> None:
        self._rounds = rounds or _rounds()

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            # Malformed stored hash or a password past bcrypt's 72 byte limit.
            return False
