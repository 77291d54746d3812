from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable, Iterator

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from rmp.infrastructure.db import session as db_session

PROJECT_DIR = Path(__file__).resolve().parents[2]


@pytest.fixture(scope="session", autouse=True)
def integration_environment(tmp_path_factory: pytest.TempPathFactory) -> Iterator[None]:
    database_path = tmp_path_factory.mktemp("db") / "rmp.sqlite3"
    os.environ["APP_ENV"] = "test"
    os.environ["DATABASE_URL"] = f"sqlite:///{database_path}"
    os.environ["JWT_SECRET"] = "integration-secret"
    os.environ["BCRYPT_ROUNDS"] = "4"
    os.environ.setdefault("OTEL_SERVICE_NAME", "rmp-backend-test")
    os.environ.setdefault("OTEL_EXPORTER_OTLP_ENDPOINT", "")

    db_session._build_engine.cache_clear()

    config = Config(str(PROJECT_DIR / "alembic.ini"))
    config.attributes["configure_logger"] = False
    command.upgrade(config, "head")
    yield
    db_session._build_engine.cache_clear()


@pytest.fixture
def client() -> TestClient:
    from rmp.api.main import app

    return TestClient(app)


@pytest.fixture
def register(client: TestClient) -> Callable[..., tuple[str, dict]]:
    counter = {"value": 0}

    def factory(role: str = "user", name: str = "Tester") -> tuple[str, dict]:
        counter["value"] += 1
        email = f"{name.lower()}.{role}.{counter['value']}.{os.urandom(3).hex()}@example.com"
        signup = client.post(
            "/auth/signup",
            json={"name": name, "email": email, "password": "password123", "role": role},
        )
        assert signup.status_code == 201, signup.text
        login = client.post("/auth/login", json={"email": email, "password": "password123"})
        assert login.status_code == 200, login.text
        return login.json()["token"], signup.json()

    return factory
