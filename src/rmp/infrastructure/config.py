from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

_ROOT_DIR = Path(__file__).resolve().parents[3]


def env_file_name() -> str:
    if os.getenv("APP_ENV", "dev").lower() == "test":
        return ".env.test"
    return ".env.development"


def load_env_file(root_dir: Path | None = None) -> bool:
    """Load the environment file for APP_ENV without overriding variables already set."""
    path = (root_dir or _ROOT_DIR) / env_file_name()
    if not path.is_file():
        return False
    return load_dotenv(path, override=False)
