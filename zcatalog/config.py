# zcatalog/config.py
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_FILE = Path.home() / "resources" / ".env_local"

DEFAULT_MONGO_URI = "mongodb://127.0.0.1:27017"
DEFAULT_DATABASE_NAME = "bikes"
DEFAULT_BACKEND = "mongo"
DEFAULT_LOG_LEVEL = "INFO"

BACKENDS = ("mongo", "memory")


@dataclass(frozen=True)
class Settings:
    mongo_uri: str = DEFAULT_MONGO_URI
    database_name: str = DEFAULT_DATABASE_NAME
    backend: str = DEFAULT_BACKEND
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, env_file: Optional[Path] = ENV_FILE) -> "Settings":
        """Read settings from the environment, after loading ``env_file`` if it exists."""
        if env_file is not None:
            load_dotenv(env_file)
        backend = os.getenv("ZCATALOG_BACKEND", DEFAULT_BACKEND).strip().lower()
        if backend not in BACKENDS:
            raise ValueError(f"ZCATALOG_BACKEND must be one of {BACKENDS}, got {backend!r}")
        return cls(
            mongo_uri=os.getenv("MONGO_URI", DEFAULT_MONGO_URI),
            database_name=os.getenv("MONGO_DATABASE_NAME", DEFAULT_DATABASE_NAME),
            backend=backend,
            log_level=os.getenv("ZCATALOG_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )


def open_store(settings: Optional[Settings] = None):
    """Build the store selected by ``settings.backend``."""
    from zcatalog.zmemory import ZMemoryStore
    from zcatalog.zstore import ZMongoStore

    settings = settings or Settings.from_env()
    if settings.backend == "memory":
        return ZMemoryStore()
    return ZMongoStore(uri=settings.mongo_uri, db_name=settings.database_name)
