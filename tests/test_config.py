import os

import pytest

from zcatalog.config import Settings, open_store
from zcatalog.zmemory import ZMemoryStore


def test_defaults(monkeypatch):
    for var in ("MONGO_URI", "MONGO_DATABASE_NAME", "ZCATALOG_BACKEND", "ZCATALOG_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    settings = Settings.from_env(env_file=None)
    assert settings == Settings()
    assert settings.database_name == "bikes"
    assert settings.backend == "mongo"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("MONGO_URI", "mongodb://db:27017")
    monkeypatch.setenv("MONGO_DATABASE_NAME", "catalog")
    monkeypatch.setenv("ZCATALOG_BACKEND", "Memory")
    monkeypatch.setenv("ZCATALOG_LOG_LEVEL", "debug")
    settings = Settings.from_env(env_file=None)
    assert settings.mongo_uri == "mongodb://db:27017"
    assert settings.database_name == "catalog"
    assert settings.backend == "memory"
    assert settings.log_level == "DEBUG"


def test_env_file_is_loaded(monkeypatch, tmp_path):
    monkeypatch.delenv("MONGO_DATABASE_NAME", raising=False)
    monkeypatch.delenv("ZCATALOG_BACKEND", raising=False)
    env_file = tmp_path / ".env_local"
    env_file.write_text("MONGO_DATABASE_NAME=from_file\n", encoding="utf-8")
    try:
        assert Settings.from_env(env_file=env_file).database_name == "from_file"
    finally:
        os.environ.pop("MONGO_DATABASE_NAME", None)


def test_unknown_backend(monkeypatch):
    monkeypatch.setenv("ZCATALOG_BACKEND", "redis")
    with pytest.raises(ValueError):
        Settings.from_env(env_file=None)


def test_open_memory_store():
    assert isinstance(open_store(Settings(backend="memory")), ZMemoryStore)


def test_open_mongo_store(monkeypatch):
    created = {}

    class FakeStore:
        def __init__(self, uri=None, db_name=None):
            created.update(uri=uri, db_name=db_name)

    monkeypatch.setattr("zcatalog.zstore.ZMongoStore", FakeStore)
    store = open_store(Settings(mongo_uri="mongodb://db:27017", database_name="bikes"))
    assert isinstance(store, FakeStore)
    assert created == {"uri": "mongodb://db:27017", "db_name": "bikes"}
