"""
Connection lifecycle of mongo_session without a MongoDB server: model
registration is replaced so no network round trip happens.
"""

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from app.core import database as database_module
from app.core.database import database, mongo_session


@pytest.fixture(autouse=True)
def reset_database():
    yield
    if database.client is not None:
        database.client.close()
    database.client = None
    database.database = None


async def test_init_failure_releases_client(monkeypatch, settings):
    async def failing_init_beanie(**kwargs):
        assert database.client is not None
        raise ServerSelectionTimeoutError("localhost:27017: connection refused")

    monkeypatch.setattr(database_module, "init_beanie", failing_init_beanie)

    with pytest.raises(ServerSelectionTimeoutError):
        async with mongo_session(settings):
            pytest.fail("session body must not run when connecting fails")

    assert database.client is None
    assert database.database is None


async def test_error_in_body_releases_client(monkeypatch, settings):
    async def noop_init_beanie(**kwargs):
        return None

    monkeypatch.setattr(database_module, "init_beanie", noop_init_beanie)

    with pytest.raises(RuntimeError, match="seed step failed"):
        async with mongo_session(settings) as db:
            assert db.name == "seed_test"
            assert database.client is not None
            raise RuntimeError("seed step failed")

    assert database.client is None


async def test_database_name_falls_back_when_url_has_none(monkeypatch, settings):
    async def noop_init_beanie(**kwargs):
        return None

    monkeypatch.setattr(database_module, "init_beanie", noop_init_beanie)
    settings.MONGODB_URL = "mongodb://localhost:27017"
    settings.MONGODB_DB_NAME = "fallback_db"

    async with mongo_session(settings) as db:
        assert db.name == "fallback_db"

    assert database.client is None
