import pytest
from fastapi.testclient import TestClient

from pg_api.core.config import Settings
from pg_api.factory import create_app


class FakeDatabase:
    """Stands in for DatabaseManager so no PostgreSQL server is needed."""

    def __init__(self, result=100, ping_error=None, query_error=None):
        self.result = result
        self.ping_error = ping_error
        self.query_error = query_error
        self.statements = []
        self.ping_count = 0
        self.close_count = 0

    async def ping(self):
        self.ping_count += 1
        if self.ping_error is not None:
            raise self.ping_error

    async def query_scalar(self, statement):
        self.statements.append(statement)
        if self.query_error is not None:
            raise self.query_error
        return self.result

    async def close(self):
        self.close_count += 1


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def app(fake_db):
    return create_app(Settings.from_env({}), database=fake_db)


@pytest.fixture
def client(app):
    return TestClient(app)
