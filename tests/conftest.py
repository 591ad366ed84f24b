"""Shared fixtures: in-memory database, app client and a fake Oura API."""

from __future__ import annotations

from typing import Any, Callable, Dict, List

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.core.db import Database
from app.core.oura_client import OuraClient
from app.main import create_app

TEST_DATE = "2024-01-15"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite://",
        OURA_TOKEN=None,
        SYNC_ENABLED=False,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def database() -> Database:
    db = Database("sqlite://", poolclass=StaticPool)
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def session(database: Database):
    s = database.session()
    yield s
    s.close()


@pytest.fixture
def client(settings: Settings, database: Database) -> TestClient:
    with TestClient(create_app(settings, database)) as c:
        yield c


class FakeOura:
    """Records requests and answers {"data": [...]} per usercollection endpoint."""

    def __init__(self) -> None:
        self.data: Dict[str, List[Dict[str, Any]]] = {}
        self.status: Dict[str, int] = {}
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        endpoint = request.url.path.rsplit("/", 1)[-1]
        status = self.status.get(endpoint, 200)
        if status != 200:
            return httpx.Response(status, json={"detail": "nope"})
        return httpx.Response(200, json={"data": self.data.get(endpoint, [])})

    def requests_for(self, endpoint: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith("/" + endpoint)]


@pytest.fixture
def fake_oura() -> FakeOura:
    return FakeOura()


@pytest.fixture
def oura_client(fake_oura: FakeOura) -> OuraClient:
    c = OuraClient("test-token", transport=httpx.MockTransport(fake_oura.handler))
    yield c
    c.close()


@pytest.fixture
def client_factory(fake_oura: FakeOura) -> Callable[[Settings], OuraClient]:
    def factory(s: Settings) -> OuraClient:
        return OuraClient.from_settings(s, transport=httpx.MockTransport(fake_oura.handler))

    return factory
