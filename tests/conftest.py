from __future__ import annotations

import base64
from datetime import datetime

import pytest

from club_points.auth.service import AuthService, StaticCredentialsProvider
from club_points.events.service import LedgerService
from club_points.exchange.service import ImportService
from club_points.main import create_app
from club_points.members.model import Member
from club_points.members.service import MemberRegistry
from club_points.standings.service import StandingService
from club_points.storage.memory import InMemoryEventRepository, InMemoryMemberRepository

ADMIN_ID = "admin"
ADMIN_SECRET = "password"


@pytest.fixture
def fixed_now(monkeypatch):
    now = datetime(2025, 3, 1, 9, 30, 0)
    monkeypatch.setattr("club_points.members.service.now_local", lambda: now)
    monkeypatch.setattr("club_points.events.service.now_local", lambda: now)
    return now


@pytest.fixture
def members_repo():
    return InMemoryMemberRepository()


@pytest.fixture
def events_repo():
    return InMemoryEventRepository()


@pytest.fixture
def registry(members_repo, events_repo):
    return MemberRegistry(members_repo, events_repo)


@pytest.fixture
def ledger(events_repo, registry):
    return LedgerService(events_repo, registry)


@pytest.fixture
def standings(registry, ledger):
    return StandingService(registry, ledger)


@pytest.fixture
def importer(registry):
    return ImportService(registry)


@pytest.fixture
def auth_service():
    return AuthService(StaticCredentialsProvider({ADMIN_ID: ADMIN_SECRET}))


@pytest.fixture
def ali(registry):
    return registry.register(Member(member_id=None, name="Ali", cni="X1"))


@pytest.fixture
def weekly_meeting(ledger):
    return ledger.create_event("Weekly Meeting", now=datetime(2025, 3, 3, 18, 0, 0))


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")

    return create_app({"STORAGE_BACKEND": "memory", "ADMIN_CREDENTIALS": f"{ADMIN_ID}:{ADMIN_SECRET}"})


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers():
    token = base64.b64encode(f"{ADMIN_ID}:{ADMIN_SECRET}".encode("utf-8")).decode("ascii")
    return {"Authorization": f"Bearer {token}"}
