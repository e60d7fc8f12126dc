"""Pytest configuration and fixtures for FieldFlowPM tests.

Provides a seeded in-memory store, a session registry on a controllable
clock, and FastAPI test clients logged in as the various roles.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from fieldflow.auth.gate import AuthorizationGate
from fieldflow.auth.service import AuthService
from fieldflow.auth.sessions import MemorySessionRegistry
from fieldflow.config import AppConfig, SecurityConfig, SeedConfig, SessionConfig
from fieldflow.models import (
    Company,
    CompanyCreate,
    Project,
    ProjectCreate,
    ProjectStatus,
    PublicUser,
    Role,
)
from fieldflow.storage.memory import MemStorage
from fieldflow.storage.seed import DemoData, seed_demo_data
from fieldflow.web.app import create_app

TEST_BCRYPT_ROUNDS = 4
STAFF_PASSWORD = "password1"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@dataclass
class Cast:
    """Extra accounts and a second company used by authorization tests."""

    employee: PublicUser
    subcontractor: PublicUser
    other_client: PublicUser
    other_company: Company
    other_employee: PublicUser
    other_project: Project


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Keep the process environment from leaking into tests."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setenv("ENABLE_METRICS", "false")
    monkeypatch.setenv("BCRYPT_ROUNDS", str(TEST_BCRYPT_ROUNDS))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 1, 6, 8, 0, tzinfo=timezone.utc))


@pytest.fixture
def test_config() -> AppConfig:
    """Config for app tests: fast hashing, no metrics, plain-HTTP cookies."""
    return AppConfig(
        environment="test",
        log_level="WARNING",
        enable_metrics=False,
        session=SessionConfig(cookie_secure=False),
        security=SecurityConfig(bcrypt_rounds=TEST_BCRYPT_ROUNDS),
        seed=SeedConfig(enabled=False),
    )


@pytest.fixture
def storage() -> MemStorage:
    return MemStorage()


@pytest.fixture
def demo(storage: MemStorage) -> DemoData:
    """Demo company, admin/admin123, maria.johnson/client123 and their projects."""
    return seed_demo_data(storage, SeedConfig(), bcrypt_rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def sessions(clock: FakeClock) -> MemorySessionRegistry:
    return MemorySessionRegistry(clock=clock)


@pytest.fixture
def auth_service(storage: MemStorage, sessions: MemorySessionRegistry) -> AuthService:
    return AuthService(storage, sessions, bcrypt_rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def gate() -> AuthorizationGate:
    return AuthorizationGate()


@pytest.fixture
def cast(demo: DemoData, storage: MemStorage, auth_service: AuthService) -> Cast:
    """Employee, subcontractor and second client of the demo company, plus a
    rival company with its own employee and project."""

    def account(username: str, role: Role, company_id: int | None) -> PublicUser:
        return auth_service.create_user(
            username=username,
            email=f"{username}@example.com",
            password=STAFF_PASSWORD,
            first_name=username.split(".")[0].title(),
            last_name="Tester",
            role=role,
            company_id=company_id,
        )

    other_company = storage.create_company(CompanyCreate(name="Rival Builders"))
    other_client = account("otto.client", Role.CLIENT, None)
    other_project = storage.create_project(
        ProjectCreate(
            name="Garage Conversion",
            address="9 Elm Road, Shelbyville",
            client_id=other_client.id,
            company_id=other_company.id,
            status=ProjectStatus.PLANNING,
            budget_total=Decimal("12000.00"),
        )
    )
    return Cast(
        employee=account("erin.employee", Role.EMPLOYEE, demo.company.id),
        subcontractor=account("sam.sub", Role.SUBCONTRACTOR, demo.company.id),
        other_client=other_client,
        other_company=other_company,
        other_employee=account("olga.other", Role.EMPLOYEE, other_company.id),
        other_project=other_project,
    )


@pytest.fixture
def app(test_config: AppConfig, storage: MemStorage, sessions: MemorySessionRegistry, demo):
    return create_app(config=test_config, storage=storage, sessions=sessions)


@pytest.fixture
def client(app) -> TestClient:
    """Anonymous test client."""
    return TestClient(app)


@pytest.fixture
def login(app) -> Callable[[str, str], TestClient]:
    """Factory returning a fresh client holding a session cookie for a user."""

    def _login(username: str, password: str = STAFF_PASSWORD) -> TestClient:
        session_client = TestClient(app)
        response = session_client.post(
            "/api/auth/login", json={"username": username, "password": password}
        )
        assert response.status_code == 200, response.text
        return session_client

    return _login


@pytest.fixture
def admin_client(login) -> TestClient:
    return login("admin", "admin123")


@pytest.fixture
def maria_client(login) -> TestClient:
    """Logged in as the demo client, maria.johnson."""
    return login("maria.johnson", "client123")
