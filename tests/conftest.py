"""
Shared fixtures: in-memory database, authenticated API client, seeded catalog.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import rate_limiter
from app.auth import AuthSession, get_current_session
from app.database import Base, get_db
from app.main import app
from app.models import ChecklistItem, User
from app.realtime import change_feed
from app.routes.auth import rate_limit_sign_in


@pytest.fixture(autouse=True)
def isolate_redis(monkeypatch):
    """No test talks to a real Redis server."""
    monkeypatch.setattr(change_feed, "mirror_to_redis", False)
    monkeypatch.setattr(rate_limiter, "get_optional_redis_client", lambda: None)
    rate_limiter.memory_cache.clear()
    yield
    rate_limiter.memory_cache.clear()


@pytest.fixture
def db_session():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def staff_user(db_session) -> User:
    user = User(email="tech@example.com", full_name="Camille Tech", password_hash="not-used")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_session(staff_user) -> AuthSession:
    """Authenticated session as seen by the notification collaborator."""
    return AuthSession(user=staff_user, access_token="test-access-token")


@pytest.fixture
def anonymous_client(db_session):
    """API client without authentication overrides."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[rate_limit_sign_in] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def api_client(db_session, auth_session):
    """API client signed in as the staff user."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_session] = lambda: auth_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def catalog(db_session) -> dict[str, ChecklistItem]:
    """
    Small checklist catalog:
    brakes (both, 30min, 10.00), chain (bike, 15min, 5.00),
    battery (scooter, 60min, 120.00), tires (both, 20min, 25.00)
    """
    items = {
        "brakes": ChecklistItem(
            category="Brakes",
            item_name="Brake pads",
            estimated_labor_minutes=30,
            estimated_parts_cost=Decimal("10.00"),
            order_index=1,
            vehicle_type="both",
        ),
        "chain": ChecklistItem(
            category="Drivetrain",
            item_name="Chain",
            estimated_labor_minutes=15,
            estimated_parts_cost=Decimal("5.00"),
            order_index=1,
            vehicle_type="bike",
        ),
        "battery": ChecklistItem(
            category="Electrical",
            item_name="Battery",
            estimated_labor_minutes=60,
            estimated_parts_cost=Decimal("120.00"),
            order_index=1,
            vehicle_type="scooter",
        ),
        "tires": ChecklistItem(
            category="Wheels",
            item_name="Tires",
            estimated_labor_minutes=20,
            estimated_parts_cost=Decimal("25.00"),
            order_index=2,
            vehicle_type="both",
        ),
    }
    db_session.add_all(items.values())
    db_session.commit()
    for item in items.values():
        db_session.refresh(item)
    return items


@pytest.fixture
def make_intake(catalog):
    """Build an intake payload; keyword arguments override top-level fields."""

    def _make(**overrides):
        payload = {
            "vendor_name": "Alex Vendor",
            "client": {
                "name": "Marie Dupont",
                "phone": "514 555 0101",
                "email": "marie@example.com",
            },
            "vehicle": {"type": "bike", "brand": "Trek", "model": "FX 2"},
            "client_issue": "Brakes squeal and the chain skips",
            "desired_return_date": "2026-11-02",
            "responses": {
                str(catalog["brakes"].id): "ng",
                str(catalog["chain"].id): "ok",
            },
            "client_decision": "accepted",
        }
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture
def mock_send_notification(mocker):
    """Email collaborator used by the notification service, always succeeding."""
    return mocker.patch(
        "app.services.notification_service.send_notification_email",
        new_callable=mocker.AsyncMock,
        return_value=True,
    )
