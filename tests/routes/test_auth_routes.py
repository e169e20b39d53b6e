"""
Tests for staff authentication.
"""

import pytest

from app import rate_limiter
from app.main import app
from app.models import User
from app.routes.auth import rate_limit_sign_in
from app.security_utils import create_jwt_token, verify_jwt_token


def sign_up(client, email="tech@shop.test", password="correct-horse"):
    return client.post(
        "/auth/sign-up", json={"email": email, "password": password, "full_name": "Sam"}
    )


def test_sign_up_creates_account_and_token(anonymous_client, db_session):
    response = sign_up(anonymous_client, email="Tech@Shop.test")

    assert response.status_code == 201
    payload = verify_jwt_token(response.json()["access_token"])
    user = db_session.query(User).one()
    assert user.email == "tech@shop.test"
    assert payload["sub"] == str(user.id)
    assert user.password_hash != "correct-horse"


def test_duplicate_sign_up_is_refused(anonymous_client):
    sign_up(anonymous_client)

    assert sign_up(anonymous_client).status_code == 409


def test_short_password_is_rejected(anonymous_client):
    assert sign_up(anonymous_client, password="short").status_code == 422


def test_sign_in_with_valid_credentials(anonymous_client):
    sign_up(anonymous_client)

    response = anonymous_client.post(
        "/auth/sign-in", json={"email": "tech@shop.test", "password": "correct-horse"}
    )

    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"


@pytest.mark.parametrize(
    "email,password",
    [("tech@shop.test", "wrong-password"), ("nobody@shop.test", "correct-horse")],
)
def test_sign_in_with_bad_credentials(anonymous_client, email, password):
    sign_up(anonymous_client)

    response = anonymous_client.post("/auth/sign-in", json={"email": email, "password": password})

    assert response.status_code == 401


def test_me_returns_the_token_owner(anonymous_client):
    token = sign_up(anonymous_client).json()["access_token"]

    response = anonymous_client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["email"] == "tech@shop.test"


@pytest.mark.parametrize(
    "token",
    ["not-a-jwt", "a.b.c", create_jwt_token({"sub": "abc"}), create_jwt_token({"sub": "999"})],
)
def test_me_rejects_invalid_tokens(anonymous_client, token):
    response = anonymous_client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_sign_in_is_rate_limited(anonymous_client):
    app.dependency_overrides.pop(rate_limit_sign_in, None)
    sign_up(anonymous_client)

    statuses = [
        anonymous_client.post(
            "/auth/sign-in", json={"email": "tech@shop.test", "password": "wrong-password"}
        ).status_code
        for _ in range(11)
    ]

    assert statuses[:10] == [401] * 10
    assert statuses[10] == 429
    assert rate_limiter.memory_cache


def test_me_without_bearer_header_is_unauthorized(anonymous_client):
    response = anonymous_client.get("/auth/me")

    assert response.status_code == 401
