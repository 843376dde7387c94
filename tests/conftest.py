from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient

from taskboard.utils.config import Settings
from taskboard_web.main import create_app

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin123"


def make_settings(tmp_dir: Path, **policy) -> Settings:
    return Settings(
        auth={
            "jwt_secret": "test-secret",
            "bcrypt_rounds": 4,
            "admin_email": ADMIN_EMAIL,
            "admin_password": ADMIN_PASSWORD,
        },
        storage={"data_dir": str(tmp_dir / "data")},
        logging={"level": "WARNING"},
        policy=policy,
    )


def utc_today():
    return datetime.now(timezone.utc).date()


def todo_payload(title: str = "Buy milk", days_ahead: int = 7, **overrides) -> Dict:
    payload = {
        "title": title,
        "description": "Two litres",
        "dueDate": (utc_today() + timedelta(days=days_ahead)).isoformat(),
        "priority": "Normal",
        "category": "Home",
        "location": "Store",
        "reminder": "1 day before",
        "tag": "errand",
        "assignTo": "me",
    }
    payload.update(overrides)
    return payload


def login(client: TestClient, email: str, password: str) -> Dict[str, str]:
    res = client.post("/api/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.text
    return {"Authorization": f"Bearer {res.json()['token']}"}


def register_and_login(
    client: TestClient, email: str, password: str = "pw", role: Optional[str] = None
) -> Dict[str, str]:
    body = {"email": email, "password": password}
    if role:
        body["role"] = role
    res = client.post("/api/register", json=body)
    assert res.status_code == 200, res.text
    return login(client, email, password)


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def admin_headers(client):
    return login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def taskboard(app):
    return app.state.taskboard
