from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.core.rate_limit import limiter
from app.database.supabase_client import SupabaseClient, get_supabase, get_service_supabase
from app.main import app
from app.modules.auth.service import clear_auth_cache
from tests.supabase_fake import FakeSupabase


@pytest.fixture
def fake_db():
    return FakeSupabase()


@pytest.fixture
def client(fake_db, monkeypatch):
    app.dependency_overrides[get_supabase] = lambda: fake_db
    app.dependency_overrides[get_service_supabase] = lambda: fake_db
    monkeypatch.setattr(SupabaseClient, "new_client", classmethod(lambda cls: fake_db.spawn()))
    monkeypatch.setattr(settings, "supabase_service_role_key", "test-service-role-key")
    monkeypatch.setattr(settings, "aws_access_key_id", None)
    monkeypatch.setattr(limiter, "enabled", False)
    clear_auth_cache()
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
        clear_auth_cache()


@pytest.fixture
def make_student(client, fake_db):
    """Register a student through the API and return ids plus auth headers."""

    def _make(student_id="STU001", full_name="Alice Walker", email=None, password="secret123", **profile_fields):
        email = email or f"{student_id.lower()}@batchboard.io"
        resp = client.post("/api/v1/auth/register", json={
            "email": email,
            "password": password,
            "full_name": full_name,
            "student_id": student_id,
        })
        assert resp.status_code == 201, resp.text
        user_id = resp.json()["user_id"]
        profile = fake_db.find("profiles", user_id=user_id)
        profile.update(profile_fields)
        return SimpleNamespace(
            user_id=user_id,
            email=email,
            password=password,
            student_id=student_id,
            profile=profile,
            headers={"Authorization": f"Bearer {fake_db.auth.token_for(user_id)}"},
        )

    return _make
