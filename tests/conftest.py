from __future__ import annotations

import os

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("STORE_BACKEND", "memory")

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from src.app.deps import get_store, get_supabase
from src.app.infra.db.memory_store import InMemoryDocumentStore
from src.app.main import app


class FakeAuth:
    def __init__(self) -> None:
        self.users: dict[str, SimpleNamespace] = {}
        self.verified_tokens: list[str] = []

    def add_user(self, token: str, user_id: str, email: str | None = None, name: str | None = None) -> None:
        self.users[token] = SimpleNamespace(
            id=user_id,
            email=email or f"{user_id}@example.com",
            user_metadata={"name": name} if name else {},
        )

    def get_user(self, token: str) -> SimpleNamespace:
        self.verified_tokens.append(token)
        if token not in self.users:
            raise RuntimeError("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=self.users[token])


class FakeSupabase:
    def __init__(self) -> None:
        self.auth = FakeAuth()


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def supabase() -> FakeSupabase:
    fake = FakeSupabase()
    fake.auth.add_user("token-alice", "alice-uid", name="Alice")
    fake.auth.add_user("token-bob", "bob-uid")
    return fake


@pytest.fixture
def client(store: InMemoryDocumentStore, supabase: FakeSupabase):
    app.dependency_overrides[get_supabase] = lambda: supabase
    app.dependency_overrides[get_store] = lambda: store
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
