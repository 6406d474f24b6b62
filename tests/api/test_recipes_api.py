from __future__ import annotations

import json

from fastapi.testclient import TestClient

from src.app.deps import get_store
from src.app.domain.models import RECIPES_COLLECTION, USERS_COLLECTION
from src.app.infra.db.memory_store import InMemoryDocumentStore
from src.app.infra.db.supabase_store import SupabaseDocumentStore
from src.app.main import app
from src.services.errors import StoreError

ALICE = {"Authorization": "Bearer token-alice"}
BOB = {"Authorization": "Bearer token-bob"}


def _create(client, headers: dict[str, str], body: dict) -> dict:
    response = client.post("/recipes", json=body, headers=headers)
    assert response.status_code == 201
    return response.json()


class TestCreateRecipe:
    def test_create_then_get_keeps_fields_and_owner(self, client) -> None:
        body = {"title": "Pão de queijo", "ingredients": ["polvilho", "queijo"], "minutes": 40}

        created = _create(client, ALICE, body)
        fetched = client.get(f"/recipes/{created['id']}", headers=ALICE)

        assert fetched.status_code == 200
        payload = fetched.json()
        assert payload["id"] == created["id"]
        assert payload["userId"] == "alice-uid"
        for key, value in body.items():
            assert payload[key] == value

    def test_body_cannot_choose_owner(self, client, store: InMemoryDocumentStore) -> None:
        created = _create(client, ALICE, {"title": "Feijoada", "userId": "bob-uid"})

        assert created["userId"] == "alice-uid"
        assert store.get(RECIPES_COLLECTION, created["id"]).data["userId"] == "alice-uid"

    def test_body_id_is_not_stored(self, client, store: InMemoryDocumentStore) -> None:
        created = _create(client, ALICE, {"id": "forced", "title": "Cuscuz"})

        assert created["id"] != "forced"
        assert "id" not in store.get(RECIPES_COLLECTION, created["id"]).data

    def test_store_failure_returns_400_with_details(self, client, store, monkeypatch) -> None:
        def fail(*args, **kwargs):
            raise StoreError("connection reset", operation="add")

        monkeypatch.setattr(store, "add", fail)

        response = client.post("/recipes", json={"title": "Bolo"}, headers=ALICE)

        assert response.status_code == 400
        assert response.json() == {"error": "Erro ao adicionar receita", "details": "connection reset"}

    def test_non_object_body_is_rejected(self, client) -> None:
        response = client.post("/recipes", json=["not", "an", "object"], headers=ALICE)

        assert response.status_code == 400
        assert response.json()["error"] == "Corpo da requisição inválido"


class TestListRecipes:
    def test_lists_only_callers_recipes(self, client) -> None:
        _create(client, ALICE, {"title": "Moqueca"})
        _create(client, ALICE, {"title": "Vatapá"})
        _create(client, BOB, {"title": "Brigadeiro"})

        response = client.get("/recipes", headers=ALICE)

        assert response.status_code == 200
        titles = sorted(recipe["title"] for recipe in response.json())
        assert titles == ["Moqueca", "Vatapá"]

    def test_all_is_superset_of_mine(self, client) -> None:
        _create(client, ALICE, {"title": "Moqueca"})
        _create(client, BOB, {"title": "Brigadeiro"})

        mine = client.get("/recipes", headers=ALICE).json()
        everything = client.get("/recipes/all", headers=ALICE).json()

        assert len(everything) > len(mine)
        assert {r["id"] for r in mine} <= {r["id"] for r in everything}

    def test_username_enrichment_uses_profile_or_placeholder(self, client, store) -> None:
        store.set(USERS_COLLECTION, "alice-uid", {"username": "alice", "email": "alice@example.com"})
        _create(client, ALICE, {"title": "Moqueca"})
        _create(client, BOB, {"title": "Brigadeiro"})

        everything = client.get("/recipes/all", headers=BOB).json()

        usernames = {recipe["title"]: recipe["username"] for recipe in everything}
        assert usernames == {"Moqueca": "alice", "Brigadeiro": "Desconhecido"}

    def test_store_failure_returns_400(self, client, store, monkeypatch) -> None:
        def fail(*args, **kwargs):
            raise StoreError("permission denied for table recipes")

        monkeypatch.setattr(store, "where", fail)

        response = client.get("/recipes", headers=ALICE)

        assert response.status_code == 400
        assert response.json() == {"error": "permission denied for table recipes"}

    def test_all_store_failure_returns_400(self, client, store, monkeypatch) -> None:
        def fail(*args, **kwargs):
            raise StoreError("relation \"recipes\" does not exist")

        monkeypatch.setattr(store, "list", fail)

        response = client.get("/recipes/all", headers=ALICE)

        assert response.status_code == 400
        assert response.json() == {"error": "relation \"recipes\" does not exist"}


class TestGetRecipe:
    def test_missing_recipe_returns_404(self, client) -> None:
        response = client.get("/recipes/does-not-exist", headers=ALICE)

        assert response.status_code == 404
        assert response.json() == {"error": "Receita não encontrada."}

    def test_store_failure_returns_500(self, client, store, monkeypatch) -> None:
        def fail(*args, **kwargs):
            raise StoreError("timeout")

        monkeypatch.setattr(store, "get", fail)

        response = client.get("/recipes/any", headers=ALICE)

        assert response.status_code == 500
        assert response.json() == {"error": "timeout"}


class TestUpdateRecipe:
    def test_merges_fields_and_echoes_submitted_body(self, client, store) -> None:
        created = _create(client, ALICE, {"title": "Bolo", "minutes": 50})

        response = client.put(f"/recipes/{created['id']}", json={"minutes": 45}, headers=ALICE)

        assert response.status_code == 200
        assert response.json() == {"id": created["id"], "minutes": 45}
        stored = store.get(RECIPES_COLLECTION, created["id"]).data
        assert stored == {"title": "Bolo", "minutes": 45, "userId": "alice-uid"}

    def test_does_not_check_ownership(self, client, store) -> None:
        created = _create(client, ALICE, {"title": "Bolo"})

        response = client.put(f"/recipes/{created['id']}", json={"title": "Bolo de fubá"}, headers=BOB)

        assert response.status_code == 200
        assert store.get(RECIPES_COLLECTION, created["id"]).data["title"] == "Bolo de fubá"

    def test_missing_recipe_returns_400(self, client) -> None:
        response = client.put("/recipes/nope", json={"title": "x"}, headers=ALICE)

        assert response.status_code == 400
        assert "nope" in response.json()["error"]


class TestDeleteRecipe:
    def test_owner_can_delete(self, client) -> None:
        created = _create(client, ALICE, {"title": "Bolo"})

        response = client.delete(f"/recipes/{created['id']}", headers=ALICE)

        assert response.status_code == 200
        assert response.json() == {"message": "Receita deletada com sucesso"}
        assert client.get(f"/recipes/{created['id']}", headers=ALICE).status_code == 404

    def test_non_owner_gets_403_and_recipe_is_unchanged(self, client, store) -> None:
        created = _create(client, ALICE, {"title": "Bolo"})
        before = store.get(RECIPES_COLLECTION, created["id"])

        response = client.delete(f"/recipes/{created['id']}", headers=BOB)

        assert response.status_code == 403
        assert response.json() == {"error": "Permissão negada"}
        assert store.get(RECIPES_COLLECTION, created["id"]) == before

    def test_missing_recipe_returns_404(self, client) -> None:
        response = client.delete("/recipes/nope", headers=ALICE)

        assert response.status_code == 404
        assert response.json() == {"error": "Receita não encontrada"}

    def test_store_failure_returns_400_with_details(self, client, store, monkeypatch) -> None:
        created = _create(client, ALICE, {"title": "Bolo"})

        def fail(*args, **kwargs):
            raise StoreError("network unreachable")

        monkeypatch.setattr(store, "delete", fail)

        response = client.delete(f"/recipes/{created['id']}", headers=ALICE)

        assert response.status_code == 400
        assert response.json() == {"error": "Erro ao deletar receita", "details": "network unreachable"}


class TestUpdateRecipeFailures:
    def test_store_failure_returns_400(self, client, store, monkeypatch) -> None:
        created = _create(client, ALICE, {"title": "Bolo"})

        def fail(*args, **kwargs):
            raise StoreError("could not serialize access")

        monkeypatch.setattr(store, "update", fail)

        response = client.put(f"/recipes/{created['id']}", json={"title": "x"}, headers=ALICE)

        assert response.status_code == 400
        assert response.json() == {"error": "could not serialize access"}

    def test_empty_body_returns_400_and_keeps_recipe(self, client, store) -> None:
        created = _create(client, ALICE, {"title": "Bolo"})

        response = client.put(f"/recipes/{created['id']}", json={}, headers=ALICE)

        assert response.status_code == 400
        assert response.json() == {"error": "Nenhum campo para atualizar"}
        assert store.get(RECIPES_COLLECTION, created["id"]).data == {"title": "Bolo", "userId": "alice-uid"}


class UndecodableQuery:
    def __getattr__(self, name):
        return lambda *args, **kwargs: self

    def execute(self):
        raise json.JSONDecodeError("Expecting value", "<html>", 0)


class UndecodableSupabase:
    def table(self, name: str) -> UndecodableQuery:
        return UndecodableQuery()


class TestUnexpectedErrors:
    def test_undecodable_store_response_is_reported_as_json(self, client) -> None:
        app.dependency_overrides[get_store] = lambda: SupabaseDocumentStore(UndecodableSupabase())

        listed = client.get("/recipes", headers=ALICE)
        updated = client.put("/recipes/x", json={"title": "x"}, headers=ALICE)

        for response in (listed, updated):
            assert response.status_code == 400
            assert response.headers["content-type"].startswith("application/json")
            assert "Expecting value" in response.json()["error"]

    def test_unhandled_exception_returns_json_500(self, client, store, monkeypatch) -> None:
        def explode(*args, **kwargs):
            raise RuntimeError("unexpected failure")

        monkeypatch.setattr(store, "list", explode)

        with TestClient(app, raise_server_exceptions=False) as lenient_client:
            response = lenient_client.get("/recipes/all", headers=ALICE)

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == {"error": "unexpected failure"}
