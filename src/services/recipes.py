# src/services/recipes.py
from __future__ import annotations

import logging
from typing import Any, Iterable

from src.app.domain.models import (
    RECIPES_COLLECTION,
    UNKNOWN_USERNAME,
    USERS_COLLECTION,
    Document,
    recipe_owner,
)
from src.app.infra.db.base import DocumentStore
from src.services.errors import RecipeNotFoundError, RecipePermissionError, StoreError

logger = logging.getLogger(__name__)

# Campos controlados pelo servidor, nunca gravados a partir do corpo
_RESERVED_FIELDS = {"id"}


def serialize_recipe(doc: Document, username: str) -> dict[str, Any]:
    return {"id": doc.id, **doc.data, "username": username}


def resolve_username(
    store: DocumentStore, user_id: str | None, cache: dict[str, str] | None = None
) -> str:
    if not user_id:
        return UNKNOWN_USERNAME
    if cache is not None and user_id in cache:
        return cache[user_id]

    profile = store.get(USERS_COLLECTION, user_id)
    username = profile.get("username") if profile else None
    resolved = str(username) if username else UNKNOWN_USERNAME
    if cache is not None:
        cache[user_id] = resolved
    return resolved


def attach_usernames(store: DocumentStore, docs: Iterable[Document]) -> list[dict[str, Any]]:
    """Enriquece cada receita com o username do dono (um lookup por dono)."""
    cache: dict[str, str] = {}
    return [
        serialize_recipe(doc, resolve_username(store, recipe_owner(doc), cache))
        for doc in docs
    ]


def list_user_recipes(store: DocumentStore, owner_id: str) -> list[dict[str, Any]]:
    docs = store.where(RECIPES_COLLECTION, "userId", str(owner_id))
    return attach_usernames(store, docs)


def list_all_recipes(store: DocumentStore) -> list[dict[str, Any]]:
    return attach_usernames(store, store.list(RECIPES_COLLECTION))


def get_recipe(store: DocumentStore, recipe_id: str) -> dict[str, Any]:
    doc = store.get(RECIPES_COLLECTION, recipe_id)
    if doc is None:
        raise RecipeNotFoundError("Receita não encontrada.")
    return serialize_recipe(doc, resolve_username(store, recipe_owner(doc)))


def _clean_fields(fields: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in fields.items() if key not in _RESERVED_FIELDS}


def create_recipe(store: DocumentStore, owner_id: str, fields: dict[str, Any]) -> dict[str, Any]:
    recipe = {**_clean_fields(fields), "userId": str(owner_id)}
    doc = store.add(RECIPES_COLLECTION, recipe)
    logger.info("Recipe created: id=%s, owner=%s", doc.id, owner_id)
    return {"id": doc.id, **recipe}


def update_recipe(store: DocumentStore, recipe_id: str, fields: dict[str, Any]) -> dict[str, Any]:
    """
    Merge dos campos enviados na receita existente.
    Não verifica o dono; devolve os campos enviados, não o estado gravado.
    """
    changes = _clean_fields(fields)
    if not changes:
        raise StoreError("Nenhum campo para atualizar", operation="update")
    store.update(RECIPES_COLLECTION, recipe_id, changes)
    return {"id": recipe_id, **changes}


def delete_recipe(store: DocumentStore, owner_id: str, recipe_id: str) -> None:
    doc = store.get(RECIPES_COLLECTION, recipe_id)
    if doc is None:
        raise RecipeNotFoundError("Receita não encontrada")
    if recipe_owner(doc) != str(owner_id):
        raise RecipePermissionError("Permissão negada")
    store.delete(RECIPES_COLLECTION, recipe_id)
    logger.info("Recipe deleted: id=%s, owner=%s", recipe_id, owner_id)
