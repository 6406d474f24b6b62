# src/app/routers/recipes.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status
from starlette.concurrency import run_in_threadpool

from src.app.deps import CurrentUser, get_current_user, get_store
from src.app.infra.db.base import DocumentStore
from src.app.schemas.recipes import MessageResponse
from src.services import recipes as recipe_service
from src.services.errors import RecipeNotFoundError, RecipePermissionError, StoreError

log = logging.getLogger(__name__)
router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.get("", response_model=List[Dict[str, Any]])
async def list_my_recipes(
    user: CurrentUser = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> List[Dict[str, Any]]:
    try:
        return await run_in_threadpool(recipe_service.list_user_recipes, store, str(user.id))
    except StoreError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


# precisa vir antes de /{recipe_id}
@router.get("/all", response_model=List[Dict[str, Any]])
async def list_all_recipes(
    user: CurrentUser = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> List[Dict[str, Any]]:
    try:
        return await run_in_threadpool(recipe_service.list_all_recipes, store)
    except StoreError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get("/{recipe_id}", response_model=Dict[str, Any])
async def get_recipe(
    recipe_id: str,
    user: CurrentUser = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    try:
        return await run_in_threadpool(recipe_service.get_recipe, store, recipe_id)
    except RecipeNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except StoreError as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.post("", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def create_recipe(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    user: CurrentUser = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    try:
        return await run_in_threadpool(
            recipe_service.create_recipe, store, str(user.id), payload or {}
        )
    except StoreError as exc:
        log.error("Erro ao adicionar receita: %s", exc)
        raise HTTPException(
            status_code=400,
            detail={"error": "Erro ao adicionar receita", "details": str(exc)},
        )


@router.put("/{recipe_id}", response_model=Dict[str, Any])
async def update_recipe(
    recipe_id: str,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    user: CurrentUser = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    # TODO: exigir que o chamador seja o dono, como no DELETE
    try:
        return await run_in_threadpool(
            recipe_service.update_recipe, store, recipe_id, payload or {}
        )
    except StoreError as exc:
        log.error("Erro ao atualizar receita %s: %s", recipe_id, exc)
        raise HTTPException(status_code=400, detail=str(exc))


@router.delete("/{recipe_id}", response_model=MessageResponse)
async def delete_recipe(
    recipe_id: str,
    user: CurrentUser = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> MessageResponse:
    try:
        await run_in_threadpool(recipe_service.delete_recipe, store, str(user.id), recipe_id)
    except RecipeNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except RecipePermissionError as exc:
        raise HTTPException(status_code=403, detail=str(exc))
    except StoreError as exc:
        log.error("Erro ao deletar receita: %s", exc)
        raise HTTPException(
            status_code=400,
            detail={"error": "Erro ao deletar receita", "details": str(exc)},
        )
    return MessageResponse(message="Receita deletada com sucesso")
