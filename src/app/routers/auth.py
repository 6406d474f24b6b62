from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Depends, HTTPException, status
from starlette.concurrency import run_in_threadpool

from src.app.deps import CurrentUser, get_current_user, get_store
from src.app.infra.db.base import DocumentStore
from src.app.schemas.users import RegisterRequest, RegisterResponse
from src.services import users as user_service
from src.services.errors import RegistrationError, StoreError

log = logging.getLogger(__name__)
router = APIRouter(tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest | None = Body(default=None),
    user: CurrentUser = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> RegisterResponse:
    try:
        profile = await run_in_threadpool(
            user_service.register_user,
            store,
            str(user.id),
            username=payload.username if payload else None,
            email=payload.email if payload else None,
        )
    except RegistrationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except StoreError as exc:
        log.error("Erro ao cadastrar usuário: %s", exc)
        raise HTTPException(
            status_code=400,
            detail={"error": "Erro ao cadastrar usuário", "details": str(exc)},
        )
    return RegisterResponse(message="Usuário registrado com sucesso", userId=profile.id)
