# src/app/deps.py (mantém os singletons, mas expõe como dependência)

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from supabase import Client, create_client

from src.app.config import settings
from src.app.infra.db.base import DocumentStore
from src.app.infra.db.memory_store import InMemoryDocumentStore
from src.app.infra.db.supabase_store import SupabaseDocumentStore

logger = logging.getLogger(__name__)

_client: Client | None = None
_store: DocumentStore | None = None


def get_supabase() -> Client:
    global _client
    if _client is None:
        _client = create_client(str(settings.SUPABASE_URL),
                                settings.SUPABASE_SERVICE_ROLE_KEY)
    return _client


def get_store() -> DocumentStore:
    global _store
    if _store is None:
        if settings.STORE_BACKEND == "memory":
            _store = InMemoryDocumentStore()
        else:
            _store = SupabaseDocumentStore(get_supabase())
    return _store


auth_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    id: str
    email: str | None = None
    name: str | None = None


async def get_current_user(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
    supa: Client = Depends(get_supabase),
) -> CurrentUser:
    """
    Recebe Authorization: Bearer <access_token> do Supabase,
    valida no GoTrue e retorna dados mínimos do usuário.
    """
    if cred is None or cred.scheme.lower() != "bearer" or not cred.credentials:
        logger.info("Requisição sem token de autorização")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Token não fornecido")

    token = cred.credentials
    try:
        res = supa.auth.get_user(token)
        user = res.user if res else None
    except Exception as exc:
        logger.warning("Erro ao validar token: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Token inválido ou expirado"
        ) from exc

    if not user:
        logger.warning("Erro ao validar token: usuário não encontrado")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Token inválido ou expirado"
        )

    # metadados podem conter 'name'
    name = None
    meta = getattr(user, "user_metadata", None) or {}
    if isinstance(meta, dict):
        name = meta.get("name")

    return CurrentUser(id=str(user.id), email=getattr(user, "email", None), name=name)
