from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from src.app.domain.models import Document
from src.app.infra.db.base import DocumentStore
from src.services.errors import DocumentNotFoundError, StoreError

logger = logging.getLogger(__name__)

DOCUMENT_COLUMNS = "id,data"
# ValueError cobre JSONDecodeError quando a resposta 2xx não é JSON
_STORE_FAILURES = (APIError, httpx.HTTPError, ConnectionError, TimeoutError, ValueError)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _error_message(error: Exception) -> str:
    message = getattr(error, "message", None)
    return str(message) if message else str(error)


def _json_path(field: str) -> str:
    return f"data->>{field}"


def _filter_value(value: Any) -> str:
    # data->>campo devolve texto no Postgres
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _row_to_document(row: dict[str, Any]) -> Document:
    data = row.get("data") or {}
    if not isinstance(data, dict):
        data = {}
    return Document(id=str(row["id"]), data=dict(data))


class SupabaseDocumentStore(DocumentStore):
    """
    Each collection is a table with the columns ``id text primary key``,
    ``data jsonb`` and ``created_at timestamptz``.
    """

    def __init__(self, client: Client):
        self._client = client
        logger.info("SupabaseDocumentStore initialized")

    def _execute(self, operation: str, collection: str, query: Any) -> list[dict[str, Any]]:
        try:
            result = query.execute()
        except _STORE_FAILURES as error:
            logger.error("Store error during %s on %s: %s", operation, collection, error)
            raise StoreError(_error_message(error), operation=operation) from error
        return result.data or []

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        rows = self._execute(
            "get",
            collection,
            self._client.table(collection)
            .select(DOCUMENT_COLUMNS)
            .eq("id", doc_id)
            .limit(1),
        )
        if not rows:
            return None
        return _row_to_document(rows[0])

    def add(self, collection: str, data: dict[str, Any]) -> Document:
        payload = {
            "id": str(uuid4()),
            "data": data,
            "created_at": _now_utc().isoformat(),
        }
        rows = self._execute("add", collection, self._client.table(collection).insert(payload))
        if not rows:
            # alguns clientes não devolvem a linha inserida
            return Document(id=payload["id"], data=dict(data))
        doc = _row_to_document(rows[0])
        logger.debug("Created document %s/%s", collection, doc.id)
        return doc

    def set(self, collection: str, doc_id: str, data: dict[str, Any]) -> Document:
        payload = {"id": doc_id, "data": data}
        rows = self._execute("set", collection, self._client.table(collection).upsert(payload))
        if not rows:
            return Document(id=doc_id, data=dict(data))
        return _row_to_document(rows[0])

    def update(self, collection: str, doc_id: str, changes: dict[str, Any]) -> Document:
        current = self.get(collection, doc_id)
        if current is None:
            raise DocumentNotFoundError(collection, doc_id)

        merged = {**current.data, **changes}
        rows = self._execute(
            "update",
            collection,
            self._client.table(collection).update({"data": merged}).eq("id", doc_id),
        )
        if not rows:
            return Document(id=doc_id, data=merged)
        return _row_to_document(rows[0])

    def delete(self, collection: str, doc_id: str) -> None:
        self._execute("delete", collection, self._client.table(collection).delete().eq("id", doc_id))

    def where(self, collection: str, field: str, value: Any) -> list[Document]:
        rows = self._execute(
            "where",
            collection,
            self._client.table(collection)
            .select(DOCUMENT_COLUMNS)
            .eq(_json_path(field), _filter_value(value))
            .order("created_at"),
        )
        return [_row_to_document(row) for row in rows]

    def list(self, collection: str) -> list[Document]:
        rows = self._execute(
            "list",
            collection,
            self._client.table(collection).select(DOCUMENT_COLUMNS).order("created_at"),
        )
        return [_row_to_document(row) for row in rows]
