from __future__ import annotations

import copy
import logging
import threading
from typing import Any, Optional
from uuid import uuid4

from src.app.domain.models import Document
from src.app.infra.db.base import DocumentStore
from src.services.errors import DocumentNotFoundError

logger = logging.getLogger(__name__)


class InMemoryDocumentStore(DocumentStore):
    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._lock = threading.Lock()
        logger.info("InMemoryDocumentStore initialized")

    def _bucket(self, collection: str) -> dict[str, dict[str, Any]]:
        return self._collections.setdefault(collection, {})

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        with self._lock:
            data = self._bucket(collection).get(doc_id)
            if data is None:
                return None
            return Document(id=doc_id, data=copy.deepcopy(data))

    def add(self, collection: str, data: dict[str, Any]) -> Document:
        doc_id = str(uuid4())
        return self.set(collection, doc_id, data)

    def set(self, collection: str, doc_id: str, data: dict[str, Any]) -> Document:
        stored = copy.deepcopy(data)
        with self._lock:
            self._bucket(collection)[doc_id] = stored
        return Document(id=doc_id, data=copy.deepcopy(stored))

    def update(self, collection: str, doc_id: str, changes: dict[str, Any]) -> Document:
        with self._lock:
            bucket = self._bucket(collection)
            if doc_id not in bucket:
                raise DocumentNotFoundError(collection, doc_id)
            bucket[doc_id].update(copy.deepcopy(changes))
            return Document(id=doc_id, data=copy.deepcopy(bucket[doc_id]))

    def delete(self, collection: str, doc_id: str) -> None:
        with self._lock:
            self._bucket(collection).pop(doc_id, None)

    def where(self, collection: str, field: str, value: Any) -> list[Document]:
        return [doc for doc in self.list(collection) if doc.data.get(field) == value]

    def list(self, collection: str) -> list[Document]:
        with self._lock:
            items = list(self._bucket(collection).items())
        return [Document(id=doc_id, data=copy.deepcopy(data)) for doc_id, data in items]
