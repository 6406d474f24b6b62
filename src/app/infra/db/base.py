# src/app/infra/db/base.py
"""
Abstract base class for the document store.
Collections hold schemaless documents addressed by id, so the service
layer can run against Supabase or an in-memory backend.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from src.app.domain.models import Document


class DocumentStore(ABC):
    """
    Abstract interface for collection/document operations.

    Implementations:
    - SupabaseDocumentStore: one Postgres table per collection (jsonb column)
    - InMemoryDocumentStore: dict-backed, for local development and tests
    """

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """
        Fetch a single document.

        Returns:
            The document, or None if it does not exist
        """
        pass

    @abstractmethod
    def add(self, collection: str, data: dict[str, Any]) -> Document:
        """
        Store a new document under a freshly assigned id.

        Returns:
            The created Document (with its id)
        """
        pass

    @abstractmethod
    def set(self, collection: str, doc_id: str, data: dict[str, Any]) -> Document:
        """Create or replace the document stored at doc_id."""
        pass

    @abstractmethod
    def update(self, collection: str, doc_id: str, changes: dict[str, Any]) -> Document:
        """
        Merge top-level fields into an existing document.

        Raises:
            DocumentNotFoundError: if doc_id does not exist
        """
        pass

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> None:
        pass

    @abstractmethod
    def where(self, collection: str, field: str, value: Any) -> list[Document]:
        """
        Query by field equality.

        Args:
            collection: Collection name
            field: Top-level field of the document body
            value: Value to compare against

        Returns:
            Matching documents, oldest first
        """
        pass

    @abstractmethod
    def list(self, collection: str) -> list[Document]:
        """Every document in the collection, oldest first."""
        pass
