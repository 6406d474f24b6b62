# src/app/domain/models.py
"""
Domain models for recipes and user profiles.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

RECIPES_COLLECTION = "recipes"
USERS_COLLECTION = "users"

# Nome exibido quando o dono da receita ainda não tem perfil
UNKNOWN_USERNAME = "Desconhecido"


@dataclass
class Document:
    """A schemaless record addressed by a store-assigned id."""
    id: str
    data: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)


@dataclass
class UserProfile:
    """Profile keyed by the identity provider subject id."""
    id: str
    username: str
    email: str

    @classmethod
    def from_document(cls, doc: Document) -> "UserProfile":
        return cls(
            id=doc.id,
            username=str(doc.get("username") or ""),
            email=str(doc.get("email") or ""),
        )

    def to_data(self) -> dict[str, str]:
        return {"username": self.username, "email": self.email}


def recipe_owner(doc: Document) -> Optional[str]:
    owner = doc.get("userId")
    return str(owner) if owner else None
