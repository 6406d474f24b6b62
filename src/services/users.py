from __future__ import annotations

import logging
from typing import Any, Optional

from src.app.domain.models import USERS_COLLECTION, UserProfile
from src.app.infra.db.base import DocumentStore
from src.services.errors import MissingProfileFieldsError, UserAlreadyRegisteredError

logger = logging.getLogger(__name__)


def _clean(value: Any) -> Optional[str]:
    # mais estrito que um teste de "truthiness": espaços e não-strings contam como ausentes
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return None


def get_profile(store: DocumentStore, user_id: str) -> Optional[UserProfile]:
    doc = store.get(USERS_COLLECTION, str(user_id))
    return UserProfile.from_document(doc) if doc else None


def register_user(
    store: DocumentStore, user_id: str, *, username: Any, email: Any
) -> UserProfile:
    clean_username = _clean(username)
    clean_email = _clean(email)
    if not clean_username or not clean_email:
        raise MissingProfileFieldsError()

    if get_profile(store, user_id) is not None:
        raise UserAlreadyRegisteredError(str(user_id))

    profile = UserProfile(id=str(user_id), username=clean_username, email=clean_email)
    store.set(USERS_COLLECTION, profile.id, profile.to_data())
    logger.info("User registered: id=%s, username=%s", profile.id, profile.username)
    return profile
