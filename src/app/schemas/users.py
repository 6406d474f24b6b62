# src/app/schemas/users.py
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    # validação de obrigatoriedade fica no serviço (responde 400, não 422)
    username: Optional[Any] = None
    email: Optional[Any] = None


class RegisterResponse(BaseModel):
    message: str
    userId: str
