# microblog/core/errors.py
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from microblog.core.config import settings

# Cualquier fallo del store sube tal cual, sin reintentos.
StoreFailure = SQLAlchemyError


class NotFound(Exception):
    """Usuario (por handle) o perfil inexistente → 404 en el router."""

    def __init__(self, detail: str = "not found"):
        super().__init__(detail)
        self.detail = detail


class ConstraintViolation(Exception):
    """Ya existe un perfil para ese user_id."""

    def __init__(self, detail: str = "constraint violation"):
        super().__init__(detail)
        self.detail = detail


@dataclass(frozen=True)
class Unauthenticated:
    """
    Resultado tipado para operaciones que exigen sesión.
    No es un error: el router decide redirigir al login.
    """
    code: int = settings.LOGIN_REDIRECT_CODE
    location: str = settings.LOGIN_PATH
