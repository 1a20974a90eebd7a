# microblog/profile/repository.py
import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from microblog.core.errors import ConstraintViolation
from microblog.profile.models import Profile, EDITABLE_FIELDS

log = logging.getLogger("uvicorn")


async def get_by_user_id(db: AsyncSession, user_id: int) -> Profile | None:
    res = await db.execute(select(Profile).where(Profile.user_id == user_id))
    return res.scalar_one_or_none()


async def create_profile(db: AsyncSession, values: dict[str, Any]) -> Profile:
    """
    Inserta el perfil y devuelve la fila. Un user_id repetido → ConstraintViolation.
    No hace commit (lo hace el caller).
    """
    user_id = values.get("user_id")
    if user_id is None:
        raise ValueError("user_id is required")
    if await get_by_user_id(db, user_id):
        raise ConstraintViolation(f"profile already exists for user {user_id}")

    prof = Profile(**values)
    db.add(prof)
    try:
        await db.flush()
    except IntegrityError as e:
        # carrera con otra petición que creó el perfil entre el check y el insert
        raise ConstraintViolation(f"profile already exists for user {user_id}") from e
    await db.refresh(prof)
    log.info(f"perfil creado para user_id={user_id}")
    return prof


async def update_profile(
    db: AsyncSession, user_id: int, values: dict[str, Any]
) -> Profile | None:
    """
    Actualiza SOLO los campos recibidos. None si el usuario no tiene perfil.
    """
    unknown = set(values) - EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"non editable profile fields: {sorted(unknown)}")

    prof = await get_by_user_id(db, user_id)
    if not prof:
        return None

    for field, value in values.items():
        setattr(prof, field, value)

    if values:
        await db.flush()
        await db.refresh(prof)
    return prof
