# microblog/profile/service.py
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

from microblog.core.dates import format_iso_date, format_long_date, format_month_year
from microblog.core.errors import NotFound, Unauthenticated
from microblog.core.viewer import Viewer
from microblog.feed.repository import count_posts_by_author
from microblog.feed.service import resolve_user
from microblog.follows.repository import fetch_follow_count
from microblog.profile.models import Profile
from microblog.profile.repository import update_profile
from microblog.users.repository import get_by_username_with_profile

log = logging.getLogger("uvicorn")


def _profile_fields(profile: Profile) -> dict[str, Any]:
    return {
        "user_id": profile.user_id,
        "name": profile.name,
        "bio": profile.bio,
        "location": profile.location,
        "website": profile.website,
        "avatar": profile.avatar,
        "cover": profile.cover,
    }


# -------------------------
# ProfileView: dos formatos de fecha
# -------------------------
def for_public_display(profile: Profile) -> dict[str, Any]:
    """Página pública: "Joined March 2023", "Born July 4, 1990"."""
    data = _profile_fields(profile)
    data["created_at"] = format_month_year(profile.created_at)
    data["dob"] = format_long_date(profile.dob) if profile.dob else None
    return data


def for_edit_form(profile: Profile) -> dict[str, Any]:
    """Formulario de edición: dob en YYYY-MM-DD para <input type="date">."""
    data = _profile_fields(profile)
    data["created_at"] = (
        format_iso_date(profile.created_at) if profile.created_at else None
    )
    data["dob"] = format_iso_date(profile.dob) if profile.dob else None
    return data


# -------------------------
# lecturas por handle
# -------------------------
async def fetch_user_profile(db: AsyncSession, handle: str) -> dict[str, Any]:
    user = await get_by_username_with_profile(db, handle)
    if not user:
        log.warning(f"perfil no encontrado: {handle!r}")
        raise NotFound("user not found")
    return {
        "id": user.id,
        "username": user.username,
        "profile": for_public_display(user.profile) if user.profile else None,
    }


async def fetch_profile_posts_count(db: AsyncSession, handle: str) -> dict[str, int]:
    user = await resolve_user(db, handle)
    return {"count": await count_posts_by_author(db, user.id)}


async def fetch_profile_follow_count(db: AsyncSession, handle: str) -> dict[str, int]:
    user = await resolve_user(db, handle)
    return await fetch_follow_count(db, user.id)


# -------------------------
# "mi perfil" (requiere sesión)
# -------------------------
async def handle_fetch_profile_info(
    db: AsyncSession, viewer: Viewer
) -> dict[str, Any] | Unauthenticated:
    """
    Perfil propio para el formulario de edición. Siempre por viewer.id,
    nunca por handle. Anónimo → Unauthenticated (el router redirige).
    """
    if not viewer.is_authenticated:
        return Unauthenticated()

    res = await db.execute(
        select(Profile)
        .where(Profile.user_id == viewer.id)
        .options(selectinload(Profile.user))
    )
    prof = res.scalar_one_or_none()
    if not prof:
        raise NotFound("profile not found")

    data = for_edit_form(prof)
    data["user"] = {"id": prof.user.id, "username": prof.user.username}
    return data


async def handle_update_profile_action(
    db: AsyncSession, viewer: Viewer, values: dict[str, Any]
) -> Profile | Unauthenticated:
    """
    Aplica el patch al perfil del viewer. No hace commit (lo hace el router).
    """
    if not viewer.is_authenticated:
        return Unauthenticated()

    prof = await update_profile(db, viewer.id, values)
    if prof is None:
        raise NotFound("profile not found")
    log.info(f"perfil actualizado user_id={viewer.id} campos={sorted(values)}")
    return prof
