# microblog/profile/router.py
from typing import Any, List

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import RedirectResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from microblog.core.errors import ConstraintViolation, NotFound, StoreFailure, Unauthenticated
from microblog.core.json import UTF8JSONResponse
from microblog.core.viewer import Viewer, get_viewer
from microblog.db.session import get_session
from microblog.feed import service as feed_svc
from microblog.feed.schemas import EnrichedPostOut
from microblog.profile import service as svc
from microblog.profile.repository import create_profile
from microblog.profile.schemas import (
    EditableProfile,
    EditableProfileOut,
    FollowCountOut,
    PostsCountOut,
    ProfilePatch,
    UserProfileOut,
)

router = APIRouter(
    prefix="/api/profile",
    tags=["profile"],
    default_response_class=UTF8JSONResponse,
)

me_router = APIRouter(
    prefix="/api/me",
    tags=["profile"],
    default_response_class=UTF8JSONResponse,
)


def _to_login(result: Unauthenticated) -> RedirectResponse:
    return RedirectResponse(url=result.location, status_code=result.code)


def _parse_patch(payload: Any) -> dict[str, Any]:
    """
    El body se valida DESPUÉS de revisar la sesión: un anónimo siempre
    recibe la redirección, mande lo que mande.
    """
    try:
        return ProfilePatch.model_validate(payload or {}).model_dump(exclude_unset=True)
    except ValidationError as e:
        raise RequestValidationError(e.errors())


# ---------------------------
# /api/me/profile/  (perfil propio; fuera de /api/profile/{username}/
# para que ningún handle quede tapado)
# ---------------------------
@me_router.get("/profile/", response_model=EditableProfileOut)
async def my_profile(
    db: AsyncSession = Depends(get_session),
    viewer: Viewer = Depends(get_viewer),
):
    try:
        result = await svc.handle_fetch_profile_info(db, viewer)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.detail)
    if isinstance(result, Unauthenticated):
        return _to_login(result)
    return result


@me_router.post("/profile/", response_model=EditableProfile, status_code=201)
async def create_my_profile(
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_session),
    viewer: Viewer = Depends(get_viewer),
):
    if not viewer.is_authenticated:
        return _to_login(Unauthenticated())

    values = _parse_patch(payload)
    values["user_id"] = viewer.id
    try:
        prof = await create_profile(db, values)
        await db.commit()
    except ConstraintViolation as e:
        await db.rollback()
        raise HTTPException(status_code=409, detail=e.detail)
    except StoreFailure:
        await db.rollback()
        raise
    return svc.for_edit_form(prof)


@me_router.patch("/profile/", response_model=EditableProfile)
async def update_my_profile(
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_session),
    viewer: Viewer = Depends(get_viewer),
):
    if not viewer.is_authenticated:
        return _to_login(Unauthenticated())

    try:
        result = await svc.handle_update_profile_action(db, viewer, _parse_patch(payload))
        if isinstance(result, Unauthenticated):
            return _to_login(result)
        await db.commit()
    except NotFound as e:
        await db.rollback()
        raise HTTPException(status_code=404, detail=e.detail)
    except StoreFailure:
        await db.rollback()
        raise
    return svc.for_edit_form(result)



# ---------------------------
# perfil público por handle
# ---------------------------
@router.get("/{username}/", response_model=UserProfileOut)
async def user_profile(username: str, db: AsyncSession = Depends(get_session)):
    try:
        return await svc.fetch_user_profile(db, username)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.detail)


@router.get("/{username}/posts/", response_model=List[EnrichedPostOut])
async def profile_posts(
    username: str,
    db: AsyncSession = Depends(get_session),
    viewer: Viewer = Depends(get_viewer),
):
    try:
        return await feed_svc.fetch_profile_posts(db, username, viewer)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.detail)


@router.get("/{username}/replies/", response_model=List[EnrichedPostOut])
async def profile_replies(
    username: str,
    db: AsyncSession = Depends(get_session),
    viewer: Viewer = Depends(get_viewer),
):
    try:
        return await feed_svc.fetch_profile_replies(db, username, viewer)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.detail)


@router.get("/{username}/likes/", response_model=List[EnrichedPostOut])
async def profile_liked_posts(
    username: str,
    db: AsyncSession = Depends(get_session),
    viewer: Viewer = Depends(get_viewer),
):
    try:
        return await feed_svc.fetch_profile_liked_posts(db, username, viewer)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.detail)


@router.get("/{username}/posts/count/", response_model=PostsCountOut)
async def profile_posts_count(username: str, db: AsyncSession = Depends(get_session)):
    try:
        return await svc.fetch_profile_posts_count(db, username)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.detail)


@router.get("/{username}/follow-count/", response_model=FollowCountOut)
async def profile_follow_count(username: str, db: AsyncSession = Depends(get_session)):
    try:
        return await svc.fetch_profile_follow_count(db, username)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.detail)
