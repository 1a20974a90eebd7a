# microblog/feed/service.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from microblog.core.dates import relative_time, utcnow
from microblog.core.errors import NotFound
from microblog.core.viewer import Viewer
from microblog.feed import repository as repo
from microblog.feed.models import Post
from microblog.users.models import User
from microblog.users.repository import get_by_username

log = logging.getLogger("uvicorn")


def _post_base(post: Post, *, with_parent: bool) -> dict:
    """
    Campos "crudos" del post + relaciones ya cargadas (autor, autor del padre).
    Solo toca relaciones que el query trajo con selectinload.
    """
    data = {
        "id": post.id,
        "author_id": post.author_id,
        "parent_post_id": post.parent_post_id,
        "content": post.content,
        "author": {
            "id": post.author.id,
            "username": post.author.username,
        },
        "parent_post": None,
    }
    if with_parent and post.parent_post is not None:
        data["parent_post"] = {
            "id": post.parent_post.id,
            "author": {"username": post.parent_post.author.username},
        }
    return data


async def enrich_post(
    db: AsyncSession,
    post: Post,
    viewer_id: int | None = None,
    *,
    now: datetime | None = None,
    with_parent: bool = False,
) -> dict:
    """
    Un post → dict que espera el front:
    - is_liked: el viewer le dio like (False si es anónimo)
    - likes_count / replies_count: conteos exactos al momento de la llamada
    - created_at: tiempo relativo ("3 hours")
    """
    data = _post_base(post, with_parent=with_parent)
    data["is_liked"] = await repo.is_post_already_liked(db, post.id, viewer_id)
    data["created_at"] = relative_time(post.created_at, now)
    data["likes_count"] = await repo.count_post_likes(db, post.id)
    data["replies_count"] = await repo.count_post_replies(db, post.id)
    return data


async def enrich_posts(
    db: AsyncSession,
    posts: Sequence[Post],
    viewer_id: int | None = None,
    *,
    now: datetime | None = None,
    with_parent: bool = False,
) -> list[dict]:
    """
    Igual que enrich_post pero para un feed completo: 3 queries agregadas
    por el set de ids en vez de 3 por post. El orden de salida es el de `posts`.
    """
    now = now or utcnow()
    ids = [p.id for p in posts]

    likes = await repo.count_likes_for_posts(db, ids)
    replies = await repo.count_replies_for_posts(db, ids)
    liked = await repo.liked_post_ids(db, viewer_id, ids)

    items: list[dict] = []
    for post in posts:
        data = _post_base(post, with_parent=with_parent)
        data["is_liked"] = post.id in liked
        data["created_at"] = relative_time(post.created_at, now)
        data["likes_count"] = likes.get(post.id, 0)
        data["replies_count"] = replies.get(post.id, 0)
        items.append(data)
    return items


async def resolve_user(db: AsyncSession, handle: str) -> User:
    user = await get_by_username(db, handle)
    if not user:
        log.warning(f"perfil no encontrado: {handle!r}")
        raise NotFound("user not found")
    return user


# -------------------------
# FEEDS DEL PERFIL
# -------------------------
async def fetch_profile_posts(db: AsyncSession, handle: str, viewer: Viewer) -> list[dict]:
    """Posts de primer nivel del usuario, más nuevos primero."""
    user = await resolve_user(db, handle)
    posts = await repo.list_top_level_posts_by_author(db, user.id)
    return await enrich_posts(db, posts, viewer.id)


async def fetch_profile_replies(db: AsyncSession, handle: str, viewer: Viewer) -> list[dict]:
    """Respuestas del usuario (con el username del autor del post padre)."""
    user = await resolve_user(db, handle)
    posts = await repo.list_replies_by_author(db, user.id)
    return await enrich_posts(db, posts, viewer.id, with_parent=True)


async def fetch_profile_liked_posts(db: AsyncSession, handle: str, viewer: Viewer) -> list[dict]:
    """Posts que el usuario likeó, en orden de like (no de publicación)."""
    user = await resolve_user(db, handle)
    likes = await repo.list_likes_by_user(db, user.id)
    posts = [like.post for like in likes]
    return await enrich_posts(db, posts, viewer.id, with_parent=True)
